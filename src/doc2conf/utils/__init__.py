#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Shared helpers for doc2conf parsers and renderers."""
