#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/renderers/__init__.py
"""Renderers turning ADF trees into text artifacts."""

from doc2conf.renderers.base import BaseRenderer
from doc2conf.renderers.storage import StorageRenderer

__all__ = ["BaseRenderer", "StorageRenderer"]
