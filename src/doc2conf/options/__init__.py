#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Option dataclasses for parsers and renderers."""

from doc2conf.options.base import BaseParserOptions, BaseRendererOptions, CloneFrozenMixin
from doc2conf.options.conversion import ConversionOptions
from doc2conf.options.csv import CsvOptions
from doc2conf.options.storage import StorageRendererOptions

__all__ = [
    "BaseParserOptions",
    "BaseRendererOptions",
    "CloneFrozenMixin",
    "ConversionOptions",
    "CsvOptions",
    "StorageRendererOptions",
]
