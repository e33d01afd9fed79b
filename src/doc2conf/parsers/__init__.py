#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/parsers/__init__.py
"""Source parsers producing ADF trees."""

from doc2conf.parsers.asciidoc import AsciiDocToAdfConverter, render_with_asciidoctor
from doc2conf.parsers.base import BaseParser
from doc2conf.parsers.csv import CsvToAdfConverter, csv_to_table
from doc2conf.parsers.html import HtmlBlockBuilder, HtmlToAdfConverter, html_table_to_adf
from doc2conf.parsers.inline import InlineContentResolver
from doc2conf.parsers.macro import MacroWrapConverter
from doc2conf.parsers.markdown import MarkdownBlockBuilder, MarkdownToAdfConverter

__all__ = [
    "AsciiDocToAdfConverter",
    "BaseParser",
    "CsvToAdfConverter",
    "HtmlBlockBuilder",
    "HtmlToAdfConverter",
    "InlineContentResolver",
    "MacroWrapConverter",
    "MarkdownBlockBuilder",
    "MarkdownToAdfConverter",
    "csv_to_table",
    "html_table_to_adf",
    "render_with_asciidoctor",
]
