#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/parsers/macro.py
"""Macro-wrap path.

Instead of converting the source node by node, the whole source is placed
in a single macro so Confluence renders it itself. The ``markdown`` macro
receives the trimmed source verbatim; the ``html`` macro receives the
trimmed source rendered to HTML by mistune.
"""

from __future__ import annotations

import logging

from doc2conf.adf.builder import macro_extension
from doc2conf.adf.nodes import Document
from doc2conf.constants import DEPS_MARKDOWN, HTML_MACRO_KEY, MARKDOWN_MACRO_KEY
from doc2conf.options.conversion import ConversionOptions
from doc2conf.parsers.base import BaseParser
from doc2conf.utils.decorators import requires_dependencies

logger = logging.getLogger(__name__)


def render_markdown_html(source: str) -> str:
    """Render Markdown to HTML with the table, strikethrough and task list plugins."""
    import mistune

    md = mistune.create_markdown(plugins=["strikethrough", "table", "task_lists"])
    return str(md(source))


class MacroWrapConverter(BaseParser):
    """Wrap a whole source in one ``markdown`` or ``html`` macro.

    Parameters
    ----------
    options : ConversionOptions or None
        ``macro_format`` selects the macro; ``markdown`` when unset

    Examples
    --------
        >>> doc = MacroWrapConverter(ConversionOptions(macro_format="markdown")).parse("  # Hi\\n")
        >>> doc.content[0].content[0].text
        '# Hi'

    """

    def __init__(self, options: ConversionOptions | None = None) -> None:
        BaseParser._validate_options_type(options, ConversionOptions, "macro")
        options = options or ConversionOptions(macro_format=MARKDOWN_MACRO_KEY)
        super().__init__(options)
        self.options: ConversionOptions = options

    def parse(self, source: str) -> Document:
        body = source.strip()
        if self.options.macro_format == HTML_MACRO_KEY:
            logger.debug("Wrapping source in html macro")
            return Document(content=[macro_extension(HTML_MACRO_KEY, self._render_html(body))])

        logger.debug("Wrapping source in markdown macro")
        return Document(content=[macro_extension(MARKDOWN_MACRO_KEY, body)])

    @staticmethod
    @requires_dependencies("macro", DEPS_MARKDOWN)
    def _render_html(body: str) -> str:
        return render_markdown_html(body)
