#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/parsers/html.py
"""HTML DOM to ADF conversion.

This module walks a BeautifulSoup tree and emits ADF block nodes. It serves
two callers: AsciiDoc sources, which are rendered to HTML by Asciidoctor
first, and HTML tables embedded in Markdown paragraphs.

Asciidoctor wraps most blocks in ``div`` elements whose class names the
block kind (``listingblock``, ``admonitionblock``, ``quoteblock``,
``imageblock``). Those classes are recognized; any other container is
flattened into its children.

"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Any, Optional

from doc2conf.adf.builder import LocalIdGenerator, table_cell
from doc2conf.adf.nodes import (
    Blockquote,
    BulletList,
    CodeBlock,
    Document,
    Expand,
    HardBreak,
    Heading,
    ListItem,
    Mark,
    Node,
    OrderedList,
    Panel,
    Paragraph,
    Rule,
    Table,
    TableCell,
    TableHeader,
    TableRow,
    TaskItem,
    TaskList,
    Text,
)
from doc2conf.constants import ADMONITION_PANEL_TYPES, CSV_FENCE_MARKER, DEFAULT_EXPAND_TITLE, DEPS_HTML
from doc2conf.options.conversion import ConversionOptions
from doc2conf.options.csv import CsvOptions
from doc2conf.parsers.base import BaseParser
from doc2conf.parsers.csv import CsvToAdfConverter
from doc2conf.parsers.inline import InlineContentResolver
from doc2conf.parsers.media import MediaBuilder
from doc2conf.parsers.tasks import task_state
from doc2conf.uploads import AssetUploader
from doc2conf.utils.decorators import requires_dependencies

logger = logging.getLogger(__name__)

CHECKED_GLYPH = "✓"
UNCHECKED_GLYPH = "❏"
CHECKED_ICON_CLASS = "fa-check-square-o"
UNCHECKED_ICON_CLASS = "fa-square-o"

_WHITESPACE = re.compile(r"\s+")
_LANGUAGE_CLASS = re.compile(r"^(?:language|lang)-(.+)$")

_INLINE_MARKS: dict[str, Mark] = {
    "strong": Mark(type="strong"),
    "b": Mark(type="strong"),
    "em": Mark(type="em"),
    "i": Mark(type="em"),
    "s": Mark(type="strike"),
    "del": Mark(type="strike"),
    "strike": Mark(type="strike"),
    "u": Mark(type="underline"),
    "sub": Mark(type="subsup", attrs={"type": "sub"}),
    "sup": Mark(type="subsup", attrs={"type": "sup"}),
}


def _classes(tag: Any) -> list[str]:
    value = tag.get("class") or []
    return value.split() if isinstance(value, str) else list(value)


def _trim_inline(nodes: list[Node]) -> list[Node]:
    """Drop whitespace and breaks at the edges of an inline run."""
    nodes = list(nodes)
    while nodes and (isinstance(nodes[0], HardBreak) or (isinstance(nodes[0], Text) and not nodes[0].text.strip())):
        nodes.pop(0)
    while nodes and (isinstance(nodes[-1], HardBreak) or (isinstance(nodes[-1], Text) and not nodes[-1].text.strip())):
        nodes.pop()
    if nodes and isinstance(nodes[0], Text):
        nodes[0] = replace(nodes[0], text=nodes[0].text.lstrip())
    if nodes and isinstance(nodes[-1], Text):
        nodes[-1] = replace(nodes[-1], text=nodes[-1].text.rstrip())
    return nodes


class HtmlBlockBuilder:
    """Build ADF block nodes from a BeautifulSoup tree.

    Parameters
    ----------
    options : ConversionOptions
        Conversion options
    uploader : AssetUploader or None
        Asset store for image uploads
    ids : LocalIdGenerator or None
        Task id source, created from ``options.local_ids`` when omitted
    inline : InlineContentResolver or None
        Resolver used for text leaves, created from ``options`` when omitted

    """

    BLOCK_ELEMENTS = frozenset(
        {
            "address",
            "article",
            "aside",
            "blockquote",
            "dd",
            "details",
            "div",
            "dl",
            "dt",
            "figcaption",
            "figure",
            "footer",
            "h1",
            "h2",
            "h3",
            "h4",
            "h5",
            "h6",
            "header",
            "hr",
            "img",
            "li",
            "main",
            "nav",
            "ol",
            "p",
            "pre",
            "section",
            "table",
            "ul",
        }
    )

    _ELEMENT_HANDLERS = {
        "h1": "_process_heading",
        "h2": "_process_heading",
        "h3": "_process_heading",
        "h4": "_process_heading",
        "h5": "_process_heading",
        "h6": "_process_heading",
        "p": "_process_paragraph",
        "ul": "_process_list",
        "ol": "_process_list",
        "pre": "_process_code_block",
        "table": "process_table",
        "blockquote": "_process_blockquote",
        "details": "_process_details",
        "img": "_process_image",
        "hr": "_process_rule",
    }

    _SKIPPED_ELEMENTS = frozenset({"script", "style", "colgroup", "col", "input"})

    def __init__(
        self,
        options: ConversionOptions,
        uploader: Optional[AssetUploader] = None,
        ids: Optional[LocalIdGenerator] = None,
        inline: Optional[InlineContentResolver] = None,
    ) -> None:
        self.options = options
        self.ids = ids or LocalIdGenerator(options.local_ids)
        self.media = MediaBuilder(options, uploader)
        self.inline = inline or InlineContentResolver(options, image_builder=self.media.build_image)

    def _is_block_element(self, node: Any) -> bool:
        name = getattr(node, "name", None)
        return isinstance(name, str) and name in self.BLOCK_ELEMENTS

    def _has_block_children(self, node: Any) -> bool:
        return any(self._is_block_element(child) for child in getattr(node, "children", ()))

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def process_blocks(self, parent: Any) -> list[Node]:
        """Convert the children of ``parent`` into block nodes.

        Inline content found between blocks is gathered into paragraphs.
        """
        blocks: list[Node] = []
        inline_buffer: list[Node] = []

        def flush() -> None:
            content = _trim_inline(inline_buffer)
            if content:
                blocks.append(Paragraph(content=content))
            inline_buffer.clear()

        for child in getattr(parent, "children", ()):
            if self._is_block_element(child):
                flush()
                blocks.extend(self.process_block(child))
            else:
                inline_buffer.extend(self.process_inline(child))
        flush()
        return blocks

    def process_block(self, node: Any) -> list[Node]:
        """Convert one block element into zero or more block nodes."""
        if node.name in self._SKIPPED_ELEMENTS:
            return []

        if node.name == "div":
            classes = _classes(node)
            if "admonitionblock" in classes:
                return [self._process_admonition(node, classes)]
            if "listingblock" in classes or "literalblock" in classes:
                pre = node.find("pre")
                if pre is not None:
                    return self._process_code_block(pre)
            if "quoteblock" in classes or "verseblock" in classes:
                return self._process_quote_block(node)

        handler_name = self._ELEMENT_HANDLERS.get(node.name)
        if handler_name:
            return getattr(self, handler_name)(node)

        return self._process_container(node)

    def _process_container(self, node: Any) -> list[Node]:
        if self._has_block_children(node):
            return self.process_blocks(node)
        content = _trim_inline(self.process_inline(node))
        return [Paragraph(content=content)] if content else []

    def _process_heading(self, node: Any) -> list[Node]:
        level = int(node.name[1])
        return [Heading(level=level, content=_trim_inline(self._inline_children(node)))]

    def _process_paragraph(self, node: Any) -> list[Node]:
        content = _trim_inline(self._inline_children(node))
        return [Paragraph(content=content)] if content else []

    def _process_rule(self, node: Any) -> list[Node]:
        return [Rule()]

    def _process_image(self, node: Any) -> list[Node]:
        src = node.get("src")
        if not src:
            return []
        return [self.media.build_image(node.get("alt") or "", src)]

    def _process_blockquote(self, node: Any) -> list[Node]:
        return [Blockquote(content=self.process_blocks(node))]

    def _process_quote_block(self, node: Any) -> list[Node]:
        quote = node.find("blockquote") or node.find(class_="content")
        blocks = self.process_blocks(quote) if quote is not None else []
        attribution = node.find(class_="attribution")
        if attribution is not None:
            content = _trim_inline(self.process_inline(attribution))
            if content:
                blocks.append(Paragraph(content=content))
        return [Blockquote(content=blocks)]

    def _process_admonition(self, node: Any, classes: list[str]) -> Node:
        panel_type = next((ADMONITION_PANEL_TYPES[c] for c in classes if c in ADMONITION_PANEL_TYPES), "info")
        body = node.find("td", class_="content") or node
        blocks = self.process_blocks(body) if self._has_block_children(body) else self._process_container(body)
        return Panel(panel_type=panel_type, content=blocks or [Paragraph()])

    def _process_details(self, node: Any) -> list[Node]:
        summary = node.find("summary")
        title = _WHITESPACE.sub(" ", summary.get_text()).strip() if summary is not None else ""
        if summary is not None:
            summary.extract()
        blocks = self.process_blocks(node)
        return [Expand(title=title or DEFAULT_EXPAND_TITLE, content=blocks or [Paragraph()])]

    def _process_code_block(self, node: Any) -> list[Node]:
        code = node.get_text()
        if code.endswith("\n"):
            code = code[:-1]
        language = self._extract_language(node)

        if language and language.lower() == CSV_FENCE_MARKER:
            try:
                return [CsvToAdfConverter(CsvOptions()).build_table(code)]
            except (ValueError, TypeError) as e:
                logger.warning(f"Error parsing CSV listing, keeping it as code: {e}")

        return [CodeBlock(language=language, content=[Text(text=code)] if code else [])]

    @staticmethod
    def _extract_language(node: Any) -> Optional[str]:
        """Find the language on ``pre`` or its ``code`` child."""
        candidates = [node]
        code = node.find("code")
        if code is not None:
            candidates.insert(0, code)
        for candidate in candidates:
            if candidate.get("data-lang"):
                return str(candidate["data-lang"])
            for cls in _classes(candidate):
                match = _LANGUAGE_CLASS.match(cls)
                if match:
                    return match.group(1)
        return None

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    def _process_list(self, node: Any) -> list[Node]:
        items = node.find_all("li", recursive=False)
        states = [self._checkbox_state(li) for li in items]
        if "checklist" in _classes(node) or any(state is not None for state in states):
            return [self._task_list(items, states)]

        content = [self._list_item(li) for li in items]
        if node.name == "ol":
            try:
                start = int(node.get("start", 1))
            except (TypeError, ValueError):
                start = 1
            return [OrderedList(content=content, order=start if start != 1 else None)]
        return [BulletList(content=content)]

    def _checkbox_state(self, li: Any) -> Optional[bool]:
        """Read and remove the checkbox marker of a list item.

        Returns True for checked, False for unchecked and None when the item
        carries no marker.
        """
        for marker in li.find_all(["input", "i"]):
            if marker.find_parent("li") is not li:
                continue
            if marker.name == "input" and marker.get("type") == "checkbox":
                checked = marker.has_attr("checked") or marker.get("data-item-complete") == "1"
                marker.decompose()
                return checked
            classes = _classes(marker)
            if CHECKED_ICON_CLASS in classes:
                marker.decompose()
                return True
            if UNCHECKED_ICON_CLASS in classes:
                marker.decompose()
                return False

        from bs4.element import NavigableString

        for string in li.find_all(string=True):
            if not string.strip():
                continue
            if string.find_parent("li") is not li:
                return None
            stripped = string.lstrip()
            if stripped[0] in (CHECKED_GLYPH, UNCHECKED_GLYPH):
                string.replace_with(NavigableString(stripped[1:].lstrip()))
                return stripped[0] == CHECKED_GLYPH
            return None
        return None

    def _list_item_parts(self, li: Any) -> tuple[list[Node], list[Node]]:
        """Split a list item into its leading inline content and its blocks."""
        inline: list[Node] = []
        blocks: list[Node] = []
        for child in li.children:
            if getattr(child, "name", None) == "p" and not _trim_inline(inline) and not blocks:
                inline = self._inline_children(child)
            elif self._is_block_element(child):
                blocks.extend(self.process_block(child))
            elif not blocks:
                inline.extend(self.process_inline(child))
        return _trim_inline(inline), blocks

    def _list_item(self, li: Any) -> ListItem:
        inline, blocks = self._list_item_parts(li)
        content: list[Node] = []
        if inline or not blocks or not isinstance(blocks[0], Paragraph):
            content.append(Paragraph(content=inline))
        content.extend(blocks)
        return ListItem(content=content)

    def _task_list(self, items: list[Any], states: list[Optional[bool]]) -> TaskList:
        content: list[Node] = []
        for li, checked in zip(items, states):
            inline, blocks = self._list_item_parts(li)
            content.append(TaskItem(local_id=self.ids.next(), state=task_state(bool(checked)), content=inline))
            for block in blocks:
                if isinstance(block, TaskList):
                    content.append(block)
                else:
                    logger.debug(f"Dropping {block.type} block inside task item")
        return TaskList(local_id=self.ids.next(), content=content)

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def process_table(self, node: Any) -> list[Node]:
        rows = []
        for tr in node.find_all("tr"):
            if tr.find_parent("table") is not node:
                continue
            cells = [self._table_cell(cell) for cell in tr.find_all(["th", "td"], recursive=False)]
            rows.append(TableRow(content=cells))
        return [Table(content=rows)]

    def _table_cell(self, cell: Any) -> Node:
        header = cell.name == "th"
        colspan = self._span(cell, "colspan")
        rowspan = self._span(cell, "rowspan")
        if self._has_block_children(cell):
            blocks = self.process_blocks(cell)
            cell_cls = TableHeader if header else TableCell
            return cell_cls(content=blocks or [Paragraph()], colspan=colspan, rowspan=rowspan)
        content = _trim_inline(self.process_inline(cell))
        return table_cell(content, header=header, colspan=colspan, rowspan=rowspan)

    @staticmethod
    def _span(cell: Any, name: str) -> int:
        try:
            return max(int(cell.get(name, 1)), 1)
        except (TypeError, ValueError):
            return 1

    # ------------------------------------------------------------------
    # Inline
    # ------------------------------------------------------------------

    def _inline_children(self, node: Any, marks: tuple[Mark, ...] = ()) -> list[Node]:
        nodes: list[Node] = []
        for child in node.children:
            nodes.extend(self.process_inline(child, marks))
        return nodes

    def process_inline(self, node: Any, marks: tuple[Mark, ...] = ()) -> list[Node]:
        """Convert an inline DOM node into ADF leaf nodes carrying ``marks``."""
        from bs4.element import Comment, NavigableString

        if isinstance(node, Comment):
            return []
        if isinstance(node, NavigableString):
            text = _WHITESPACE.sub(" ", str(node))
            if not text:
                return []
            return self.inline.split_tokens(text, marks)

        name = getattr(node, "name", None)
        if name is None or name in self._SKIPPED_ELEMENTS:
            return []
        if name == "br":
            return [HardBreak()]
        if name == "img":
            alt = node.get("alt") or ""
            return [Text(text=alt, marks=marks)] if alt else []
        if name == "code":
            code = node.get_text()
            return [Text(text=code, marks=marks + (Mark(type="code"),))] if code else []
        if name == "a" and node.get("href"):
            label = _WHITESPACE.sub(" ", node.get_text()).strip()
            if not label:
                return []
            return [Text(text=label, marks=marks + (Mark(type="link", attrs={"href": node["href"]}),))]

        if name == "i" and any(cls.startswith("fa") for cls in _classes(node)):
            return []
        mark = _INLINE_MARKS.get(name)
        return self._inline_children(node, marks + (mark,) if mark else marks)


class HtmlToAdfConverter(BaseParser):
    """Convert an HTML fragment to an ADF document.

    Parameters
    ----------
    options : ConversionOptions or None
        Conversion options
    uploader : AssetUploader or None
        Asset store used when ``options.upload_images`` is set

    """

    def __init__(self, options: ConversionOptions | None = None, *, uploader: AssetUploader | None = None) -> None:
        BaseParser._validate_options_type(options, ConversionOptions, "html")
        options = options or ConversionOptions()
        super().__init__(options)
        self.options: ConversionOptions = options
        self.uploader = uploader

    @requires_dependencies("html", DEPS_HTML)
    def parse(self, source: str) -> Document:
        """Convert an HTML fragment to a ``doc``-rooted tree."""
        from bs4 import BeautifulSoup

        soup = BeautifulSoup(source, "html.parser")
        builder = HtmlBlockBuilder(self.options, self.uploader)
        return self._build_document(builder.process_blocks(soup), self.options.generate_toc)


@requires_dependencies("html", DEPS_HTML)
def html_table_to_adf(html: str, inline: Optional[InlineContentResolver] = None) -> Optional[Node]:
    """Convert the first ``<table>`` of an HTML snippet to an ADF table.

    Parameters
    ----------
    html : str
        HTML text starting with a table
    inline : InlineContentResolver or None
        Resolver for cell text, sharing the caller's options

    Returns
    -------
    Node or None
        The table, or None when the snippet holds no table

    """
    from bs4 import BeautifulSoup

    table = BeautifulSoup(html, "html.parser").find("table")
    if table is None:
        logger.warning("Embedded HTML did not contain a table")
        return None
    options = inline.options if inline is not None else ConversionOptions()
    builder = HtmlBlockBuilder(options, inline=inline)
    return builder.process_table(table)[0]
