#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/parsers/markdown.py
"""Markdown to ADF conversion.

This module tokenizes Markdown with mistune and walks the block tokens,
emitting one ADF block node per token. Inline text is kept raw and handed to
the :class:`~doc2conf.parsers.inline.InlineContentResolver`, so paragraph
text can be checked for special blocks (``:::expand``, embedded HTML
tables, CSV imports, task lines) before inline resolution.

Nested checkbox lists inside ordinary list items are detected lexically:
the item's text (including the nested lines) is scanned for checkbox lines
and those become a nested task list.

"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Optional

from doc2conf.adf.builder import LocalIdGenerator, table_cell
from doc2conf.adf.nodes import (
    Blockquote,
    BulletList,
    CodeBlock,
    Document,
    Expand,
    Heading,
    ListItem,
    Node,
    OrderedList,
    Paragraph,
    Rule,
    Table,
    TableRow,
    TaskItem,
    TaskList,
    Text,
)
from doc2conf.constants import CSV_FENCE_MARKER, DEFAULT_EXPAND_TITLE, DEPS_MARKDOWN
from doc2conf.options.conversion import ConversionOptions
from doc2conf.options.csv import CsvOptions
from doc2conf.parsers.base import BaseParser
from doc2conf.parsers.csv import CsvToAdfConverter
from doc2conf.parsers.inline import IMAGE_PATTERN, InlineContentResolver, action_mark
from doc2conf.parsers.media import CSV_IMPORT_PATTERN, MediaBuilder, is_csv_target
from doc2conf.parsers.tasks import (
    TASK_LINE,
    is_checked,
    scan_task_lines,
    split_nested_tasks,
    task_state,
    task_text_content,
)
from doc2conf.uploads import AssetUploader
from doc2conf.utils.decorators import debug_timer, requires_dependencies

logger = logging.getLogger(__name__)

EXPAND_WITH_TITLE = re.compile(r"^:::expand[ \t]*(?P<title>[^\n]*?)[ \t]*\n(?P<body>.*?)\s*:::$", re.DOTALL)
EXPAND_INLINE = re.compile(r"^:::expand\s*(?P<body>.*?)\s*:::$", re.DOTALL)

_INLINE_STRIP = " \r\n\t\f"
_TEXT_TOKENS = ("block_text", "paragraph")
_ITEM_TOKENS = ("list_item", "task_list_item")


def _token_text(token: dict[str, Any]) -> str:
    return str(token.get("text", "")).strip(_INLINE_STRIP)


def _token_attrs(token: dict[str, Any]) -> dict[str, Any]:
    attrs = token.get("attrs", {})
    return attrs if isinstance(attrs, dict) else {}


def _list_items(token: dict[str, Any]) -> list[dict[str, Any]]:
    return [child for child in token.get("children", []) if child.get("type") in _ITEM_TOKENS]


def _has_task_items(token: dict[str, Any]) -> bool:
    return any(item["type"] == "task_list_item" for item in _list_items(token))


def _split_item(item: dict[str, Any]) -> tuple[str, list[dict[str, Any]]]:
    """Split a list item token into its leading text and remaining block tokens."""
    children = [child for child in item.get("children", []) if child.get("type") != "blank_line"]
    if children and children[0].get("type") in _TEXT_TOKENS:
        return _token_text(children[0]), children[1:]
    return "", children


def _list_source(token: dict[str, Any], indent: str = "  ") -> str:
    """Rebuild the source lines of a nested list, checkbox markers included."""
    attrs = _token_attrs(token)
    ordered = bool(attrs.get("ordered"))
    start = int(attrs.get("start", 1))
    lines = []
    for index, item in enumerate(_list_items(token)):
        marker = f"{start + index}." if ordered else "-"
        checkbox = ""
        if item["type"] == "task_list_item":
            checkbox = "[x] " if _token_attrs(item).get("checked") else "[ ] "
        main_text, rest = _split_item(item)
        lines.append(f"{indent}{marker} {checkbox}{main_text}")
        for child in rest:
            if child.get("type") == "list":
                lines.append(_list_source(child, indent + "  "))
    return "\n".join(lines)


class MarkdownBlockBuilder:
    """Build ADF block nodes from mistune block tokens.

    One builder serves one conversion call: it owns the local id generator,
    so task ids are unique within the produced document.

    Parameters
    ----------
    options : ConversionOptions
        Conversion options
    uploader : AssetUploader or None
        Asset store for image uploads
    ids : LocalIdGenerator or None
        Task id source, created from ``options.local_ids`` when omitted

    """

    def __init__(
        self,
        options: ConversionOptions,
        uploader: Optional[AssetUploader] = None,
        ids: Optional[LocalIdGenerator] = None,
    ) -> None:
        self.options = options
        self.ids = ids or LocalIdGenerator(options.local_ids)
        self.media = MediaBuilder(options, uploader)
        self.inline = InlineContentResolver(options, image_builder=self.media.build_image)

    def build(self, tokens: Iterable[dict[str, Any]]) -> list[Node]:
        """Build block nodes for a token sequence, dropping absorbed tokens."""
        blocks = []
        for token in tokens:
            node = self.build_block(token)
            if node is not None:
                blocks.append(node)
        return blocks

    def build_block(self, token: dict[str, Any]) -> Optional[Node]:
        """Build zero or one block node from a single token.

        Parameters
        ----------
        token : dict
            mistune block token

        Returns
        -------
        Node or None
            The block node, or None when the token produces no output

        """
        token_type = token.get("type")

        if token_type == "heading":
            level = int(_token_attrs(token).get("level", 1))
            return Heading(level=min(max(level, 1), 6), content=self.inline.resolve(_token_text(token)))
        elif token_type in _TEXT_TOKENS:
            return self._paragraph(_token_text(token))
        elif token_type == "list":
            return self._list(token)
        elif token_type == "table":
            return self._table(token)
        elif token_type == "block_code":
            return self._code_block(token)
        elif token_type == "block_quote":
            return Blockquote(content=self.build(token.get("children", [])))
        elif token_type == "thematic_break":
            return Rule()
        elif token_type == "block_html":
            raw = str(token.get("raw", "")).strip()
            if raw.lower().startswith("<table"):
                return self._html_table(raw)
            logger.debug("Skipping raw HTML block")
            return None

        if token_type != "blank_line":
            logger.debug(f"Skipping unsupported token type: {token_type}")
        return None

    def _paragraph(self, text: str) -> Optional[Node]:
        if text.startswith(":::expand"):
            expand = self._expand(text)
            if expand is not None:
                return expand

        if text.startswith("<table"):
            return self._html_table(text)

        csv_match = CSV_IMPORT_PATTERN.search(text)
        if csv_match:
            return self.media.import_csv(csv_match.group(1))

        image_match = IMAGE_PATTERN.fullmatch(text)
        if image_match:
            alt, src = image_match.group(1), image_match.group(2)
            if is_csv_target(src):
                return self.media.import_csv(src)
            return self.media.build_image(alt, src)

        task_match = TASK_LINE.match(text)
        if task_match:
            task_text = task_match.group(2)
            marks = (action_mark(is_checked(task_match.group(1))),)
            return Paragraph(content=[Text(text=task_text, marks=marks)] if task_text else [])

        return Paragraph(content=self.inline.resolve(text))

    def _expand(self, text: str) -> Optional[Expand]:
        match = EXPAND_WITH_TITLE.match(text)
        if match:
            title = match.group("title") or DEFAULT_EXPAND_TITLE
        else:
            match = EXPAND_INLINE.match(text)
            if match is None:
                return None
            title = DEFAULT_EXPAND_TITLE
        body = match.group("body")
        return Expand(title=title, content=[Paragraph(content=self.inline.resolve(body))])

    def _html_table(self, html: str) -> Optional[Node]:
        from doc2conf.parsers.html import html_table_to_adf

        return html_table_to_adf(html, self.inline)

    def _list(self, token: dict[str, Any]) -> Node:
        items = _list_items(token)
        if any(item["type"] == "task_list_item" for item in items):
            return self._task_list(items)

        content = [self._list_item(item) for item in items]
        attrs = _token_attrs(token)
        if attrs.get("ordered"):
            start = int(attrs.get("start", 1))
            return OrderedList(content=content, order=start if start != 1 else None)
        return BulletList(content=content)

    def _task_list(self, items: list[dict[str, Any]]) -> TaskList:
        content: list[Node] = []
        for item in items:
            checked = bool(_token_attrs(item).get("checked", False))
            main_text, rest = _split_item(item)
            content.append(
                TaskItem(
                    local_id=self.ids.next(),
                    state=task_state(checked),
                    content=task_text_content(main_text),
                )
            )
            for child in rest:
                if child.get("type") == "list":
                    content.append(self._task_list(_list_items(child)))
                else:
                    logger.debug(f"Dropping {child.get('type')} block inside task item")
        return TaskList(local_id=self.ids.next(), content=content)

    def _list_item(self, item: dict[str, Any]) -> ListItem:
        main_text, rest = _split_item(item)

        task_lists = [child for child in rest if child.get("type") == "list" and _has_task_items(child)]
        if task_lists:
            source = "\n".join([main_text, *(_list_source(child) for child in task_lists)])
            split = split_nested_tasks(source)
            if split is not None:
                lead, remainder = split
                blocks: list[Node] = [Paragraph(content=self.inline.resolve(lead))]
                # All checkbox lines merge into one task list, placed at the first of them
                tasks_emitted = False
                for child in rest:
                    if not any(child is t for t in task_lists):
                        blocks.extend(self.build([child]))
                    elif not tasks_emitted:
                        tasks_emitted = True
                        nested = scan_task_lines(remainder, self.ids)
                        if nested is not None:
                            blocks.append(nested)
                return ListItem(content=blocks)

        nested_blocks = self.build(rest)
        blocks = []
        if main_text or not nested_blocks:
            blocks.append(Paragraph(content=self.inline.resolve(main_text)))
        blocks.extend(nested_blocks)
        return ListItem(content=blocks)

    def _table(self, token: dict[str, Any]) -> Table:
        rows = []
        for section in token.get("children", []):
            if section.get("type") == "table_head":
                rows.append(TableRow(content=[self._cell(cell, header=True) for cell in section.get("children", [])]))
            elif section.get("type") == "table_body":
                for row in section.get("children", []):
                    rows.append(TableRow(content=[self._cell(cell) for cell in row.get("children", [])]))
        return Table(content=rows)

    def _cell(self, token: dict[str, Any], header: bool = False) -> Node:
        return table_cell(self.inline.resolve(_token_text(token)), header=header)

    def _code_block(self, token: dict[str, Any]) -> Node:
        code = str(token.get("raw", ""))
        if code.endswith("\n"):
            code = code[:-1]
        info = str(_token_attrs(token).get("info") or "").strip()

        if info.lower().startswith(CSV_FENCE_MARKER):
            try:
                return CsvToAdfConverter(CsvOptions.from_fence_info(info)).build_table(code)
            except (ValueError, TypeError) as e:
                logger.warning(f"Error parsing CSV code block, keeping it as code: {e}")
                return CodeBlock(language=CSV_FENCE_MARKER, content=[Text(text=code)] if code else [])

        language = info.split()[0] if info else None
        return CodeBlock(language=language, content=[Text(text=code)] if code else [])


class MarkdownToAdfConverter(BaseParser):
    """Convert Markdown source to an ADF document.

    Parameters
    ----------
    options : ConversionOptions or None
        Conversion options
    uploader : AssetUploader or None
        Asset store used when ``options.upload_images`` is set

    Examples
    --------
        >>> doc = MarkdownToAdfConverter().parse("- [ ] A\\n- [x] B")
        >>> [item.state for item in doc.content[0].content]
        ['TODO', 'DONE']

    """

    def __init__(self, options: ConversionOptions | None = None, *, uploader: AssetUploader | None = None) -> None:
        BaseParser._validate_options_type(options, ConversionOptions, "markdown")
        options = options or ConversionOptions()
        super().__init__(options)
        self.options: ConversionOptions = options
        self.uploader = uploader

    @requires_dependencies("markdown", DEPS_MARKDOWN)
    def parse(self, source: str) -> Document:
        """Convert Markdown text to a ``doc``-rooted tree.

        Parameters
        ----------
        source : str
            Markdown source without front matter

        Returns
        -------
        Document
            The converted document

        """
        with debug_timer(logger, "Tokenizing (markdown)"):
            tokens = self.tokenize(source)

        builder = MarkdownBlockBuilder(self.options, self.uploader)
        with debug_timer(logger, "Building ADF blocks (markdown)"):
            blocks = builder.build(tokens)
        return self._build_document(blocks, self.options.generate_toc)

    @staticmethod
    def tokenize(source: str) -> list[dict[str, Any]]:
        """Return mistune block tokens with their inline text left unparsed.

        This runs the block phase of ``mistune.Markdown.parse`` (including
        the plugins' before-render hooks, which mark task list items) but
        skips inline rendering.
        """
        import mistune

        md = mistune.create_markdown(renderer=None, plugins=["table", "task_lists"])
        state = md.block.state_cls()

        text = source.replace("\r\n", "\n").replace("\r", "\n")
        if not text.endswith("\n"):
            text += "\n"
        state.process(text)

        for before_parse in md.before_parse_hooks:
            before_parse(md, state)
        md.block.parse(state)
        for before_render in md.before_render_hooks:
            before_render(md, state)
        return list(state.tokens)
