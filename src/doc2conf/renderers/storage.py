#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/renderers/storage.py
"""Confluence storage-format rendering from ADF.

This module provides the StorageRenderer class which serializes an ADF tree
into the XHTML-based *storage format* consumed by Confluence Server and Data
Center. Confluence-specific constructs become ``ac:`` structured macros:
code blocks, task lists, panels, expands, status lozenges and extension
nodes from a known macro provider.

Text is escaped exactly once, where it is emitted. Marks wrap text from the
first declared mark (outermost) to the last (innermost). Task local ids are
not part of the output, so rendering the same tree always gives the same
string.

"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from doc2conf.adf.nodes import (
    Blockquote,
    BulletList,
    CodeBlock,
    Document,
    Emoji,
    Expand,
    Extension,
    HardBreak,
    Heading,
    InlineCard,
    ListItem,
    Mark,
    Media,
    MediaSingle,
    Mention,
    Node,
    OrderedList,
    Panel,
    Paragraph,
    Rule,
    Status,
    Table,
    TableCell,
    TableHeader,
    TableRow,
    TaskItem,
    TaskList,
    Text,
    UnknownNode,
)
from doc2conf.adf.visitors import NodeVisitor
from doc2conf.constants import (
    CODE_MACRO_KEY,
    EXPAND_MACRO_KEY,
    MARKDOWN_MACRO_KEY,
    PANEL_MACRO_NAMES,
    STATUS_MACRO_KEY,
    TASKLIST_MACRO_KEY,
)
from doc2conf.options.storage import StorageRendererOptions
from doc2conf.renderers.base import BaseRenderer
from doc2conf.schema import check_root
from doc2conf.utils.html_utils import escape_html, format_attributes

logger = logging.getLogger(__name__)

_SIMPLE_MARK_TAGS = {
    "strong": "strong",
    "em": "em",
    "code": "code",
    "strike": "s",
    "underline": "u",
}

_STATUS_COLOURS = {
    "neutral": "Grey",
    "grey": "Grey",
    "purple": "Purple",
    "blue": "Blue",
    "red": "Red",
    "yellow": "Yellow",
    "green": "Green",
}


def _parameter(name: str, value: Any) -> str:
    return f'<ac:parameter ac:name="{escape_html(name)}">{escape_html(str(value))}</ac:parameter>'


def _macro(name: str, parameters: str = "", body: str = "") -> str:
    return f'<ac:structured-macro ac:name="{escape_html(name)}">{parameters}{body}</ac:structured-macro>'


def _plain_text_body(text: str) -> str:
    return f"<ac:plain-text-body><![CDATA[{text}]]></ac:plain-text-body>"


def _rich_text_body(markup: str) -> str:
    return f"<ac:rich-text-body>{markup}</ac:rich-text-body>"


class StorageRenderer(NodeVisitor, BaseRenderer):
    """Render ADF trees to Confluence storage markup.

    Parameters
    ----------
    options : StorageRendererOptions or None, default = None
        Task list title, diagram languages and macro providers

    Examples
    --------
        >>> doc = Document(content=[Paragraph(content=[Text(text="Hi", marks=[Mark(type="strong")])])])
        >>> StorageRenderer().render_to_string(doc)
        '<p><strong>Hi</strong></p>'

    """

    def __init__(self, options: StorageRendererOptions | None = None) -> None:
        BaseRenderer._validate_options_type(options, StorageRendererOptions, "storage")
        options = options or StorageRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: StorageRendererOptions = options

    def render_to_string(self, doc: Document) -> str:
        """Render a document to storage markup.

        Parameters
        ----------
        doc : Document
            Tree to render

        Returns
        -------
        str
            Storage markup

        Raises
        ------
        InvalidDocumentError
            If the root node is not a ``doc``. Nothing is rendered.

        """
        check_root(doc)
        return doc.accept(self)

    def _render_children(self, node: Node) -> str:
        return "".join(self.visit_children(node))

    # ------------------------------------------------------------------
    # Inline
    # ------------------------------------------------------------------

    def visit_text(self, node: Text) -> str:
        markup = escape_html(node.text)
        for mark in reversed(node.marks):
            markup = self._wrap_mark(mark, markup)
        return markup

    @staticmethod
    def _wrap_mark(mark: Mark, markup: str) -> str:
        tag = _SIMPLE_MARK_TAGS.get(mark.type)
        if tag:
            return f"<{tag}>{markup}</{tag}>"

        attrs = mark.attrs or {}
        if mark.type == "link" and attrs.get("href"):
            return f"<a{format_attributes({'href': attrs['href']})}>{markup}</a>"
        if mark.type == "textColor" and attrs.get("color"):
            style = f"color: {attrs['color']}"
            return f"<span{format_attributes({'style': style})}>{markup}</span>"
        if mark.type == "subsup" and attrs.get("type") in ("sub", "sup"):
            tag = attrs["type"]
            return f"<{tag}>{markup}</{tag}>"
        return markup

    def visit_hard_break(self, node: HardBreak) -> str:
        return "<br />"

    def visit_mention(self, node: Mention) -> str:
        return f'<ac:link><ri:user ri:username="{escape_html(node.id)}" /></ac:link>'

    def visit_inline_card(self, node: InlineCard) -> str:
        url = escape_html(node.url)
        return f'<a href="{url}">{url}</a>'

    def visit_status(self, node: Status) -> str:
        colour = _STATUS_COLOURS.get(node.color.lower(), node.color.capitalize())
        return _macro(STATUS_MACRO_KEY, _parameter("colour", colour) + _parameter("title", node.text))

    def visit_emoji(self, node: Emoji) -> str:
        name = (node.id or node.short_name).strip(":")
        return f'<ac:emoticon{format_attributes({"ac:name": name, "ac:emoji-shortname": node.short_name})} />'

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def visit_document(self, node: Document) -> str:
        return self._render_children(node)

    def visit_paragraph(self, node: Paragraph) -> str:
        return f"<p>{self._render_children(node)}</p>"

    def visit_heading(self, node: Heading) -> str:
        return f"<h{node.level}>{self._render_children(node)}</h{node.level}>"

    def visit_rule(self, node: Rule) -> str:
        return "<hr />"

    def visit_blockquote(self, node: Blockquote) -> str:
        return f"<blockquote>{self._render_children(node)}</blockquote>"

    def visit_bullet_list(self, node: BulletList) -> str:
        return f"<ul>{self._render_children(node)}</ul>"

    def visit_ordered_list(self, node: OrderedList) -> str:
        return f"<ol{format_attributes({'start': node.order})}>{self._render_children(node)}</ol>"

    def visit_list_item(self, node: ListItem) -> str:
        return f"<li>{self._render_children(node)}</li>"

    def visit_code_block(self, node: CodeBlock) -> str:
        code = escape_html(node.code)
        language = (node.language or "").lower()
        if language and language in self.options.diagram_languages:
            return _macro(MARKDOWN_MACRO_KEY, body=_plain_text_body(f"```{language}\n{code}\n```"))

        parameters = _parameter("language", node.language) if node.language else ""
        return _macro(CODE_MACRO_KEY, parameters, _plain_text_body(code))

    def visit_task_list(self, node: TaskList) -> str:
        return _macro(
            TASKLIST_MACRO_KEY,
            _parameter("title", self.options.task_list_title),
            _rich_text_body(self._render_tasks(node)),
        )

    def _render_tasks(self, node: TaskList) -> str:
        """Render task items, flattening nested task lists into the same macro."""
        parts = []
        for child in node.content:
            if isinstance(child, TaskList):
                parts.append(self._render_tasks(child))
            else:
                parts.append(child.accept(self))
        return "".join(parts)

    def visit_task_item(self, node: TaskItem) -> str:
        status = "complete" if node.done else "incomplete"
        return (
            f"<ac:task><ac:task-status>{status}</ac:task-status>"
            f"<ac:task-body>{self._render_children(node)}</ac:task-body></ac:task>"
        )

    def visit_table(self, node: Table) -> str:
        return f"<table><tbody>{self._render_children(node)}</tbody></table>"

    def visit_table_row(self, node: TableRow) -> str:
        return f"<tr>{self._render_children(node)}</tr>"

    def _render_cell(self, tag: str, node: TableCell) -> str:
        attrs = {
            "colspan": node.colspan if node.colspan > 1 else None,
            "rowspan": node.rowspan if node.rowspan > 1 else None,
        }
        return f"<{tag}{format_attributes(attrs)}>{self._render_children(node)}</{tag}>"

    def visit_table_cell(self, node: TableCell) -> str:
        return self._render_cell("td", node)

    def visit_table_header(self, node: TableHeader) -> str:
        return self._render_cell("th", node)

    def visit_panel(self, node: Panel) -> str:
        name = PANEL_MACRO_NAMES.get(node.panel_type, "info")
        return _macro(name, body=_rich_text_body(self._render_children(node)))

    def visit_expand(self, node: Expand) -> str:
        parameters = _parameter("title", node.title) if node.title else ""
        return _macro(EXPAND_MACRO_KEY, parameters, _rich_text_body(self._render_children(node)))

    def visit_media_single(self, node: MediaSingle) -> str:
        return self._render_children(node)

    def visit_media(self, node: Media) -> str:
        attrs = format_attributes({"ac:alt": node.alt or None})
        if node.media_type == "file":
            resource = f"<ri:attachment{format_attributes({'ri:filename': node.file_name or node.id})} />"
        else:
            resource = f"<ri:url{format_attributes({'ri:value': node.url or ''})} />"
        return f"<ac:image{attrs}>{resource}</ac:image>"

    def visit_extension(self, node: Extension) -> str:
        if node.extension_type not in self.options.macro_providers:
            logger.debug(f"Rendering children of extension from unknown provider {node.extension_type}")
            return self._render_children(node)

        parameters = "".join(
            _parameter(name, self._param_value(value)) for name, value in node.macro_params.items()
        )
        if not node.content:
            body = ""
        elif all(isinstance(child, Text) for child in node.content):
            body = _plain_text_body(escape_html("".join(child.text for child in node.content)))
        else:
            body = _rich_text_body(self._render_children(node))
        return _macro(node.extension_key, parameters, body)

    @staticmethod
    def _param_value(value: Any) -> Any:
        if isinstance(value, Mapping):
            return value.get("value", "")
        return value

    def visit_unknown(self, node: UnknownNode) -> str:
        logger.debug(f"Rendering children of unknown node type {node.node_type}")
        if node.text is not None and not node.content:
            return escape_html(node.text)
        return self._render_children(node)
