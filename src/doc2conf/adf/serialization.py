#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/adf/serialization.py
"""Conversion between ADF node trees and their JSON wire form.

The wire form is what Confluence Cloud accepts as a page body with the
``atlas_doc_format`` representation:

- ``attrs`` is omitted when a node has none;
- ``marks`` is omitted when a text leaf has none;
- containers always carry a ``content`` list, which may be empty.

Examples
--------
    >>> doc = Document(content=[Paragraph(content=[Text(text="Hi")])])
    >>> adf_to_dict(doc)
    {'type': 'doc', 'version': 1, 'content': [{'type': 'paragraph', 'content': [{'type': 'text', 'text': 'Hi'}]}]}

"""

from __future__ import annotations

import json
from typing import Any, Callable, Mapping

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
from doc2conf.exceptions import ValidationError


def _compact(attrs: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in attrs.items() if value is not None}


def mark_to_dict(mark: Mark) -> dict[str, Any]:
    result: dict[str, Any] = {"type": mark.type}
    if mark.attrs:
        result["attrs"] = dict(mark.attrs)
    return result


class AdfDictSerializer(NodeVisitor):
    """Visitor producing JSON-compatible dicts from ADF nodes."""

    def _node(self, node: Node, attrs: Mapping[str, Any] | None = None, container: bool = True) -> dict[str, Any]:
        result: dict[str, Any] = {"type": node.type}
        compacted = _compact(attrs or {})
        if compacted:
            result["attrs"] = compacted
        if container:
            result["content"] = self.visit_children(node)
        return result

    def visit_document(self, node: Document) -> dict[str, Any]:
        return {"type": node.type, "version": node.version, "content": self.visit_children(node)}

    def visit_paragraph(self, node: Paragraph) -> dict[str, Any]:
        return self._node(node)

    def visit_heading(self, node: Heading) -> dict[str, Any]:
        return self._node(node, {"level": node.level})

    def visit_text(self, node: Text) -> dict[str, Any]:
        result: dict[str, Any] = {"type": node.type, "text": node.text}
        if node.marks:
            result["marks"] = [mark_to_dict(mark) for mark in node.marks]
        return result

    def visit_hard_break(self, node: HardBreak) -> dict[str, Any]:
        return self._node(node, container=False)

    def visit_rule(self, node: Rule) -> dict[str, Any]:
        return self._node(node, container=False)

    def visit_code_block(self, node: CodeBlock) -> dict[str, Any]:
        return self._node(node, {"language": node.language})

    def visit_blockquote(self, node: Blockquote) -> dict[str, Any]:
        return self._node(node)

    def visit_bullet_list(self, node: BulletList) -> dict[str, Any]:
        return self._node(node)

    def visit_ordered_list(self, node: OrderedList) -> dict[str, Any]:
        return self._node(node, {"order": node.order})

    def visit_list_item(self, node: ListItem) -> dict[str, Any]:
        return self._node(node)

    def visit_task_list(self, node: TaskList) -> dict[str, Any]:
        return self._node(node, {"localId": node.local_id})

    def visit_task_item(self, node: TaskItem) -> dict[str, Any]:
        return self._node(node, {"localId": node.local_id, "state": node.state})

    def visit_table(self, node: Table) -> dict[str, Any]:
        return self._node(node, {"isNumberColumnEnabled": node.is_number_column_enabled, "layout": node.layout})

    def visit_table_row(self, node: TableRow) -> dict[str, Any]:
        return self._node(node)

    def _cell(self, node: TableCell) -> dict[str, Any]:
        return self._node(node, {"colspan": node.colspan, "rowspan": node.rowspan, "background": node.background})

    def visit_table_cell(self, node: TableCell) -> dict[str, Any]:
        return self._cell(node)

    def visit_table_header(self, node: TableHeader) -> dict[str, Any]:
        return self._cell(node)

    def visit_panel(self, node: Panel) -> dict[str, Any]:
        return self._node(node, {"panelType": node.panel_type})

    def visit_expand(self, node: Expand) -> dict[str, Any]:
        return self._node(node, {"title": node.title})

    def visit_media_single(self, node: MediaSingle) -> dict[str, Any]:
        return self._node(node, {"layout": node.layout})

    def visit_media(self, node: Media) -> dict[str, Any]:
        attrs = {
            "type": node.media_type,
            "id": node.id,
            "collection": node.collection,
            "url": node.url,
            "alt": node.alt,
            "__fileName": node.file_name,
        }
        return self._node(node, attrs, container=False)

    def visit_extension(self, node: Extension) -> dict[str, Any]:
        attrs = {
            "extensionType": node.extension_type,
            "extensionKey": node.extension_key,
            "parameters": dict(node.parameters),
        }
        return self._node(node, attrs)

    def visit_mention(self, node: Mention) -> dict[str, Any]:
        return self._node(node, {"id": node.id, "text": node.text, "accessLevel": node.access_level}, container=False)

    def visit_inline_card(self, node: InlineCard) -> dict[str, Any]:
        return self._node(node, {"url": node.url}, container=False)

    def visit_status(self, node: Status) -> dict[str, Any]:
        return self._node(node, {"text": node.text, "color": node.color, "localId": node.local_id}, container=False)

    def visit_emoji(self, node: Emoji) -> dict[str, Any]:
        return self._node(node, {"shortName": node.short_name, "id": node.id, "text": node.text}, container=False)

    def visit_unknown(self, node: UnknownNode) -> dict[str, Any]:
        result: dict[str, Any] = {"type": node.node_type}
        if node.attrs:
            result["attrs"] = dict(node.attrs)
        if node.text is not None:
            result["text"] = node.text
        if node.marks:
            result["marks"] = [mark_to_dict(mark) for mark in node.marks]
        if node.content:
            result["content"] = self.visit_children(node)
        return result


def adf_to_dict(node: Node) -> dict[str, Any]:
    """Serialize an ADF node (usually a Document) to a JSON-compatible dict.

    Parameters
    ----------
    node : Node
        Node to serialize

    Returns
    -------
    dict
        Wire representation of the node and its descendants

    """
    if not isinstance(node, Node):
        raise ValidationError(
            f"Cannot serialize object of type {type(node).__name__} as ADF",
            parameter_name="node",
            parameter_value=node,
        )
    return node.accept(AdfDictSerializer())


def adf_to_json(node: Node, indent: int | None = 2) -> str:
    """Serialize an ADF node to a JSON string."""
    return json.dumps(adf_to_dict(node), indent=indent, ensure_ascii=False)


def _deserialize_marks(data: Mapping[str, Any]) -> list[Mark]:
    marks = []
    for mark_data in data.get("marks") or []:
        if not isinstance(mark_data, Mapping) or not isinstance(mark_data.get("type"), str):
            raise ValidationError("Mark must be an object with a string 'type'", parameter_name="marks")
        marks.append(Mark(type=mark_data["type"], attrs=dict(mark_data.get("attrs") or {})))
    return marks


def _deserialize_children(data: Mapping[str, Any]) -> list[Node]:
    children = data.get("content") or []
    if not isinstance(children, list):
        raise ValidationError("'content' must be a list", parameter_name="content", parameter_value=children)
    return [dict_to_adf(child) for child in children]


def _cell_kwargs(data: Mapping[str, Any], attrs: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "content": _deserialize_children(data),
        "colspan": int(attrs.get("colspan") or 1),
        "rowspan": int(attrs.get("rowspan") or 1),
        "background": attrs.get("background"),
    }


_Deserializer = Callable[[Mapping[str, Any], Mapping[str, Any]], Node]

_DESERIALIZERS: dict[str, _Deserializer] = {
    "doc": lambda d, a: Document(content=_deserialize_children(d), version=int(d.get("version", 1))),
    "paragraph": lambda d, a: Paragraph(content=_deserialize_children(d)),
    "heading": lambda d, a: Heading(level=int(a.get("level", 1)), content=_deserialize_children(d)),
    "text": lambda d, a: Text(text=str(d.get("text", "")), marks=_deserialize_marks(d)),
    "hardBreak": lambda d, a: HardBreak(),
    "rule": lambda d, a: Rule(),
    "codeBlock": lambda d, a: CodeBlock(content=_deserialize_children(d), language=a.get("language")),
    "blockquote": lambda d, a: Blockquote(content=_deserialize_children(d)),
    "bulletList": lambda d, a: BulletList(content=_deserialize_children(d)),
    "orderedList": lambda d, a: OrderedList(content=_deserialize_children(d), order=a.get("order")),
    "listItem": lambda d, a: ListItem(content=_deserialize_children(d)),
    "taskList": lambda d, a: TaskList(content=_deserialize_children(d), local_id=a.get("localId")),
    "taskItem": lambda d, a: TaskItem(
        content=_deserialize_children(d), state=a.get("state", "TODO"), local_id=a.get("localId")
    ),
    "table": lambda d, a: Table(
        content=_deserialize_children(d),
        is_number_column_enabled=a.get("isNumberColumnEnabled"),
        layout=a.get("layout"),
    ),
    "tableRow": lambda d, a: TableRow(content=_deserialize_children(d)),
    "tableCell": lambda d, a: TableCell(**_cell_kwargs(d, a)),
    "tableHeader": lambda d, a: TableHeader(**_cell_kwargs(d, a)),
    "panel": lambda d, a: Panel(content=_deserialize_children(d), panel_type=a.get("panelType", "info")),
    "expand": lambda d, a: Expand(content=_deserialize_children(d), title=a.get("title", "")),
    "mediaSingle": lambda d, a: MediaSingle(content=_deserialize_children(d), layout=a.get("layout", "center")),
    "media": lambda d, a: Media(
        media_type=a.get("type", "external"),
        id=a.get("id"),
        collection=a.get("collection"),
        url=a.get("url"),
        alt=a.get("alt"),
        file_name=a.get("__fileName"),
    ),
    "extension": lambda d, a: Extension(
        extension_key=a.get("extensionKey", ""),
        extension_type=a.get("extensionType", ""),
        parameters=dict(a.get("parameters") or {}),
        content=_deserialize_children(d),
    ),
    "mention": lambda d, a: Mention(
        id=str(a.get("id", "")), text=a.get("text", ""), access_level=a.get("accessLevel", "CONTAINER")
    ),
    "inlineCard": lambda d, a: InlineCard(url=a.get("url", "")),
    "status": lambda d, a: Status(text=a.get("text", ""), color=a.get("color", "grey"), local_id=a.get("localId")),
    "emoji": lambda d, a: Emoji(short_name=a.get("shortName", ""), id=a.get("id"), text=a.get("text")),
}


def dict_to_adf(data: Mapping[str, Any]) -> Node:
    """Deserialize a wire dict to an ADF node.

    Types outside the modelled set become :class:`UnknownNode` instances that
    keep their raw attributes and children.

    Parameters
    ----------
    data : Mapping
        Wire representation with at least a ``type`` key

    Returns
    -------
    Node
        Deserialized node

    Raises
    ------
    ValidationError
        If ``data`` is not a mapping or has no string ``type``

    """
    if not isinstance(data, Mapping):
        raise ValidationError(
            f"ADF node must be an object, got {type(data).__name__}", parameter_name="node", parameter_value=data
        )
    node_type = data.get("type")
    if not isinstance(node_type, str):
        raise ValidationError("ADF node is missing a string 'type'", parameter_name="type", parameter_value=node_type)

    attrs = data.get("attrs") or {}
    if not isinstance(attrs, Mapping):
        raise ValidationError("'attrs' must be an object", parameter_name="attrs", parameter_value=attrs)

    deserializer = _DESERIALIZERS.get(node_type)
    if deserializer is None:
        text = data.get("text")
        return UnknownNode(
            node_type=node_type,
            attrs=dict(attrs),
            content=_deserialize_children(data),
            text=text if isinstance(text, str) else None,
            marks=_deserialize_marks(data),
        )
    try:
        return deserializer(data, attrs)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            f"Invalid '{node_type}' node: {e}", parameter_name="type", parameter_value=node_type, original_error=e
        ) from e


def json_to_adf(text: str) -> Node:
    """Deserialize a JSON string to an ADF node."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid ADF JSON: {e}", original_error=e) from e
    return dict_to_adf(data)
