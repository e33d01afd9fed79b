#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/adf/__init__.py
"""Atlassian Document Format tree model.

This package holds the immutable node classes, the visitor base class and
the conversion to and from the JSON wire form.

"""

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
    get_node_type,
)
from doc2conf.adf.serialization import adf_to_dict, adf_to_json, dict_to_adf, json_to_adf
from doc2conf.adf.visitors import NodeVisitor

__all__ = [
    "Blockquote",
    "BulletList",
    "CodeBlock",
    "Document",
    "Emoji",
    "Expand",
    "Extension",
    "HardBreak",
    "Heading",
    "InlineCard",
    "ListItem",
    "Mark",
    "Media",
    "MediaSingle",
    "Mention",
    "Node",
    "NodeVisitor",
    "OrderedList",
    "Panel",
    "Paragraph",
    "Rule",
    "Status",
    "Table",
    "TableCell",
    "TableHeader",
    "TableRow",
    "TaskItem",
    "TaskList",
    "Text",
    "UnknownNode",
    "adf_to_dict",
    "adf_to_json",
    "dict_to_adf",
    "get_node_type",
    "json_to_adf",
]
