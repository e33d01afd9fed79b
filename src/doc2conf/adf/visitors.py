#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/adf/visitors.py
"""Visitor base class for ADF tree traversal.

Each output representation of a tree (wire dicts, storage markup) is its own
visitor over the same node set, so every representation handles every node
kind explicitly and can be tested on its own.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

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
    Media,
    MediaSingle,
    Mention,
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


class NodeVisitor(ABC):
    """Abstract base class for ADF node visitors.

    Subclasses implement one ``visit_*`` method per node kind. Nodes call the
    matching method from their ``accept``.

    Examples
    --------
    Counting task items:

        >>> class TaskCounter(NodeVisitor):
        ...     def __init__(self):
        ...         self.count = 0
        ...     def visit_task_item(self, node):
        ...         self.count += 1
        ...         self.visit_children(node)

    """

    def visit_children(self, node: Any) -> list[Any]:
        """Visit every child of ``node`` in order and collect the results."""
        return [child.accept(self) for child in node.children]

    @abstractmethod
    def visit_document(self, node: Document) -> Any:
        pass

    @abstractmethod
    def visit_paragraph(self, node: Paragraph) -> Any:
        pass

    @abstractmethod
    def visit_heading(self, node: Heading) -> Any:
        pass

    @abstractmethod
    def visit_text(self, node: Text) -> Any:
        pass

    @abstractmethod
    def visit_hard_break(self, node: HardBreak) -> Any:
        pass

    @abstractmethod
    def visit_rule(self, node: Rule) -> Any:
        pass

    @abstractmethod
    def visit_code_block(self, node: CodeBlock) -> Any:
        pass

    @abstractmethod
    def visit_blockquote(self, node: Blockquote) -> Any:
        pass

    @abstractmethod
    def visit_bullet_list(self, node: BulletList) -> Any:
        pass

    @abstractmethod
    def visit_ordered_list(self, node: OrderedList) -> Any:
        pass

    @abstractmethod
    def visit_list_item(self, node: ListItem) -> Any:
        pass

    @abstractmethod
    def visit_task_list(self, node: TaskList) -> Any:
        pass

    @abstractmethod
    def visit_task_item(self, node: TaskItem) -> Any:
        pass

    @abstractmethod
    def visit_table(self, node: Table) -> Any:
        pass

    @abstractmethod
    def visit_table_row(self, node: TableRow) -> Any:
        pass

    @abstractmethod
    def visit_table_cell(self, node: TableCell) -> Any:
        pass

    @abstractmethod
    def visit_table_header(self, node: TableHeader) -> Any:
        pass

    @abstractmethod
    def visit_panel(self, node: Panel) -> Any:
        pass

    @abstractmethod
    def visit_expand(self, node: Expand) -> Any:
        pass

    @abstractmethod
    def visit_media_single(self, node: MediaSingle) -> Any:
        pass

    @abstractmethod
    def visit_media(self, node: Media) -> Any:
        pass

    @abstractmethod
    def visit_extension(self, node: Extension) -> Any:
        pass

    @abstractmethod
    def visit_mention(self, node: Mention) -> Any:
        pass

    @abstractmethod
    def visit_inline_card(self, node: InlineCard) -> Any:
        pass

    @abstractmethod
    def visit_status(self, node: Status) -> Any:
        pass

    @abstractmethod
    def visit_emoji(self, node: Emoji) -> Any:
        pass

    @abstractmethod
    def visit_unknown(self, node: UnknownNode) -> Any:
        pass
