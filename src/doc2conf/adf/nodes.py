#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/adf/nodes.py
"""Node classes for the Atlassian Document Format (ADF) tree.

Every ADF node kind is its own frozen dataclass with a ``type`` class
attribute naming the wire discriminant. Children and marks are stored as
tuples, so a tree cannot be changed after it has been built: consumers that
need another representation build a new artifact from it.

Node Hierarchy
--------------
All nodes inherit from :class:`Node` and support the visitor pattern.

Block nodes:
    - Document, Paragraph, Heading, CodeBlock, Blockquote, Rule
    - BulletList, OrderedList, ListItem, TaskList, TaskItem
    - Table, TableRow, TableCell, TableHeader
    - Panel, Expand, MediaSingle, Media, Extension

Inline nodes:
    - Text (with Mark annotations), HardBreak
    - Mention, InlineCard, Status, Emoji

Node types outside this set are carried by :class:`UnknownNode`, which keeps
the raw type name, the raw attribute bag and the children.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterator, Literal, Mapping, Optional, Sequence

from doc2conf.constants import (
    CONFLUENCE_MACRO_PROVIDER,
    DEFAULT_MEDIA_LAYOUT,
    DEFAULT_STATUS_COLOR,
    MENTION_ACCESS_LEVEL,
    TaskState,
)

MediaType = Literal["file", "external"]


@dataclass(frozen=True)
class Mark:
    """Inline annotation attached to a text leaf.

    Parameters
    ----------
    type : str
        Mark name (``strong``, ``em``, ``code``, ``link``, ``strike``,
        ``underline``, ``textColor``, ``subsup``, ``action``)
    attrs : Mapping, default = empty
        Mark parameters, e.g. ``{"href": ...}`` for links

    """

    type: str
    attrs: Mapping[str, Any] = field(default_factory=dict)


def _freeze(node: Any, *names: str) -> None:
    for name in names:
        value = getattr(node, name)
        if not isinstance(value, tuple):
            object.__setattr__(node, name, tuple(value))


class Node(ABC):
    """Base class for all ADF nodes."""

    type: ClassVar[str]

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Dispatch to the visitor method for this node kind."""

    @property
    def children(self) -> tuple[Node, ...]:
        """Child nodes, empty for leaves."""
        return getattr(self, "content", ())

    def walk(self) -> Iterator[Node]:
        """Yield this node and all descendants in document order."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class Document(Node):
    """Root node of every ADF tree.

    Parameters
    ----------
    content : sequence of Node
        Block-level nodes in source order
    version : int, default = 1
        ADF version number

    """

    type: ClassVar[str] = "doc"

    content: Sequence[Node] = ()
    version: int = 1

    def __post_init__(self) -> None:
        _freeze(self, "content")

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_document(self)


@dataclass(frozen=True)
class Paragraph(Node):
    """Paragraph of inline nodes."""

    type: ClassVar[str] = "paragraph"

    content: Sequence[Node] = ()

    def __post_init__(self) -> None:
        _freeze(self, "content")

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_paragraph(self)


@dataclass(frozen=True)
class Heading(Node):
    """Heading with a level from 1 to 6."""

    type: ClassVar[str] = "heading"

    level: int = 1
    content: Sequence[Node] = ()

    def __post_init__(self) -> None:
        if not 1 <= self.level <= 6:
            raise ValueError(f"Heading level must be 1-6, got {self.level}")
        _freeze(self, "content")

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_heading(self)


@dataclass(frozen=True)
class Text(Node):
    """Text leaf with an ordered sequence of marks.

    Mark order is significant: the first mark is the outermost wrapper when
    the leaf is serialized to markup.

    """

    type: ClassVar[str] = "text"

    text: str = ""
    marks: Sequence[Mark] = ()

    def __post_init__(self) -> None:
        _freeze(self, "marks")

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_text(self)

    def has_mark(self, mark_type: str) -> bool:
        return any(mark.type == mark_type for mark in self.marks)


@dataclass(frozen=True)
class HardBreak(Node):
    """Line break inside a paragraph."""

    type: ClassVar[str] = "hardBreak"

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_hard_break(self)


@dataclass(frozen=True)
class Rule(Node):
    """Horizontal rule."""

    type: ClassVar[str] = "rule"

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_rule(self)


@dataclass(frozen=True)
class CodeBlock(Node):
    """Code block holding a single text leaf.

    Parameters
    ----------
    content : sequence of Text
        Usually exactly one text leaf with the code
    language : str or None
        Fence language tag, omitted from output when None

    """

    type: ClassVar[str] = "codeBlock"

    content: Sequence[Node] = ()
    language: Optional[str] = None

    def __post_init__(self) -> None:
        _freeze(self, "content")

    @property
    def code(self) -> str:
        return "".join(child.text for child in self.content if isinstance(child, Text))

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_code_block(self)


@dataclass(frozen=True)
class Blockquote(Node):
    """Block quotation containing block nodes."""

    type: ClassVar[str] = "blockquote"

    content: Sequence[Node] = ()

    def __post_init__(self) -> None:
        _freeze(self, "content")

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_blockquote(self)


@dataclass(frozen=True)
class BulletList(Node):
    """Unordered list of ListItem nodes."""

    type: ClassVar[str] = "bulletList"

    content: Sequence[Node] = ()

    def __post_init__(self) -> None:
        _freeze(self, "content")

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_bullet_list(self)


@dataclass(frozen=True)
class OrderedList(Node):
    """Ordered list of ListItem nodes.

    Parameters
    ----------
    content : sequence of ListItem
        List items
    order : int or None
        Starting number, None when the list starts at 1

    """

    type: ClassVar[str] = "orderedList"

    content: Sequence[Node] = ()
    order: Optional[int] = None

    def __post_init__(self) -> None:
        _freeze(self, "content")

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_ordered_list(self)


@dataclass(frozen=True)
class ListItem(Node):
    """List item holding block nodes (paragraphs and nested lists)."""

    type: ClassVar[str] = "listItem"

    content: Sequence[Node] = ()

    def __post_init__(self) -> None:
        _freeze(self, "content")

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_list_item(self)


@dataclass(frozen=True)
class TaskList(Node):
    """List of TaskItem nodes."""

    type: ClassVar[str] = "taskList"

    content: Sequence[Node] = ()
    local_id: Optional[str] = None

    def __post_init__(self) -> None:
        _freeze(self, "content")

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_task_list(self)


@dataclass(frozen=True)
class TaskItem(Node):
    """Checklist entry with a two-state ``TODO``/``DONE`` state."""

    type: ClassVar[str] = "taskItem"

    content: Sequence[Node] = ()
    state: TaskState = "TODO"
    local_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.state not in ("TODO", "DONE"):
            raise ValueError(f"Task state must be 'TODO' or 'DONE', got {self.state!r}")
        _freeze(self, "content")

    @property
    def done(self) -> bool:
        return self.state == "DONE"

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_task_item(self)


@dataclass(frozen=True)
class Table(Node):
    """Table of TableRow nodes.

    Rows may hold different numbers of cells.

    Parameters
    ----------
    content : sequence of TableRow
        Table rows in order
    is_number_column_enabled : bool or None
        ADF ``isNumberColumnEnabled`` attribute, omitted when None
    layout : str or None
        ADF ``layout`` attribute, omitted when None

    """

    type: ClassVar[str] = "table"

    content: Sequence[Node] = ()
    is_number_column_enabled: Optional[bool] = None
    layout: Optional[str] = None

    def __post_init__(self) -> None:
        _freeze(self, "content")

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_table(self)


@dataclass(frozen=True)
class TableRow(Node):
    """Row of TableCell and TableHeader nodes."""

    type: ClassVar[str] = "tableRow"

    content: Sequence[Node] = ()

    def __post_init__(self) -> None:
        _freeze(self, "content")

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_table_row(self)


@dataclass(frozen=True)
class TableCell(Node):
    """Data cell holding block nodes."""

    type: ClassVar[str] = "tableCell"

    content: Sequence[Node] = ()
    colspan: int = 1
    rowspan: int = 1
    background: Optional[str] = None

    def __post_init__(self) -> None:
        _freeze(self, "content")

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_table_cell(self)


@dataclass(frozen=True)
class TableHeader(TableCell):
    """Header cell holding block nodes."""

    type: ClassVar[str] = "tableHeader"

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_table_header(self)


@dataclass(frozen=True)
class Panel(Node):
    """Coloured callout box (info, note, warning, success, error)."""

    type: ClassVar[str] = "panel"

    content: Sequence[Node] = ()
    panel_type: str = "info"

    def __post_init__(self) -> None:
        _freeze(self, "content")

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_panel(self)


@dataclass(frozen=True)
class Expand(Node):
    """Collapsible section with a title."""

    type: ClassVar[str] = "expand"

    content: Sequence[Node] = ()
    title: str = ""

    def __post_init__(self) -> None:
        _freeze(self, "content")

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_expand(self)


@dataclass(frozen=True)
class MediaSingle(Node):
    """Block wrapper around exactly one Media node."""

    type: ClassVar[str] = "mediaSingle"

    content: Sequence[Node] = ()
    layout: str = DEFAULT_MEDIA_LAYOUT

    def __post_init__(self) -> None:
        _freeze(self, "content")

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_media_single(self)


@dataclass(frozen=True)
class Media(Node):
    """Reference to an image, either a stored asset or an external URL.

    Parameters
    ----------
    media_type : {"file", "external"}
        ``file`` references an uploaded asset by ``id``; ``external``
        references ``url``
    id : str or None
        Stored asset identifier
    collection : str or None
        Stored asset collection
    url : str or None
        External URL
    alt : str or None
        Alternative text
    file_name : str or None
        Original file name of an uploaded asset (``__fileName``)

    """

    type: ClassVar[str] = "media"

    media_type: MediaType = "external"
    id: Optional[str] = None
    collection: Optional[str] = None
    url: Optional[str] = None
    alt: Optional[str] = None
    file_name: Optional[str] = None

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_media(self)


@dataclass(frozen=True)
class Extension(Node):
    """Macro extension point.

    Parameters
    ----------
    extension_key : str
        Macro name (``markdown``, ``html``, ``toc``, ...)
    extension_type : str
        Macro provider namespace
    parameters : Mapping
        Macro parameters, conventionally ``{"macroParams": {...}}``
    content : sequence of Node
        Macro body

    """

    type: ClassVar[str] = "extension"

    extension_key: str = ""
    extension_type: str = CONFLUENCE_MACRO_PROVIDER
    parameters: Mapping[str, Any] = field(default_factory=dict)
    content: Sequence[Node] = ()

    def __post_init__(self) -> None:
        _freeze(self, "content")

    @property
    def macro_params(self) -> Mapping[str, Any]:
        params = self.parameters.get("macroParams", {})
        return params if isinstance(params, Mapping) else {}

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_extension(self)


@dataclass(frozen=True)
class Mention(Node):
    """User mention."""

    type: ClassVar[str] = "mention"

    id: str = ""
    text: str = ""
    access_level: str = MENTION_ACCESS_LEVEL

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_mention(self)


@dataclass(frozen=True)
class InlineCard(Node):
    """Smart link rendered as an inline card."""

    type: ClassVar[str] = "inlineCard"

    url: str = ""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_inline_card(self)


@dataclass(frozen=True)
class Status(Node):
    """Coloured status lozenge."""

    type: ClassVar[str] = "status"

    text: str = ""
    color: str = DEFAULT_STATUS_COLOR
    local_id: Optional[str] = None

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_status(self)


@dataclass(frozen=True)
class Emoji(Node):
    """Emoji referenced by short name, e.g. ``:smile:``."""

    type: ClassVar[str] = "emoji"

    short_name: str = ""
    id: Optional[str] = None
    text: Optional[str] = None

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_emoji(self)


@dataclass(frozen=True)
class UnknownNode(Node):
    """Node of a type this library does not model.

    Carries the raw ``type`` name and attribute bag so the tree can be
    re-serialized without loss, and children so renderers can still output
    the nested content.

    """

    type: ClassVar[str] = "unknown"

    node_type: str = ""
    attrs: Mapping[str, Any] = field(default_factory=dict)
    content: Sequence[Node] = ()
    text: Optional[str] = None
    marks: Sequence[Mark] = ()

    def __post_init__(self) -> None:
        _freeze(self, "content", "marks")

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_unknown(self)


def get_node_type(node: Any) -> Optional[str]:
    """Return the wire ``type`` of a node, the raw type for unknown nodes."""
    if isinstance(node, UnknownNode):
        return node.node_type
    if isinstance(node, Node):
        return node.type
    if isinstance(node, Mapping):
        value = node.get("type")
        return value if isinstance(value, str) else None
    return None
