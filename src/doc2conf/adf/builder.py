#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/adf/builder.py
"""Builder helpers for constructing ADF sub-trees.

Parsers use these factories so that common shapes (a paragraph of plain
text, a table cell wrapping inline content, a macro extension) are built the
same way everywhere. All helpers return new nodes and never modify their
arguments.

"""

from __future__ import annotations

import secrets
import string
from typing import Iterable, Optional, Sequence

from doc2conf.adf.nodes import (
    Document,
    Extension,
    Mark,
    Node,
    Paragraph,
    Table,
    TableCell,
    TableHeader,
    TableRow,
    Text,
)
from doc2conf.constants import (
    CONFLUENCE_MACRO_PROVIDER,
    TASK_LOCAL_ID_LENGTH,
    TASK_LOCAL_ID_PREFIX,
    LocalIdMode,
)

_ID_ALPHABET = string.ascii_lowercase + string.digits


class LocalIdGenerator:
    """Source of ``localId`` values for task lists and task items.

    Parameters
    ----------
    mode : {"random", "positional"}, default = "random"
        ``random`` draws 8 base-36 characters per id, so ids from separate
        conversions do not collide when content is merged. ``positional``
        numbers ids in creation order, so the same source always yields
        the same ids.
    prefix : str, default = "task-"
        Prefix of every generated id

    Examples
    --------
        >>> ids = LocalIdGenerator("positional")
        >>> ids.next(), ids.next()
        ('task-00000001', 'task-00000002')

    """

    def __init__(self, mode: LocalIdMode = "random", prefix: str = TASK_LOCAL_ID_PREFIX) -> None:
        if mode not in ("random", "positional"):
            raise ValueError(f"Unknown local id mode: {mode!r}")
        self.mode = mode
        self.prefix = prefix
        self._counter = 0

    def next(self) -> str:
        self._counter += 1
        if self.mode == "positional":
            return f"{self.prefix}{self._counter:0{TASK_LOCAL_ID_LENGTH}d}"
        suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(TASK_LOCAL_ID_LENGTH))
        return f"{self.prefix}{suffix}"


def text(value: str, marks: Optional[Sequence[Mark]] = None) -> Text:
    return Text(text=value, marks=tuple(marks or ()))


def paragraph(content: Iterable[Node] = ()) -> Paragraph:
    return Paragraph(content=tuple(content))


def text_paragraph(value: str) -> Paragraph:
    """Paragraph holding one plain text leaf, or nothing for an empty string."""
    return Paragraph(content=(Text(text=value),) if value else ())


def table_cell(
    content: Iterable[Node] = (),
    *,
    header: bool = False,
    colspan: int = 1,
    rowspan: int = 1,
) -> TableCell:
    """Build a cell whose inline content is wrapped in a paragraph.

    ADF cells hold block content, so inline nodes are wrapped. Block nodes
    (a node list starting with a paragraph) are kept as they are.
    """
    nodes = tuple(content)
    if not nodes or not isinstance(nodes[0], Paragraph):
        nodes = (Paragraph(content=nodes),)
    cell_cls = TableHeader if header else TableCell
    return cell_cls(content=nodes, colspan=colspan, rowspan=rowspan)


def text_row(values: Iterable[str], *, header: bool = False) -> TableRow:
    """Row of cells each holding one plain text paragraph."""
    return TableRow(content=tuple(table_cell(text_paragraph(v).content, header=header) for v in values))


def error_table(message: str, header: str) -> Table:
    """Two-row diagnostic table with a header cell and a message cell."""
    return Table(content=(text_row([header], header=True), text_row([message])))


def macro_extension(
    key: str,
    body: Optional[str] = None,
    *,
    params: Optional[dict] = None,
    provider: str = CONFLUENCE_MACRO_PROVIDER,
) -> Extension:
    """Build a macro extension node with an optional plain text body."""
    content = (Text(text=body),) if body is not None else ()
    return Extension(
        extension_key=key,
        extension_type=provider,
        parameters={"macroParams": dict(params or {})},
        content=content,
    )


def document(content: Iterable[Node]) -> Document:
    return Document(content=tuple(content))
