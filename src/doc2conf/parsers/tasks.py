#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/parsers/tasks.py
"""Task-list helpers shared by the Markdown and HTML block builders.

Task text formatting is matched against the whole trimmed text with
anchored patterns, first match wins. A task such as ``**a** and _b_`` is
therefore kept as plain text: only a text that is entirely one emphasis
span gets a mark. ``__text__`` maps to emphasis, not strong.

Nested task lists inside an ordinary list item are found by scanning the
item's text for checkbox lines, bulleted and numbered lines together, in
source order.
"""

from __future__ import annotations

import re
from typing import Optional

from doc2conf.adf.builder import LocalIdGenerator
from doc2conf.adf.nodes import Mark, Node, TaskItem, TaskList, Text
from doc2conf.constants import TASK_STATE_DONE, TASK_STATE_TODO, TaskState

TASK_EMPHASIS_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"^\*\*(.*?)\*\*$"), "strong"),
    (re.compile(r"^\*(.*?)\*$"), "em"),
    (re.compile(r"^~~(.*?)~~$"), "strike"),
    (re.compile(r"^__(.*?)__$"), "em"),
    (re.compile(r"^_(.*?)_$"), "em"),
)

NESTED_BULLET_TASK = re.compile(r"^(.*?)\n\s*-\s+\[([ xX])\]", re.DOTALL)
NESTED_NUMBERED_TASK = re.compile(r"^(.*?)\n\s*\d+\.\s+\[([ xX])\]", re.DOTALL)
BULLET_TASK_LINE = re.compile(r"^\s*-\s+\[([ xX])\]\s+(.*?)(?:\n|$)", re.MULTILINE)
NUMBERED_TASK_LINE = re.compile(r"^\s*\d+\.\s+\[([ xX])\]\s+(.*?)(?:\n|$)", re.MULTILINE)
TASK_LINE = re.compile(r"^\s*-\s+\[([ xX])\]\s*(.*)$")


def task_state(checked: bool) -> TaskState:
    return TASK_STATE_DONE if checked else TASK_STATE_TODO


def is_checked(marker: str) -> bool:
    """True for an ``x``/``X`` checkbox marker."""
    return marker.lower() == "x"


def task_text_content(text: str) -> tuple[Node, ...]:
    """Inline content of a task item using anchored whole-text emphasis."""
    text = text.strip()
    if not text:
        return ()
    for pattern, mark_type in TASK_EMPHASIS_PATTERNS:
        match = pattern.match(text)
        if match:
            inner = match.group(1)
            return (Text(text=inner, marks=(Mark(type=mark_type),)),) if inner else ()
    return (Text(text=text),)


def split_nested_tasks(text: str) -> Optional[tuple[str, str]]:
    """Split item text into (main text, remainder) at the first checkbox line.

    Returns None when the text holds no nested checkbox line after its
    first segment.
    """
    match = NESTED_BULLET_TASK.match(text) or NESTED_NUMBERED_TASK.match(text)
    if match is None:
        return None
    main_text = match.group(1).strip()
    return main_text, text[len(main_text) :].strip()


def scan_task_lines(text: str, ids: LocalIdGenerator) -> Optional[TaskList]:
    """Build a task list from every checkbox line in ``text``.

    Bulleted and numbered checkbox lines are collected together and kept in
    the order they appear. Returns None when there are none.
    """
    matches = [*BULLET_TASK_LINE.finditer(text), *NUMBERED_TASK_LINE.finditer(text)]
    if not matches:
        return None
    matches.sort(key=lambda m: m.start())

    items = [
        TaskItem(
            local_id=ids.next(),
            state=task_state(is_checked(match.group(1))),
            content=task_text_content(match.group(2)),
        )
        for match in matches
    ]
    return TaskList(local_id=ids.next(), content=items)
