#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/options/storage.py
"""Configuration options for the Confluence storage-format renderer."""

from __future__ import annotations

from dataclasses import dataclass, field

from doc2conf.constants import DEFAULT_DIAGRAM_LANGUAGES, DEFAULT_TASK_LIST_TITLE, KNOWN_MACRO_PROVIDERS
from doc2conf.options.base import BaseRendererOptions


@dataclass(frozen=True)
class StorageRendererOptions(BaseRendererOptions):
    """Options for rendering ADF trees to storage markup.

    Parameters
    ----------
    task_list_title : str, default "Task List"
        Value of the ``title`` parameter of the task list macro.
    diagram_languages : tuple of str, default ("mermaid",)
        Code block languages the server cannot highlight natively. These
        blocks are emitted as a markdown macro wrapping a fenced block.
    macro_providers : frozenset of str
        Extension namespaces whose extensions become structured macros.
        Extensions from any other namespace lose their wrapper.

    """

    task_list_title: str = field(
        default=DEFAULT_TASK_LIST_TITLE,
        metadata={"help": "Title parameter for task list macros", "importance": "advanced"},
    )
    diagram_languages: tuple[str, ...] = field(
        default=DEFAULT_DIAGRAM_LANGUAGES,
        metadata={"help": "Code languages wrapped in the markdown macro", "importance": "advanced"},
    )
    macro_providers: frozenset[str] = field(
        default=KNOWN_MACRO_PROVIDERS,
        metadata={"help": "Extension namespaces rendered as structured macros", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "diagram_languages", tuple(lang.lower() for lang in self.diagram_languages))
        object.__setattr__(self, "macro_providers", frozenset(self.macro_providers))
