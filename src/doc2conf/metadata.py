#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/metadata.py
"""Page metadata from Markdown front matter.

A Markdown source may start with a YAML block delimited by ``---`` lines.
Page keys can sit at the top level or under a ``confluence:`` mapping; the
nested value wins when both are present:

.. code-block:: yaml

    ---
    confluence:
      space: DOCS
      title: Release notes
      parentId: "12345"
      labels: [release, notes]
    macroFormat: markdown
    ---

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from doc2conf.constants import DEPS_YAML
from doc2conf.utils.decorators import requires_dependencies

logger = logging.getLogger(__name__)

FRONT_MATTER_DELIMITER = "---"


@dataclass(frozen=True)
class PageMetadata:
    """Confluence page settings carried by a source file.

    Parameters
    ----------
    space : str or None
        Space key
    title : str or None
        Page title
    parent_id : str or None
        Identifier of the parent page
    page_id : str or None
        Identifier of an existing page to update
    labels : tuple of str
        Page labels
    macro_format : str or None
        ``markdown`` or ``html`` to wrap the body in a single macro

    """

    space: Optional[str] = None
    title: Optional[str] = None
    parent_id: Optional[str] = None
    page_id: Optional[str] = None
    labels: tuple[str, ...] = field(default_factory=tuple)
    macro_format: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PageMetadata:
        """Build metadata from a parsed front matter mapping."""
        nested = data.get("confluence")
        nested = nested if isinstance(nested, Mapping) else {}

        def pick(key: str) -> Any:
            value = nested.get(key)
            return value if value not in (None, "") else data.get(key)

        return cls(
            space=_as_str(pick("space")),
            title=_as_str(pick("title")),
            parent_id=_as_str(pick("parentId")),
            page_id=_as_str(pick("pageId")),
            labels=_as_labels(pick("labels")),
            macro_format=_as_str(pick("macroFormat")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the metadata as a front-matter style mapping without empty values."""
        data = {
            "space": self.space,
            "title": self.title,
            "parentId": self.parent_id,
            "pageId": self.page_id,
            "labels": list(self.labels) or None,
            "macroFormat": self.macro_format,
        }
        return {key: value for key, value in data.items() if value is not None}


def _as_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _as_labels(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return tuple(label.strip() for label in value.split(",") if label.strip())
    if isinstance(value, (list, tuple)):
        return tuple(str(label) for label in value if label not in (None, ""))
    return (str(value),)


def split_front_matter(text: str) -> tuple[Optional[str], str]:
    """Split ``text`` into (front matter block or None, body)."""
    if not (text.startswith("---\n") or text.startswith("---\r\n")):
        return None, text

    lines = text.splitlines(keepends=True)
    for index in range(1, len(lines)):
        if lines[index].strip() == FRONT_MATTER_DELIMITER:
            return "".join(lines[1:index]), "".join(lines[index + 1 :])
    return None, text


@requires_dependencies("front matter", DEPS_YAML)
def extract_front_matter(text: str) -> tuple[PageMetadata, str]:
    """Extract page metadata from YAML front matter.

    Parameters
    ----------
    text : str
        Markdown source, possibly starting with front matter

    Returns
    -------
    tuple of (PageMetadata, str)
        The metadata (empty when there is no front matter) and the body
        with the front matter removed

    """
    import yaml

    block, body = split_front_matter(text)
    if block is None:
        return PageMetadata(), text

    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        logger.warning(f"Ignoring malformed front matter: {e}")
        return PageMetadata(), body

    if not isinstance(data, Mapping):
        return PageMetadata(), body
    metadata = PageMetadata.from_dict(data)
    logger.debug(f"Front matter metadata: {metadata.to_dict()}")
    return metadata, body
