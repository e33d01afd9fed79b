#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/options/base.py
"""Base classes for parser and renderer options.

All option objects are frozen dataclasses. Use ``create_updated`` to derive a
modified copy instead of changing an instance.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)

    @classmethod
    def from_mapping(cls, values: dict[str, Any]) -> Self:
        """Build an instance from a mapping, ignoring unknown keys.

        Used for configuration files and front matter, which may carry keys
        meant for other consumers.
        """
        names = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in values.items() if key in names})


@dataclass(frozen=True)
class BaseParserOptions(CloneFrozenMixin):
    """Base class for all parser options.

    Parsers turn source text into an ADF tree. Subclasses define
    format-specific settings as frozen dataclass fields carrying
    ``metadata={"help": ..., "importance": ...}``.
    """


@dataclass(frozen=True)
class BaseRendererOptions(CloneFrozenMixin):
    """Base class for all renderer options.

    Renderers turn an ADF tree into another representation.
    """
