#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/options/conversion.py
"""Configuration options for the forward conversion to ADF."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, get_args

from doc2conf.constants import InstanceType, LocalIdMode, MacroFormat
from doc2conf.options.base import BaseParserOptions


@dataclass(frozen=True)
class ConversionOptions(BaseParserOptions):
    """Options controlling how source text becomes an ADF tree.

    Parameters
    ----------
    generate_toc : bool, default False
        Prepend a table-of-contents macro to the document.
    parse_inline_cards : bool, default False
        Turn bare ``http(s)://`` URLs into inline cards.
    parse_mentions : bool, default False
        Turn ``@name`` tokens into user mentions.
    parse_emoji : bool, default True
        Turn ``:short_name:`` runs into emoji nodes.
    upload_images : bool, default False
        Upload local images through the supplied asset uploader and
        reference the stored asset instead of the file path.
    space_key : str or None, default None
        Space the uploaded assets belong to.
    base_path : str or None, default None
        Directory that relative image and CSV paths are resolved against.
        Defaults to the current working directory.
    use_official_schema : bool, default False
        Validate the result against the published ADF JSON schema. Schema
        violations are logged, never raised.
    macro_format : {"markdown", "html"} or None, default None
        When set, skip conversion and wrap the whole source in a single
        macro of this kind.
    instance_type : {"cloud", "server"}, default "cloud"
        Target deployment. Cloud consumes the ADF tree, Server and Data
        Center consume storage markup.
    local_ids : {"random", "positional"}, default "random"
        How task ``localId`` values are generated.

    """

    generate_toc: bool = field(
        default=False,
        metadata={"help": "Prepend a table of contents macro", "cli_name": "toc", "importance": "core"},
    )
    parse_inline_cards: bool = field(
        default=False,
        metadata={"help": "Convert bare URLs to inline cards", "cli_name": "inline-cards", "importance": "core"},
    )
    parse_mentions: bool = field(
        default=False,
        metadata={"help": "Convert @name tokens to user mentions", "cli_name": "mentions", "importance": "core"},
    )
    parse_emoji: bool = field(
        default=True,
        metadata={"help": "Convert :short_name: to emoji nodes", "cli_name": "no-emoji", "importance": "advanced"},
    )
    upload_images: bool = field(
        default=False,
        metadata={"help": "Upload local images as attachments", "importance": "core", "exclude_from_cli": True},
    )
    space_key: Optional[str] = field(
        default=None,
        metadata={"help": "Confluence space key for uploads", "cli_name": "space", "importance": "core"},
    )
    base_path: Optional[str] = field(
        default=None,
        metadata={"help": "Directory for resolving relative image and CSV paths", "importance": "advanced"},
    )
    use_official_schema: bool = field(
        default=False,
        metadata={"help": "Validate against the published ADF JSON schema", "importance": "advanced"},
    )
    macro_format: Optional[MacroFormat] = field(
        default=None,
        metadata={
            "help": "Wrap the source in a single macro instead of converting it",
            "choices": ["markdown", "html"],
            "importance": "advanced",
        },
    )
    instance_type: InstanceType = field(
        default="cloud",
        metadata={"help": "Target Confluence deployment", "choices": ["cloud", "server"], "importance": "core"},
    )
    local_ids: LocalIdMode = field(
        default="random",
        metadata={
            "help": "Task localId generation strategy",
            "choices": ["random", "positional"],
            "importance": "advanced",
        },
    )

    def __post_init__(self) -> None:
        """Validate literal-valued fields.

        Raises
        ------
        ValueError
            If a literal field holds an unsupported value.

        """
        if self.macro_format is not None and self.macro_format not in get_args(MacroFormat):
            raise ValueError(f"macro_format must be 'markdown', 'html' or None, got {self.macro_format!r}")
        if self.instance_type not in get_args(InstanceType):
            raise ValueError(f"instance_type must be 'cloud' or 'server', got {self.instance_type!r}")
        if self.local_ids not in get_args(LocalIdMode):
            raise ValueError(f"local_ids must be 'random' or 'positional', got {self.local_ids!r}")

    def resolve_path(self, target: str) -> Path:
        """Resolve a source-relative path against ``base_path``."""
        path = Path(target)
        if path.is_absolute():
            return path
        return Path(self.base_path or ".").joinpath(path).resolve()
