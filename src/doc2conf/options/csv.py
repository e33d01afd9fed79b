#  Copyright (c) 2025 Tom Villani, Ph.D.
# doc2conf/options/csv.py
"""Configuration options for delimited tabular data.

The options can be given directly or parsed from the info string of a fenced
code block, e.g. ```` ```csv;delimiter=|;no-header ````.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from doc2conf.constants import CSV_FENCE_MARKER, DEFAULT_CSV_DELIMITER
from doc2conf.options.base import BaseParserOptions

_OPTION_SPLIT = re.compile(r"[;,]")


@dataclass(frozen=True)
class CsvOptions(BaseParserOptions):
    r"""Configuration options for the tabular data builder.

    Parameters
    ----------
    delimiter : str, default ","
        Single-character field delimiter (e.g., ',', '\\t', ';', '|').
    has_header : bool, default True
        Whether the first record holds column headers. When False, a
        header row of positional indices (0, 1, ...) is emitted and every
        record becomes a data row.
    skip_empty_lines : bool, default True
        Whether to drop records in which every field is empty. When False,
        a blank line becomes a row with one empty cell.
    trim : bool, default True
        Whether to strip surrounding whitespace from every field.

    """

    delimiter: str = field(
        default=DEFAULT_CSV_DELIMITER,
        metadata={"help": "Field delimiter (e.g., ',', '\\t', ';', '|')", "importance": "core"},
    )
    has_header: bool = field(
        default=True,
        metadata={
            "help": "Whether first row contains column headers",
            "cli_name": "no-header",
            "importance": "core",
        },
    )
    skip_empty_lines: bool = field(
        default=True,
        metadata={
            "help": "Keep records whose fields are all empty",
            "cli_name": "keep-empty-lines",
            "importance": "advanced",
        },
    )
    trim: bool = field(
        default=True,
        metadata={"help": "Strip whitespace around fields", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate the delimiter.

        Raises
        ------
        ValueError
            If the delimiter is not exactly one character.

        """
        if len(self.delimiter) != 1:
            raise ValueError(f"delimiter must be a single character, got {self.delimiter!r}")

    @classmethod
    def from_fence_info(cls, info: str) -> CsvOptions:
        """Parse options from a fenced code block info string.

        The info string starts with ``csv`` and may be followed by option
        entries separated by ``;`` or ``,``: ``delimiter=X``, ``no-header``,
        ``skip-empty`` and ``keep-empty``. Unknown entries are ignored.
        ``delimiter=tab`` and ``delimiter=\\t`` both select a tab.

        Examples
        --------
        >>> CsvOptions.from_fence_info("csv;delimiter=|;no-header")
        CsvOptions(delimiter='|', has_header=False, skip_empty_lines=True, trim=True)

        """
        options: dict[str, object] = {}
        rest = info.strip()
        if rest.lower().startswith(CSV_FENCE_MARKER):
            rest = rest[len(CSV_FENCE_MARKER) :]

        for entry in _OPTION_SPLIT.split(rest):
            entry = entry.strip()
            if not entry:
                continue
            key, _, value = entry.partition("=")
            key = key.strip().lower()
            if key == "delimiter" and value.strip():
                options["delimiter"] = _resolve_delimiter(value)
            elif key == "no-header":
                options["has_header"] = False
            elif key == "skip-empty":
                options["skip_empty_lines"] = True
            elif key == "keep-empty":
                options["skip_empty_lines"] = False

        return cls(**options)  # type: ignore[arg-type]


def _resolve_delimiter(value: str) -> str:
    value = value.strip()
    if value.lower() in ("tab", "\\t"):
        return "\t"
    if value.lower() == "pipe":
        return "|"
    if value.lower() == "semicolon":
        return ";"
    return value[:1]
