"""Utility functions for cli output."""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/doc2conf/cli/output.py
import sys
from typing import TextIO

from doc2conf.exceptions import DependencyError


def check_rich_available() -> bool:
    """Check if Rich library is available.

    Returns
    -------
    bool
        True if Rich is available, False otherwise

    """
    try:
        import rich  # noqa: F401

        return True
    except ImportError:
        return False


def print_output(text: str, *, use_rich: bool = False, language: str = "json", stream: TextIO | None = None) -> None:
    """Print converted output, syntax highlighted through Rich when requested.

    Parameters
    ----------
    text : str
        Output text
    use_rich : bool, default False
        Highlight with Rich
    language : str, default "json"
        Lexer name for highlighting
    stream : TextIO or None
        Destination, stdout by default

    Raises
    ------
    DependencyError
        If ``use_rich`` is set and Rich is not installed

    """
    target = stream or sys.stdout
    if not use_rich:
        target.write(text)
        if not text.endswith("\n"):
            target.write("\n")
        return

    if not check_rich_available():
        raise DependencyError(
            converter_name="rich-output",
            missing_packages=[("rich", "")],
            message="Rich output requires the optional 'rich' dependency. Install with: pip install doc2confluence[rich]",
        )

    from rich.console import Console
    from rich.syntax import Syntax

    Console(file=target).print(Syntax(text, language, word_wrap=True))
