#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/renderers/base.py
"""Base classes for ADF renderers.

This module defines the abstract base class that all renderers inherit from.
A renderer turns a built ADF tree into a text artifact and never modifies
the tree.

"""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Union

from doc2conf.adf.nodes import Document
from doc2conf.exceptions import InvalidOptionsError, RenderingError
from doc2conf.options.base import BaseRendererOptions


class BaseRenderer(ABC):
    """Abstract base class for all ADF renderers.

    Parameters
    ----------
    options : BaseRendererOptions or None, default = None
        Format-specific rendering options

    Examples
    --------
    Creating a custom renderer:

        >>> class PlainTextRenderer(BaseRenderer):
        ...     def render_to_string(self, doc):
        ...         return "".join(n.text for n in doc.walk() if n.type == "text")

    """

    def __init__(self, options: BaseRendererOptions | None = None):
        self.options = options

    @abstractmethod
    def render_to_string(self, doc: Document) -> str:
        """Render the tree to a string.

        Parameters
        ----------
        doc : Document
            Tree to render

        Returns
        -------
        str
            Rendered document

        """
        raise NotImplementedError

    def render(self, doc: Document, output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Render the tree and write it to a path or file-like object.

        Parameters
        ----------
        doc : Document
            Tree to render
        output : str, Path, IO[bytes] or IO[str]
            Output destination

        Raises
        ------
        RenderingError
            If the output cannot be written

        """
        self.write_text_output(self.render_to_string(doc), output)

    @staticmethod
    def write_text_output(text: str, output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Write UTF-8 text to a path, a binary stream or a text stream."""
        try:
            if isinstance(output, (str, Path)):
                Path(output).write_text(text, encoding="utf-8")
            elif isinstance(output, (io.TextIOBase, io.StringIO)) or "b" not in getattr(output, "mode", "b"):
                output.write(text)  # type: ignore[arg-type]
            else:
                output.write(text.encode("utf-8"))  # type: ignore[arg-type]
        except OSError as e:
            raise RenderingError(f"Failed to write output: {e}", rendering_stage="writing", original_error=e) from e

    @staticmethod
    def _validate_options_type(options: BaseRendererOptions | None, expected_type: type, renderer_name: str) -> None:
        """Raise InvalidOptionsError when options are of the wrong class.

        Parameters
        ----------
        options : BaseRendererOptions or None
            Options passed to the renderer; None is always accepted
        expected_type : type
            The expected options class type
        renderer_name : str
            Name of the renderer for error messages

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=renderer_name,
                expected_type=expected_type,
                received_type=type(options),
            )
