#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/parsers/base.py
"""Base parser interface.

This module defines the abstract base class that every source parser
inherits from. A parser turns source text into a ``doc``-rooted ADF tree.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Iterable

from doc2conf.adf.builder import macro_extension
from doc2conf.adf.nodes import Document, Node
from doc2conf.constants import TOC_MACRO_KEY
from doc2conf.exceptions import InvalidOptionsError
from doc2conf.options.base import BaseParserOptions

logger = logging.getLogger(__name__)


class BaseParser(ABC):
    """Abstract base class for all source parsers.

    Parameters
    ----------
    options : BaseParserOptions or None
        Parser configuration. Subclasses check that the options are of
        their own options class.

    Examples
    --------
        >>> class PlainTextParser(BaseParser):
        ...     def parse(self, source):
        ...         return Document(content=[text_paragraph(source)])

    """

    def __init__(self, options: BaseParserOptions | None = None) -> None:
        self.options = options

    @staticmethod
    def _validate_options_type(options: BaseParserOptions | None, expected_type: type, parser_name: str) -> None:
        """Raise InvalidOptionsError when options are of the wrong class.

        Parameters
        ----------
        options : BaseParserOptions or None
            Options passed to the parser; None is always accepted
        expected_type : type
            The expected options class type
        parser_name : str
            Name of the parser for error messages

        Raises
        ------
        InvalidOptionsError
            If ``options`` is not an instance of ``expected_type``

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=parser_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @abstractmethod
    def parse(self, source: str) -> Document:
        """Parse source text into a ``doc``-rooted tree.

        Parameters
        ----------
        source : str
            Source text

        Returns
        -------
        Document
            The converted tree

        """
        raise NotImplementedError

    @staticmethod
    def _build_document(blocks: Iterable[Node], generate_toc: bool = False) -> Document:
        """Assemble top-level blocks into a Document, optionally led by a TOC macro."""
        content = list(blocks)
        if generate_toc:
            logger.debug("Prepending table of contents macro")
            content.insert(0, macro_extension(TOC_MACRO_KEY))
        return Document(content=content)
