#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/parsers/asciidoc.py
"""AsciiDoc to ADF conversion.

AsciiDoc is rendered to HTML first and the HTML is then walked by
:class:`~doc2conf.parsers.html.HtmlBlockBuilder`. The default renderer runs
the ``asciidoctor`` executable with safe mode, the html5 backend and font
icons; any ``str -> str`` callable can be injected instead.

"""

from __future__ import annotations

import logging
import subprocess
from typing import Callable, Optional

from doc2conf.adf.nodes import Document
from doc2conf.constants import ASCIIDOCTOR_ARGS, ASCIIDOCTOR_EXECUTABLE, DEPS_HTML
from doc2conf.exceptions import DependencyError, ParsingError
from doc2conf.options.conversion import ConversionOptions
from doc2conf.parsers.base import BaseParser
from doc2conf.parsers.html import HtmlBlockBuilder
from doc2conf.uploads import AssetUploader
from doc2conf.utils.decorators import debug_timer, requires_dependencies
from doc2conf.utils.packages import find_executable

logger = logging.getLogger(__name__)

AsciiDocRenderer = Callable[[str], str]


def render_with_asciidoctor(source: str) -> str:
    """Render AsciiDoc to an embeddable HTML fragment with ``asciidoctor``.

    Parameters
    ----------
    source : str
        AsciiDoc source

    Returns
    -------
    str
        HTML fragment

    Raises
    ------
    DependencyError
        If the ``asciidoctor`` executable is not on PATH
    ParsingError
        If ``asciidoctor`` exits with an error

    """
    executable = find_executable(ASCIIDOCTOR_EXECUTABLE)
    if executable is None:
        raise DependencyError(
            converter_name="asciidoc",
            missing_packages=[(ASCIIDOCTOR_EXECUTABLE, "")],
            install_command="gem install asciidoctor",
        )

    try:
        result = subprocess.run(
            [executable, *ASCIIDOCTOR_ARGS],
            input=source,
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=False,
        )
    except OSError as e:
        raise ParsingError(f"Failed to run {ASCIIDOCTOR_EXECUTABLE}: {e}", parsing_stage="render", original_error=e) from e

    if result.returncode != 0:
        detail = result.stderr.strip() or f"exit status {result.returncode}"
        raise ParsingError(f"{ASCIIDOCTOR_EXECUTABLE} failed: {detail}", parsing_stage="render")
    if result.stderr.strip():
        logger.warning(f"{ASCIIDOCTOR_EXECUTABLE}: {result.stderr.strip()}")
    return result.stdout


class AsciiDocToAdfConverter(BaseParser):
    """Convert AsciiDoc source to an ADF document.

    Parameters
    ----------
    options : ConversionOptions or None
        Conversion options
    uploader : AssetUploader or None
        Asset store used when ``options.upload_images`` is set
    renderer : callable or None
        ``str -> str`` AsciiDoc to HTML renderer. Defaults to
        :func:`render_with_asciidoctor`.

    """

    def __init__(
        self,
        options: ConversionOptions | None = None,
        *,
        uploader: AssetUploader | None = None,
        renderer: Optional[AsciiDocRenderer] = None,
    ) -> None:
        BaseParser._validate_options_type(options, ConversionOptions, "asciidoc")
        options = options or ConversionOptions()
        super().__init__(options)
        self.options: ConversionOptions = options
        self.uploader = uploader
        self.renderer = renderer or render_with_asciidoctor

    @requires_dependencies("asciidoc", DEPS_HTML)
    def parse(self, source: str) -> Document:
        """Render AsciiDoc to HTML and convert the HTML to a ``doc``-rooted tree."""
        from bs4 import BeautifulSoup

        with debug_timer(logger, "Rendering (asciidoc)"):
            html = self.renderer(source)

        soup = BeautifulSoup(html, "html.parser")
        builder = HtmlBlockBuilder(self.options, self.uploader)
        with debug_timer(logger, "Building ADF blocks (asciidoc)"):
            blocks = builder.process_blocks(soup)
        return self._build_document(blocks, self.options.generate_toc)
