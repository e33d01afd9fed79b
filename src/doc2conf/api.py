"""The major exported API functions for document conversion."""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/doc2conf/api.py
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union, get_args

from doc2conf.adf.nodes import Document
from doc2conf.adf.serialization import adf_to_dict
from doc2conf.constants import FORMAT_EXTENSIONS, InstanceType, SourceFormat
from doc2conf.exceptions import FileError, FileNotFoundError, FormatError, ValidationError
from doc2conf.metadata import PageMetadata, extract_front_matter
from doc2conf.options.conversion import ConversionOptions
from doc2conf.options.csv import CsvOptions
from doc2conf.options.storage import StorageRendererOptions
from doc2conf.parsers.asciidoc import AsciiDocRenderer, AsciiDocToAdfConverter
from doc2conf.parsers.csv import CsvToAdfConverter
from doc2conf.parsers.macro import MacroWrapConverter
from doc2conf.parsers.markdown import MarkdownToAdfConverter
from doc2conf.renderers.storage import StorageRenderer
from doc2conf.schema import SchemaCache, ValidationReport, check_root, validate_document
from doc2conf.uploads import AssetUploader
from doc2conf.utils.decorators import debug_timer

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS: tuple[str, ...] = get_args(SourceFormat)


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of :func:`convert_file`.

    Parameters
    ----------
    document : Document
        The converted tree
    metadata : PageMetadata
        Page settings from the source's front matter
    format : str
        Source format the file was read as
    validation : ValidationReport
        Schema check outcome

    """

    document: Document
    metadata: PageMetadata = field(default_factory=PageMetadata)
    format: str = "markdown"
    validation: ValidationReport = field(default_factory=ValidationReport)


def detect_format(path: Union[str, Path]) -> SourceFormat:
    """Infer the source format from a file extension.

    Raises
    ------
    FormatError
        If the extension is not a known source extension

    """
    suffix = Path(path).suffix.lower()
    try:
        return FORMAT_EXTENSIONS[suffix]
    except KeyError:
        raise FormatError(
            format_type=suffix or str(path),
            supported_formats=sorted(FORMAT_EXTENSIONS),
            message=f"Cannot infer source format from extension '{suffix}'",
        ) from None


def _convert(
    source: str,
    format: str,
    options: ConversionOptions,
    uploader: Optional[AssetUploader],
    asciidoc_renderer: Optional[AsciiDocRenderer],
    csv_options: Optional[CsvOptions],
) -> Document:
    if format not in SUPPORTED_FORMATS:
        raise FormatError(format_type=format, supported_formats=list(SUPPORTED_FORMATS))

    if options.macro_format is not None:
        if format == "markdown":
            return MacroWrapConverter(options).parse(source)
        logger.warning(f"macro_format only applies to markdown sources, converting {format} normally")

    if format == "markdown":
        return MarkdownToAdfConverter(options, uploader=uploader).parse(source)
    if format == "asciidoc":
        return AsciiDocToAdfConverter(options, uploader=uploader, renderer=asciidoc_renderer).parse(source)
    return CsvToAdfConverter(csv_options).parse(source)


def convert(
    source: str,
    format: str = "markdown",
    options: Optional[ConversionOptions] = None,
    *,
    uploader: Optional[AssetUploader] = None,
    asciidoc_renderer: Optional[AsciiDocRenderer] = None,
    schema_cache: Optional[SchemaCache] = None,
    csv_options: Optional[CsvOptions] = None,
) -> Document:
    """Convert source text to a validated ADF document.

    Parameters
    ----------
    source : str
        Source text. Markdown front matter is not stripped here; use
        :func:`convert_file` or :func:`doc2conf.metadata.extract_front_matter`.
    format : {"markdown", "asciidoc", "csv"}, default "markdown"
        Source format
    options : ConversionOptions or None
        Conversion options
    uploader : AssetUploader or None
        Asset store for local images when ``options.upload_images`` is set
    asciidoc_renderer : callable or None
        AsciiDoc to HTML renderer, ``asciidoctor`` when omitted
    schema_cache : SchemaCache or None
        Schema source for ``options.use_official_schema``
    csv_options : CsvOptions or None
        Options for the ``csv`` source format

    Returns
    -------
    Document
        The converted tree

    Raises
    ------
    FormatError
        If ``format`` is not supported
    InvalidDocumentError
        If the produced root is not a ``doc``
    DependencyError
        If a required package or executable is missing

    Examples
    --------
        >>> doc = convert("# Title\\n\\nSome *text*")
        >>> [node.type for node in doc.content]
        ['heading', 'paragraph']

    """
    doc, _ = _convert_and_validate(
        source, format, options or ConversionOptions(), uploader, asciidoc_renderer, schema_cache, csv_options
    )
    return doc


def _convert_and_validate(
    source: str,
    format: str,
    options: ConversionOptions,
    uploader: Optional[AssetUploader],
    asciidoc_renderer: Optional[AsciiDocRenderer],
    schema_cache: Optional[SchemaCache],
    csv_options: Optional[CsvOptions],
) -> tuple[Document, ValidationReport]:
    with debug_timer(logger, f"Converting ({format})"):
        doc = _convert(source, format, options, uploader, asciidoc_renderer, csv_options)
    report = validate_document(doc, use_official_schema=options.use_official_schema, schema_cache=schema_cache)
    return doc, report


def convert_file(
    path: Union[str, Path],
    options: Optional[ConversionOptions] = None,
    *,
    format: Optional[str] = None,
    uploader: Optional[AssetUploader] = None,
    asciidoc_renderer: Optional[AsciiDocRenderer] = None,
    schema_cache: Optional[SchemaCache] = None,
    csv_options: Optional[CsvOptions] = None,
) -> ConversionResult:
    """Convert a source file to a validated ADF document.

    The format is inferred from the extension unless given. Relative image
    and CSV paths resolve against the file's directory unless
    ``options.base_path`` is set. For Markdown, front matter is removed and
    returned as metadata; its ``space`` and ``macroFormat`` override the
    corresponding options.

    Parameters
    ----------
    path : str or Path
        Source file
    options : ConversionOptions or None
        Conversion options
    format : str or None
        Source format, inferred from the extension when omitted
    uploader, asciidoc_renderer, schema_cache, csv_options
        As for :func:`convert`

    Returns
    -------
    ConversionResult
        Document, page metadata and validation report

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist
    FileError
        If ``path`` cannot be read as UTF-8 text
    FormatError
        If the format cannot be inferred or is not supported

    """
    file_path = Path(path)
    if not file_path.is_file():
        raise FileNotFoundError(str(file_path))

    source_format = format or detect_format(file_path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileError(f"Could not read {file_path}: {e}", file_path=str(file_path), original_error=e) from e

    options = options or ConversionOptions()
    if options.base_path is None:
        options = options.create_updated(base_path=str(file_path.parent.resolve()))

    metadata = PageMetadata()
    if source_format == "markdown":
        metadata, text = extract_front_matter(text)
        options = apply_front_matter(options, metadata)

    doc, report = _convert_and_validate(
        text, source_format, options, uploader, asciidoc_renderer, schema_cache, csv_options
    )
    return ConversionResult(document=doc, metadata=metadata, format=source_format, validation=report)


def apply_front_matter(options: ConversionOptions, metadata: PageMetadata) -> ConversionOptions:
    """Let front matter override the space key and macro format."""
    updates: dict[str, Any] = {}
    if metadata.space:
        updates["space_key"] = metadata.space
    if metadata.macro_format:
        updates["macro_format"] = metadata.macro_format
    if not updates:
        return options
    try:
        return options.create_updated(**updates)
    except ValueError as e:
        raise ValidationError(
            f"Invalid front matter: {e}",
            parameter_name="macroFormat",
            parameter_value=metadata.macro_format,
            original_error=e,
        ) from e


def to_storage(doc: Document, options: Optional[StorageRendererOptions] = None) -> str:
    """Serialize a document to Confluence storage markup.

    Raises
    ------
    InvalidDocumentError
        If the root node is not a ``doc``

    """
    with debug_timer(logger, "Rendering (storage)"):
        return StorageRenderer(options).render_to_string(doc)


def to_publishable(
    doc: Document,
    instance_type: InstanceType = "cloud",
    storage_options: Optional[StorageRendererOptions] = None,
) -> Union[dict[str, Any], str]:
    """Return the body a Confluence instance of ``instance_type`` accepts.

    Cloud takes the ADF wire dict, Server and Data Center take storage
    markup.
    """
    if instance_type == "cloud":
        check_root(doc)
        return adf_to_dict(doc)
    if instance_type == "server":
        return to_storage(doc, storage_options)
    raise ValidationError(
        f"instance_type must be 'cloud' or 'server', got {instance_type!r}",
        parameter_name="instance_type",
        parameter_value=instance_type,
    )


__all__ = [
    "ConversionResult",
    "SUPPORTED_FORMATS",
    "apply_front_matter",
    "convert",
    "convert_file",
    "detect_format",
    "to_publishable",
    "to_storage",
    "validate_document",
]
