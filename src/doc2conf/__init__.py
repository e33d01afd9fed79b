"""doc2conf - Convert documents into the Atlassian Document Format.

doc2conf turns Markdown, AsciiDoc and CSV into Atlassian Document Format
(ADF) trees, the JSON document model of Confluence Cloud, and serializes
those trees into the XHTML storage markup consumed by Confluence Server and
Data Center.

The conversion core is pure: it reads source text and returns an immutable
tree. Side effects are limited to two injectable collaborators, an asset
uploader for local images and a schema cache for the official ADF JSON
schema.

Key Features
------------
- GitHub-flavoured Markdown with tables, task lists and fenced code
- Confluence extensions: status lozenges, mentions, emoji, inline cards,
  expand blocks, CSV table imports and a table of contents
- AsciiDoc through ``asciidoctor``, with admonitions and checklists
- Storage markup with ``ac:`` structured macros for code, tasks and panels
- Optional validation against the published ADF JSON schema

Examples
--------
Convert Markdown and publish to Cloud:

    >>> from doc2conf import convert, to_publishable
    >>> doc = convert("# Release\\n\\n- [ ] Tag\\n- [x] Build")
    >>> body = to_publishable(doc, "cloud")
    >>> body["type"]
    'doc'

Render storage markup for Server:

    >>> from doc2conf import to_storage
    >>> to_storage(convert("Hello **world**"))
    '<p>Hello <strong>world</strong></p>'

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "doc2conf requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from doc2conf.adf import (  # noqa: E402
    Document,
    Mark,
    Node,
    NodeVisitor,
    adf_to_dict,
    adf_to_json,
    dict_to_adf,
    json_to_adf,
)
from doc2conf.api import (  # noqa: E402
    SUPPORTED_FORMATS,
    ConversionResult,
    convert,
    convert_file,
    detect_format,
    to_publishable,
    to_storage,
    validate_document,
)
from doc2conf.exceptions import (  # noqa: E402
    DependencyError,
    Doc2ConfError,
    FileError,
    FormatError,
    InvalidDocumentError,
    InvalidOptionsError,
    ParsingError,
    RenderingError,
    SchemaError,
    UploadError,
    ValidationError,
)
from doc2conf.metadata import PageMetadata  # noqa: E402
from doc2conf.options import ConversionOptions, CsvOptions, StorageRendererOptions  # noqa: E402
from doc2conf.schema import SchemaCache, ValidationReport  # noqa: E402
from doc2conf.uploads import AssetUploader, UploadResult  # noqa: E402

__all__ = [
    "__version__",
    "SUPPORTED_FORMATS",
    "AssetUploader",
    "ConversionOptions",
    "ConversionResult",
    "CsvOptions",
    "DependencyError",
    "Doc2ConfError",
    "Document",
    "FileError",
    "FormatError",
    "InvalidDocumentError",
    "InvalidOptionsError",
    "Mark",
    "Node",
    "NodeVisitor",
    "PageMetadata",
    "ParsingError",
    "RenderingError",
    "SchemaCache",
    "SchemaError",
    "StorageRendererOptions",
    "UploadError",
    "UploadResult",
    "ValidationError",
    "ValidationReport",
    "adf_to_dict",
    "adf_to_json",
    "convert",
    "convert_file",
    "detect_format",
    "dict_to_adf",
    "json_to_adf",
    "to_publishable",
    "to_storage",
    "validate_document",
]
