#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for doc2conf.

This module centralizes the literal types, node type names, macro identifiers
and default values shared across the conversion pipeline.

Constants are organized by category:
1. Type Definitions - All Literal types and type aliases
2. Document Format - ADF node and mark names
3. Confluence Macros - macro keys and provider identifiers
4. Schema Validation - official schema location and cache settings
5. Dependencies - package requirement tuples for ``requires_dependencies``
6. File Extensions and Format Detection
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions - All Literal Types and Type Aliases
# =============================================================================

SourceFormat = Literal["markdown", "asciidoc", "csv"]
MacroFormat = Literal["markdown", "html"]
InstanceType = Literal["cloud", "server"]
LocalIdMode = Literal["random", "positional"]
TaskState = Literal["TODO", "DONE"]
PanelType = Literal["info", "note", "warning", "success", "error"]

# =============================================================================
# Document Format
# =============================================================================

ADF_VERSION = 1

TASK_STATE_TODO: TaskState = "TODO"
TASK_STATE_DONE: TaskState = "DONE"

# Action marks carry lower-case states, task items carry upper-case states
ACTION_STATE_TODO = "todo"
ACTION_STATE_DONE = "done"

TASK_LOCAL_ID_PREFIX = "task-"
TASK_LOCAL_ID_LENGTH = 8

DEFAULT_EXPAND_TITLE = "Expand"
DEFAULT_STATUS_COLOR = "grey"
DEFAULT_PANEL_TYPE: PanelType = "info"
DEFAULT_MEDIA_LAYOUT = "center"
MEDIA_FILE_COLLECTION = "contentId"
MENTION_ACCESS_LEVEL = "CONTAINER"

# =============================================================================
# Confluence Macros
# =============================================================================

CONFLUENCE_MACRO_PROVIDER = "com.atlassian.confluence.macro.core"
KNOWN_MACRO_PROVIDERS = frozenset({CONFLUENCE_MACRO_PROVIDER})

MARKDOWN_MACRO_KEY = "markdown"
HTML_MACRO_KEY = "html"
TOC_MACRO_KEY = "toc"
CODE_MACRO_KEY = "code"
TASKLIST_MACRO_KEY = "tasklist"
EXPAND_MACRO_KEY = "expand"
STATUS_MACRO_KEY = "status"

# Macros whose body is raw text rather than rich text
PLAIN_TEXT_BODY_MACROS = frozenset({MARKDOWN_MACRO_KEY, HTML_MACRO_KEY, CODE_MACRO_KEY})

DEFAULT_TASK_LIST_TITLE = "Task List"
DEFAULT_DIAGRAM_LANGUAGES = ("mermaid",)

# ADF panel type -> storage macro name
PANEL_MACRO_NAMES: dict[str, str] = {
    "info": "info",
    "note": "note",
    "warning": "warning",
    "success": "tip",
    "error": "warning",
}

# AsciiDoc admonition class -> ADF panel type
ADMONITION_PANEL_TYPES: dict[str, PanelType] = {
    "note": "note",
    "tip": "success",
    "warning": "warning",
    "caution": "warning",
    "important": "error",
}

# =============================================================================
# Schema Validation
# =============================================================================

ADF_SCHEMA_VERSION = "49.0.0"
ADF_SCHEMA_URL = f"https://unpkg.com/@atlaskit/adf-schema@{ADF_SCHEMA_VERSION}/dist/json-schema/v1/full.json"
DEFAULT_SCHEMA_CACHE_PATH = "cache/adf-schema.json"
DEFAULT_SCHEMA_MAX_AGE_SECONDS = 7 * 24 * 60 * 60
DEFAULT_SCHEMA_FETCH_TIMEOUT = 30.0
INVALID_ROOT_MESSAGE = 'Invalid ADF: Document must have type "doc"'

# =============================================================================
# Tabular Data
# =============================================================================

CSV_FENCE_MARKER = "csv"
DEFAULT_CSV_DELIMITER = ","
CSV_ERROR_HEADER = "Error"
CSV_ERROR_PREFIX = "Could not parse CSV"

# =============================================================================
# Dependencies
# =============================================================================

DEPS_MARKDOWN = [("mistune", "mistune", ">=3.0.0")]
DEPS_HTML = [("beautifulsoup4", "bs4", ">=4.12.0")]
DEPS_SCHEMA = [("jsonschema", "jsonschema", ">=4.0.0"), ("httpx", "httpx", ">=0.28.1")]
DEPS_YAML = [("pyyaml", "yaml", ">=6.0")]

ASCIIDOCTOR_EXECUTABLE = "asciidoctor"
ASCIIDOCTOR_ARGS = (
    "--safe-mode",
    "safe",
    "--backend",
    "html5",
    "--doctype",
    "article",
    "--embedded",
    "-a",
    "showtitle",
    "-a",
    "icons=font",
    "-a",
    "source-highlighter=highlight.js",
    "-o",
    "-",
    "-",
)

# =============================================================================
# File Extensions and Format Detection
# =============================================================================

FORMAT_EXTENSIONS: dict[str, SourceFormat] = {
    ".md": "markdown",
    ".markdown": "markdown",
    ".mdown": "markdown",
    ".adoc": "asciidoc",
    ".asciidoc": "asciidoc",
    ".asc": "asciidoc",
    ".csv": "csv",
}

DEFAULT_ADF_SUFFIX = ".adf.json"
DEFAULT_STORAGE_SUFFIX = ".storage.xml"
