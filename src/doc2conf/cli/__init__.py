"""Command-line interface for the doc2conf conversion library.

This module provides the ``doc2conf`` command, which converts Markdown,
AsciiDoc and CSV files into the body Confluence expects: ADF JSON for Cloud,
storage markup for Server and Data Center.

Settings are resolved in this order, first match wins: command-line flags,
environment variables, the configuration file, then built-in defaults.

Environment Variable Support
----------------------------
- ``DOC2CONF_LOG_LEVEL``: default for ``--log-level``
- ``DOC2CONF_SPACE``: default for ``--space``
- ``DOC2CONF_INSTANCE_TYPE``: default for ``--instance-type``
- ``DOC2CONF_SCHEMA_CACHE``: default for ``--schema-cache``
- ``DOC2CONF_CONFIG``: default for ``--config``

Examples
--------
Convert a Markdown page to ADF JSON (written to ``page.adf.json``)::

    $ doc2conf convert page.md

Produce storage markup for a Server instance::

    $ doc2conf convert page.md --instance-type server

Print the result with syntax highlighting::

    $ doc2conf convert notes.adoc --dry-run --rich

Read from standard input::

    $ cat data.csv | doc2conf convert - --format csv -o table.adf.json

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/doc2conf/cli/__init__.py
import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from doc2conf.api import apply_front_matter, convert, convert_file, to_publishable
from doc2conf.cli.builder import (
    EXIT_DEPENDENCY_ERROR,
    EXIT_ERROR,
    EXIT_SUCCESS,
    EXIT_USAGE_ERROR,
    OptionsCLIBuilder,
    create_parser,
)
from doc2conf.cli.config import load_config_with_priority
from doc2conf.cli.output import print_output
from doc2conf.constants import DEFAULT_ADF_SUFFIX, DEFAULT_STORAGE_SUFFIX
from doc2conf.exceptions import DependencyError, Doc2ConfError, FileError, FormatError, RenderingError
from doc2conf.logging_utils import configure_logging
from doc2conf.metadata import extract_front_matter
from doc2conf.options.conversion import ConversionOptions
from doc2conf.options.storage import StorageRendererOptions
from doc2conf.renderers.base import BaseRenderer
from doc2conf.schema import SchemaCache

logger = logging.getLogger(__name__)

__all__ = [
    "main",
    "create_parser",
    "resolve_options",
]

# environment variable -> ConversionOptions field
ENV_OPTION_FIELDS = {
    "DOC2CONF_SPACE": "space_key",
    "DOC2CONF_INSTANCE_TYPE": "instance_type",
}


def _setup_logging_level(parsed_args: argparse.Namespace, config: Dict[str, Any]) -> None:
    """Set up logging level based on command-line arguments.

    Parameters
    ----------
    parsed_args : argparse.Namespace
        Parsed command-line arguments
    config : dict
        Loaded configuration file

    """
    level_name = (
        parsed_args.log_level or os.environ.get("DOC2CONF_LOG_LEVEL") or config.get("log_level") or "WARNING"
    )

    # --trace takes highest precedence, then --verbose, then --log-level
    if parsed_args.trace:
        log_level = logging.DEBUG
    elif parsed_args.verbose and str(level_name).upper() == "WARNING":
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, str(level_name).upper(), logging.WARNING)

    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def resolve_options(
    parsed_args: argparse.Namespace,
    builder: OptionsCLIBuilder,
    config: Dict[str, Any],
    environ: Optional[Dict[str, str]] = None,
) -> tuple[ConversionOptions, StorageRendererOptions]:
    """Merge config file, environment and flags into option objects.

    Parameters
    ----------
    parsed_args : argparse.Namespace
        Parsed ``convert`` arguments
    builder : OptionsCLIBuilder
        The builder that generated the conversion flags
    config : dict
        Loaded configuration file, possibly empty
    environ : dict or None
        Environment mapping, ``os.environ`` when omitted

    Returns
    -------
    tuple of (ConversionOptions, StorageRendererOptions)
        Options for the parser and for the storage renderer

    Raises
    ------
    ValueError
        If a merged value is not accepted by the options class

    """
    environ = os.environ if environ is None else environ

    values: Dict[str, Any] = {key: value for key, value in config.items() if key != "storage"}
    for env_name, field_name in ENV_OPTION_FIELDS.items():
        if environ.get(env_name):
            values[field_name] = environ[env_name]
    values.update(builder.map_args_to_options(parsed_args))

    storage_config = config.get("storage") or {}
    if not isinstance(storage_config, dict):
        raise ValueError(f"'storage' in the configuration file must be a table, got {type(storage_config).__name__}")

    return ConversionOptions.from_mapping(values), StorageRendererOptions.from_mapping(storage_config)


def _resolve_schema_cache(
    parsed_args: argparse.Namespace, config: Dict[str, Any], options: ConversionOptions
) -> Optional[SchemaCache]:
    path = parsed_args.schema_cache or os.environ.get("DOC2CONF_SCHEMA_CACHE") or config.get("schema_cache")
    if not options.use_official_schema or not path:
        return None
    return SchemaCache(cache_path=Path(path).expanduser())


def _default_output_path(input_path: str, use_storage: bool) -> Optional[Path]:
    if input_path == "-":
        return None
    source = Path(input_path)
    suffix = DEFAULT_STORAGE_SUFFIX if use_storage else DEFAULT_ADF_SUFFIX
    return source.with_name(f"{source.stem}{suffix}")


def _convert_stdin(
    parsed_args: argparse.Namespace, options: ConversionOptions, schema_cache: Optional[SchemaCache]
) -> Any:
    source_format = parsed_args.format or "markdown"
    text = sys.stdin.read()
    if source_format == "markdown":
        metadata, text = extract_front_matter(text)
        options = apply_front_matter(options, metadata)
    return convert(text, source_format, options, schema_cache=schema_cache)


def _run_convert(parsed_args: argparse.Namespace, builder: OptionsCLIBuilder, config: Dict[str, Any]) -> int:
    options, storage_options = resolve_options(parsed_args, builder, config)
    schema_cache = _resolve_schema_cache(parsed_args, config, options)

    if parsed_args.input == "-":
        doc = _convert_stdin(parsed_args, options, schema_cache)
    else:
        result = convert_file(parsed_args.input, options, format=parsed_args.format, schema_cache=schema_cache)
        doc = result.document
        if result.metadata.title:
            logger.info(f"Page title from front matter: {result.metadata.title}")

    use_storage = parsed_args.storage or options.instance_type == "server"
    body = to_publishable(doc, "server" if use_storage else "cloud", storage_options)
    text = body if isinstance(body, str) else json.dumps(body, indent=2, ensure_ascii=False)

    output = parsed_args.output or _default_output_path(parsed_args.input, use_storage)
    if parsed_args.dry_run or output is None or str(output) == "-":
        print_output(text, use_rich=parsed_args.rich, language="xml" if use_storage else "json")
        return EXIT_SUCCESS

    BaseRenderer.write_text_output(text, output)
    logger.info(f"Wrote {output}")
    return EXIT_SUCCESS


def main(args: list[str] | None = None) -> int:
    """Execute the ``doc2conf`` command.

    Parameters
    ----------
    args : list of str or None
        Command-line arguments, ``sys.argv[1:]`` when omitted

    Returns
    -------
    int
        ``0`` on success, ``1`` for a conversion error, ``2`` for a usage or
        file error and ``3`` for a missing dependency

    """
    builder = OptionsCLIBuilder()
    parser = create_parser(builder)
    parsed_args = parser.parse_args(args)

    try:
        config = load_config_with_priority(parsed_args.config or os.environ.get("DOC2CONF_CONFIG"))
    except argparse.ArgumentTypeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    _setup_logging_level(parsed_args, config)

    try:
        return _run_convert(parsed_args, builder, config)
    except DependencyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_DEPENDENCY_ERROR
    except (FileError, FormatError, RenderingError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR
    except Doc2ConfError as e:
        logger.debug("Conversion failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR


if __name__ == "__main__":
    sys.exit(main())
