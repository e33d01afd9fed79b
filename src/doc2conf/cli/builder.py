#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/cli/builder.py
"""Argument parser construction for the doc2conf CLI.

Conversion flags are generated from the field metadata of
:class:`~doc2conf.options.conversion.ConversionOptions`, so a new option
field only needs a ``help`` entry to appear on the command line. Every
generated flag defaults to None; :meth:`OptionsCLIBuilder.map_args_to_options`
returns only the flags the user actually passed, which lets them override
config file and environment values.

"""

import argparse
import logging
from dataclasses import MISSING, Field, fields
from importlib.metadata import PackageNotFoundError, version
from typing import Any, Dict, Optional, Type, get_args, get_origin

from doc2conf.constants import FORMAT_EXTENSIONS
from doc2conf.options.conversion import ConversionOptions

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_USAGE_ERROR = 2
EXIT_DEPENDENCY_ERROR = 3

CLI_METADATA_NAME = "cli_name"
CLI_METADATA_EXCLUDE = "exclude_from_cli"


def get_version() -> str:
    """Get the installed version of doc2confluence."""
    try:
        return version("doc2confluence")
    except PackageNotFoundError:
        return "unknown"


class OptionsCLIBuilder:
    """Generate argparse arguments from an options dataclass.

    Parameters
    ----------
    options_class : type, default ConversionOptions
        Frozen options dataclass whose fields carry ``help`` metadata

    """

    def __init__(self, options_class: Type[Any] = ConversionOptions) -> None:
        self.options_class = options_class
        self.dest_to_field: Dict[str, str] = {}

    @staticmethod
    def snake_to_kebab(name: str) -> str:
        """Convert snake_case to kebab-case."""
        return name.replace("_", "-")

    def infer_cli_name(self, field: Field) -> str:
        """Return the ``--flag`` for a field, negated for booleans that default to True."""
        explicit = field.metadata.get(CLI_METADATA_NAME)
        if explicit:
            return f"--{explicit}"

        kebab_name = self.snake_to_kebab(field.name)
        if field.default is True and not kebab_name.startswith("no-"):
            kebab_name = f"no-{kebab_name}"
        return f"--{kebab_name}"

    def get_argument_kwargs(self, field: Field) -> Dict[str, Any]:
        """Build the ``add_argument`` keyword arguments for one field."""
        metadata = field.metadata
        kwargs: Dict[str, Any] = {"dest": field.name, "default": None, "help": metadata.get("help", "")}

        if field.type in (bool, "bool"):
            kwargs["action"] = "store_false" if field.default is True else "store_true"
            return kwargs

        choices = metadata.get("choices")
        if choices is None:
            choices = _literal_choices(field.type)
        if choices:
            kwargs["choices"] = list(choices)
        else:
            kwargs["metavar"] = field.name.upper()
        kwargs["type"] = str
        return kwargs

    def _should_process_field(self, field: Field) -> bool:
        metadata = field.metadata
        if metadata.get(CLI_METADATA_EXCLUDE, False):
            return False
        if "help" not in metadata:
            logger.debug(f"Skipping option field without help metadata: {field.name}")
            return False
        return field.default is not MISSING

    def add_options_class_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Add one flag per eligible field, grouped as core or advanced."""
        core = parser.add_argument_group("conversion options")
        advanced = parser.add_argument_group("advanced conversion options")

        for field in fields(self.options_class):
            if not self._should_process_field(field):
                continue
            group = core if field.metadata.get("importance") == "core" else advanced
            group.add_argument(self.infer_cli_name(field), **self.get_argument_kwargs(field))
            self.dest_to_field[field.name] = field.name

    def map_args_to_options(self, parsed_args: argparse.Namespace) -> Dict[str, Any]:
        """Return the option values that were set on the command line."""
        values = {}
        for dest, field_name in self.dest_to_field.items():
            value = getattr(parsed_args, dest, None)
            if value is not None:
                values[field_name] = value
        return values


def _literal_choices(field_type: Any) -> Optional[tuple]:
    if isinstance(field_type, str):
        return None
    args = get_args(field_type)
    if get_origin(field_type) is None or not args:
        return None
    if all(isinstance(arg, str) for arg in args):
        return args
    return None


def create_parser(builder: Optional[OptionsCLIBuilder] = None) -> argparse.ArgumentParser:
    """Create the ``doc2conf`` argument parser.

    Parameters
    ----------
    builder : OptionsCLIBuilder or None
        Builder used for the conversion flags. Pass one to read the parsed
        values back with :meth:`OptionsCLIBuilder.map_args_to_options`.

    Returns
    -------
    argparse.ArgumentParser
        Parser with the ``convert`` subcommand

    """
    builder = builder or OptionsCLIBuilder()

    parser = argparse.ArgumentParser(
        prog="doc2conf",
        description="Convert Markdown, AsciiDoc and CSV into Confluence ADF or storage markup.",
    )
    parser.add_argument("--version", "-V", action="version", version=f"doc2conf {get_version()}")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    convert = subparsers.add_parser("convert", help="Convert a source document")
    convert.add_argument("input", help="Source file, or '-' to read from standard input")
    convert.add_argument("-o", "--output", help="Output file ('-' for stdout); defaults next to the input")
    convert.add_argument(
        "--format",
        choices=sorted(set(FORMAT_EXTENSIONS.values())),
        help="Source format; inferred from the file extension when omitted",
    )

    builder.add_options_class_arguments(convert)

    output_group = convert.add_argument_group("output")
    output_group.add_argument(
        "--storage", action="store_true", help="Write Confluence storage markup instead of ADF JSON"
    )
    output_group.add_argument("--dry-run", action="store_true", help="Print the result instead of writing a file")
    output_group.add_argument("--rich", action="store_true", help="Syntax-highlight printed output (needs rich)")
    output_group.add_argument("--schema-cache", metavar="PATH", help="Local copy of the official ADF schema")
    output_group.add_argument("--config", metavar="PATH", help="Configuration file (TOML, YAML or JSON)")

    logging_group = convert.add_argument_group("logging")
    logging_group.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        default=None,
        help="Logging level (default: DOC2CONF_LOG_LEVEL or WARNING)",
    )
    logging_group.add_argument("--log-file", metavar="PATH", help="Also write log messages to this file")
    logging_group.add_argument("--verbose", action="store_true", help="Shortcut for --log-level DEBUG")
    logging_group.add_argument(
        "--trace", action="store_true", help="Debug logging with timestamps and logger names"
    )

    return parser
