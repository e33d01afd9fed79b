#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the doc2conf library.

This module defines specialized exception classes for the error conditions
that can occur while converting documents to the Atlassian Document Format
and serializing them to Confluence storage markup.

Only structural errors (a tree whose root is not a ``doc`` node) escape the
conversion core. Tabular parse failures, upload failures and schema
conformance problems are caught where they happen and degraded to a
still-valid fragment.

Exception Hierarchy
-------------------
- Doc2ConfError (base exception)

  - ValidationError (parameter/option/tree validation)
    - InvalidOptionsError (wrong options class for parser)
    - InvalidDocumentError (root node is not ``doc``)

  - FileError (file access and I/O)
    - FileNotFoundError (file doesn't exist)

  - FormatError (unsupported/unknown source formats)

  - ParsingError (source tokenizing or pre-rendering failures)

  - RenderingError (output generation failures)

  - UploadError (asset store failures)

  - SchemaError (schema fetch or compile failures)

  - DependencyError (missing/incompatible packages or executables)

"""

from typing import Any


class Doc2ConfError(Exception):
    """Base exception class for all doc2conf-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(Doc2ConfError):
    """Exception raised for invalid input parameters, options or trees.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """Exception raised when incorrect options class is provided to a parser.

    Parameters
    ----------
    converter_name : str
        Name of the parser that received invalid options
    expected_type : type
        The expected options class type
    received_type : type
        The actual options class type that was received
    message : str, optional
        Custom error message. If not provided, generates a helpful message

    """

    def __init__(
        self,
        converter_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the invalid options error with type details."""
        if message is None:
            message = (
                f"'{converter_name}' parser expects options of type '{expected_type.__name__}', "
                f"but received '{received_type.__name__}'."
            )
        super().__init__(
            message=message,
            parameter_name="options",
            parameter_value=received_type,
            original_error=original_error,
        )
        self.converter_name = converter_name
        self.expected_type = expected_type
        self.received_type = received_type


class InvalidDocumentError(ValidationError):
    """Exception raised when a tree violates the basic document invariant.

    The root of every document tree must be a ``doc`` node. This is the only
    error the conversion core lets propagate to callers.

    Parameters
    ----------
    message : str
        Description of the structural violation
    root_type : str, optional
        The type that was found at the root

    """

    def __init__(self, message: str, root_type: str | None = None, original_error: Exception | None = None):
        """Initialize the error with the offending root type."""
        super().__init__(message, parameter_name="type", parameter_value=root_type, original_error=original_error)
        self.root_type = root_type


class FileError(Doc2ConfError):
    """Base exception for file access and I/O errors.

    Parameters
    ----------
    message : str
        Description of the file error
    file_path : str, optional
        Path to the problematic file

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the file error with path information."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class FileNotFoundError(FileError):
    """Exception raised when a source file cannot be found."""

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the error for a missing file."""
        if message is None:
            message = f"File not found: {file_path}"
        super().__init__(message, file_path=file_path, original_error=original_error)


class FormatError(Doc2ConfError):
    """Exception raised for unknown or unsupported source formats.

    Parameters
    ----------
    format_type : str
        The format that was requested
    supported_formats : list[str], optional
        Formats that are supported

    """

    def __init__(
        self,
        format_type: str,
        supported_formats: list[str] | None = None,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the format error with format details."""
        if message is None:
            message = f"Unsupported format: '{format_type}'"
            if supported_formats:
                message += f". Supported formats: {', '.join(supported_formats)}"
        super().__init__(message, original_error=original_error)
        self.format_type = format_type
        self.supported_formats = supported_formats or []


class ParsingError(Doc2ConfError):
    """Exception raised when source text cannot be tokenized or pre-rendered.

    Parameters
    ----------
    message : str
        Description of the parsing error
    parsing_stage : str, optional
        Stage of parsing where the error occurred

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error with stage information."""
        super().__init__(message, original_error=original_error)
        self.parsing_stage = parsing_stage


class RenderingError(Doc2ConfError):
    """Exception raised when output generation fails.

    Parameters
    ----------
    message : str
        Description of the rendering error
    rendering_stage : str, optional
        Stage of rendering where the error occurred

    """

    def __init__(self, message: str, rendering_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the rendering error with stage information."""
        super().__init__(message, original_error=original_error)
        self.rendering_stage = rendering_stage


class UploadError(Doc2ConfError):
    """Exception raised by asset uploaders when storing a file fails.

    Image handling catches this and falls back to an external-URL reference.

    Parameters
    ----------
    message : str
        Description of the upload failure
    file_path : str, optional
        The file that could not be uploaded

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the upload error."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class SchemaError(Doc2ConfError):
    """Exception raised when the official schema cannot be fetched or compiled.

    Parameters
    ----------
    message : str
        Description of the failure
    source : str, optional
        URL or file path the schema was loaded from

    """

    def __init__(self, message: str, source: str | None = None, original_error: Exception | None = None):
        """Initialize the schema error."""
        super().__init__(message, original_error=original_error)
        self.source = source


class DependencyError(Doc2ConfError):
    """Exception raised when required dependencies are not available.

    Parameters
    ----------
    converter_name : str
        Name of the converter requiring dependencies
    missing_packages : list[tuple[str, str]]
        List of (package_name, version_spec) tuples for missing packages
    version_mismatches : list[tuple[str, str, str]], optional
        List of (package_name, required_version, installed_version) tuples
    install_command : str, optional
        Suggested command to resolve the issue
    message : str, optional
        Custom error message. If not provided, generates a helpful message

    """

    def __init__(
        self,
        converter_name: str,
        missing_packages: list[tuple[str, str]],
        version_mismatches: list[tuple[str, str, str]] | None = None,
        install_command: str = "",
        message: str | None = None,
        original_import_error: ImportError | None = None,
    ):
        """Initialize the dependency error with package details."""
        version_mismatches = version_mismatches or []
        self.original_import_error = original_import_error
        if message is None:
            message_parts = []

            if missing_packages:
                pkg_list = ", ".join(f"'{name}{spec}'" if spec else f"'{name}'" for name, spec in missing_packages)
                message_parts.append(f"{converter_name.upper()} format requires the following packages: {pkg_list}")

            if version_mismatches:
                mismatch_str = ", ".join(
                    f"'{name}' (requires {required}, but {installed} is installed)"
                    for name, required, installed in version_mismatches
                )
                message_parts.append(f"{converter_name.upper()} format has version mismatches: {mismatch_str}")

            message = "\n".join(message_parts)

            if install_command:
                message += f"\nInstall with: {install_command}"
            else:
                all_packages = missing_packages + [(name, req) for name, req, _ in version_mismatches]
                if all_packages:
                    packages_str = " ".join(f'"{name}{spec}"' if spec else name for name, spec in all_packages)
                    message += f"\nInstall with: pip install --upgrade {packages_str}"

        super().__init__(message)
        self.converter_name = converter_name
        self.missing_packages = missing_packages
        self.version_mismatches = version_mismatches
        self.install_command = install_command
