#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the richdocx library.

Sanitization and conversion degrade silently and never raise. The exceptions
below cover the operations that must fail loudly: metadata validation,
serialization, reading DOCX archives and talking to the import service.

Exception Hierarchy
-------------------
- RichDocxError (base exception)

  - ValidationError (metadata/option validation)
    - InvalidOptionsError (wrong options class for a component)

  - ParsingError (reading DOCX input)

  - RenderingError (DOCX serialization)
    - OutputWriteError (file write failures)

  - TransportError (import service I/O and non-success responses)

  - DependencyError (missing/incompatible packages)

"""

from typing import Any


class RichDocxError(Exception):
    """Base exception class for all richdocx-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(RichDocxError):
    """Exception raised for invalid input parameters, options or metadata.

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
    """Exception raised when an incorrect options class is provided to a component.

    Parameters
    ----------
    component_name : str
        Name of the component that received invalid options
    expected_type : type
        The expected options class type
    received_type : type
        The actual options class type that was received

    """

    def __init__(self, component_name: str, expected_type: type, received_type: type):
        """Initialize the invalid options error."""
        message = (
            f"{component_name} expected options of type '{expected_type.__name__}' "
            f"but received '{received_type.__name__}'."
        )
        super().__init__(message, parameter_name="options", parameter_value=received_type)
        self.component_name = component_name
        self.expected_type = expected_type
        self.received_type = received_type


class ParsingError(RichDocxError):
    """Exception raised when reading an input document fails.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    parsing_stage : str, optional
        The stage of parsing where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the parsing failure

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error."""
        super().__init__(message, original_error)
        self.parsing_stage = parsing_stage


class RenderingError(RichDocxError):
    """Exception raised when DOCX serialization fails.

    Serialization is all-or-nothing: when this is raised no output was
    produced for the caller.

    Parameters
    ----------
    message : str
        Description of the rendering failure
    rendering_stage : str, optional
        The stage of rendering where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the rendering failure

    """

    def __init__(self, message: str, rendering_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the rendering error."""
        super().__init__(message, original_error)
        self.rendering_stage = rendering_stage


class OutputWriteError(RenderingError):
    """Exception raised when writing the output file fails.

    Parameters
    ----------
    file_path : str
        Path to the output file that failed to write
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, file_path: str, original_error: Exception | None = None):
        """Initialize the output write error."""
        super().__init__(
            f"Failed to write output file: {file_path}", rendering_stage="file_write", original_error=original_error
        )
        self.file_path = file_path


class TransportError(RichDocxError):
    """Exception raised when the import service cannot be reached or answers with an error.

    Parameters
    ----------
    message : str
        Description of the failure
    status_code : int, optional
        HTTP status code of the response, when one was received
    body : str, optional
        Response body text, when one was received
    original_error : Exception, optional
        The underlying network exception

    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the transport error with response details."""
        super().__init__(message, original_error)
        self.status_code = status_code
        self.body = body


class DependencyError(RichDocxError):
    """Exception raised when required dependencies are not available.

    Parameters
    ----------
    component_name : str
        Name of the component requiring dependencies
    missing_packages : list[tuple[str, str]]
        List of (package_name, version_spec) tuples for missing packages
    version_mismatches : list[tuple[str, str, str]], optional
        List of (package_name, required_version, installed_version) tuples
    original_import_error : ImportError, optional
        The first ImportError encountered

    """

    def __init__(
        self,
        component_name: str,
        missing_packages: list[tuple[str, str]],
        version_mismatches: list[tuple[str, str, str]] | None = None,
        original_import_error: ImportError | None = None,
    ):
        """Initialize the dependency error with package details."""
        version_mismatches = version_mismatches or []
        message_parts = []
        if missing_packages:
            pkg_list = ", ".join(f"'{name}{spec}'" if spec else f"'{name}'" for name, spec in missing_packages)
            message_parts.append(f"{component_name} requires the following packages: {pkg_list}")
        if version_mismatches:
            mismatch_str = ", ".join(
                f"'{name}' (requires {required}, but {installed} is installed)"
                for name, required, installed in version_mismatches
            )
            message_parts.append(f"{component_name} has version mismatches: {mismatch_str}")

        all_packages = missing_packages + [(name, req) for name, req, _ in version_mismatches]
        if all_packages:
            packages_str = " ".join(f'"{name}{spec}"' if spec else name for name, spec in all_packages)
            message_parts.append(f"Install with: pip install --upgrade {packages_str}")

        super().__init__("\n".join(message_parts), original_error=original_import_error)
        self.component_name = component_name
        self.missing_packages = missing_packages
        self.version_mismatches = version_mismatches
