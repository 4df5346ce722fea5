"""
Reconciliation Exception Hierarchy.

This module defines the exception hierarchy for the reconciliation framework.
Only structural problems are raised: row-level problems are collected as
Diagnostic values and never thrown.

Exception Severity Levels:
    - FATAL: Abort the run before any row is processed
    - CRITICAL: Stop processing the current file or sink delivery
    - RECOVERABLE: Log error, continue processing
    - WARNING: Log warning, processing continues
"""

from typing import Optional, Dict, Any, List
from enum import Enum


class ErrorSeverity(Enum):
    """
    Classify error severity for handling decisions.

    Attributes:
        FATAL: Unrecoverable error, the run is aborted
        CRITICAL: File-level or sink-level error
        RECOVERABLE: Operation-level error, continue with the rest
        WARNING: Non-critical issue, log and continue
    """
    FATAL = "fatal"
    CRITICAL = "critical"
    RECOVERABLE = "recoverable"
    WARNING = "warning"


class ReconcileException(Exception):
    """
    Base exception for all reconciliation errors.

    Provides:
    - Severity classification for handling decisions
    - Structured details dictionary for logging/reporting
    - Original exception preservation for debugging
    - Serialization support for JSON/dict output

    Example:
        >>> raise ReconcileException(
        ...     "Sink rejected batch",
        ...     severity=ErrorSeverity.RECOVERABLE,
        ...     details={'batch': 3}
        ... )
    """

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.RECOVERABLE,
        details: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.severity = severity
        self.details = details or {}
        self.original_exception = original_exception

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception to dictionary for logging/reporting."""
        return {
            'type': self.__class__.__name__,
            'message': self.message,
            'severity': self.severity.value,
            'details': self.details,
            'original_error': str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Input Errors (Fatal)
# ============================================================================

class InputError(ReconcileException):
    """
    Structural problem with the raw table handed to the pipeline.

    Raised before any row is processed; the engine propagates it to the
    caller instead of embedding it in a PipelineResult.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, severity=ErrorSeverity.FATAL, details=details)


class EmptyInputError(InputError):
    """The input contains no data rows."""

    def __init__(self, message: str = "Input contains no data rows"):
        super().__init__(message)


class MissingHeadersError(InputError):
    """The input has no header row."""

    def __init__(self, message: str = "Input has no column headers"):
        super().__init__(message)


class SchemaValidationError(ReconcileException):
    """
    A caller-supplied schema is syntactically invalid.

    Attributes:
        problems (List[str]): Every problem found in the schema

    Example:
        >>> raise SchemaValidationError([
        ...     'Duplicate field names: email',
        ...     'Field "age": min cannot be greater than max'
        ... ])
    """

    def __init__(self, problems: List[str]):
        super().__init__(
            f"Invalid schema: {', '.join(problems)}",
            severity=ErrorSeverity.FATAL,
            details={'problems': list(problems)}
        )
        self.problems = list(problems)


# ============================================================================
# Configuration Errors (Fatal)
# ============================================================================

class ConfigError(ReconcileException):
    """
    Configuration file errors (fatal - stop all processing).

    Raised when:
    - Configuration file not found
    - Invalid YAML syntax
    - Required configuration fields missing

    Attributes:
        field (Optional[str]): Specific config field that caused error
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message,
            severity=ErrorSeverity.FATAL,
            details={'field': field} if field else {}
        )
        self.field = field


class YAMLSizeError(ConfigError):
    """YAML file too large (security protection)."""

    def __init__(self, message: str, file_size: Optional[int] = None, max_size: Optional[int] = None):
        super().__init__(message)
        self.details.update({
            'file_size': file_size,
            'max_size': max_size
        })


class ConfigValidationError(ConfigError):
    """
    Configuration is valid YAML but does not match the expected structure.

    Example:
        >>> raise ConfigValidationError(
        ...     "sample_size must be a positive integer",
        ...     field="reconcile_job.sample_size",
        ...     expected="positive integer",
        ...     actual="-3"
        ... )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[str] = None
    ):
        super().__init__(message, field)
        self.details.update({
            'expected': expected,
            'actual': actual
        })


# ============================================================================
# Data Loading Errors (Critical)
# ============================================================================

class DataLoadError(ReconcileException):
    """
    Data file loading errors.

    Raised when:
    - File format invalid or corrupted
    - File cannot be read (permissions, encoding issues)
    - Parsing errors (malformed delimited text)

    Attributes:
        file_path (str): Path to file that failed to load
        line_number (Optional[int]): Line number where error occurred
    """

    def __init__(
        self,
        message: str,
        file_path: str,
        line_number: Optional[int] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(
            message,
            severity=ErrorSeverity.CRITICAL,
            details={'file_path': file_path, 'line_number': line_number},
            original_exception=original_exception
        )
        self.file_path = file_path
        self.line_number = line_number


class FileNotFoundError(DataLoadError):
    """Data file not found at specified path."""

    def __init__(self, file_path: str, searched_paths: Optional[list] = None):
        message = f"File not found: {file_path}"
        if searched_paths:
            message += f"\nSearched: {', '.join(searched_paths)}"

        super().__init__(message, file_path)
        self.details['searched_paths'] = searched_paths or []


class UnsupportedFormatError(DataLoadError):
    """File format not supported by the loader."""

    def __init__(self, file_path: str, format: str, supported_formats: list):
        super().__init__(
            f"Unsupported file format '{format}'. Supported: {', '.join(supported_formats)}",
            file_path
        )
        self.details.update({
            'format': format,
            'supported_formats': supported_formats
        })


# ============================================================================
# Sink Errors
# ============================================================================

class SinkError(ReconcileException):
    """
    Persistence backend errors.

    Raised when a sink cannot connect, write, read or purge. Batch-level
    failures during delivery are recorded in the ImportResult instead of
    propagating.

    Example:
        >>> raise SinkError(
        ...     "Failed to write batch",
        ...     provider="sqlite",
        ...     collection="customers"
        ... )
    """

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        collection: Optional[str] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(
            message,
            severity=ErrorSeverity.CRITICAL,
            details={
                'provider': provider,
                'collection': collection
            },
            original_exception=original_exception
        )


class UnsupportedProviderError(SinkError):
    """No sink is registered for the requested provider tag."""

    def __init__(self, provider: str, supported_providers: list):
        super().__init__(
            f"Unsupported sink provider '{provider}'. Supported: {', '.join(supported_providers)}",
            provider=provider
        )
        self.details['supported_providers'] = supported_providers


class SinkConfigError(SinkError):
    """Sink configuration is incomplete for its provider."""

    def __init__(self, problems: List[str], provider: Optional[str] = None):
        super().__init__(
            f"Invalid sink configuration: {', '.join(problems)}",
            provider=provider
        )
        self.details['problems'] = list(problems)
        self.problems = list(problems)
