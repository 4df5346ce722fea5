"""
Unit tests for the exception hierarchy.
"""

import pytest

from reconcile_framework.core.exceptions import (
    ReconcileException,
    ErrorSeverity,
    InputError,
    EmptyInputError,
    MissingHeadersError,
    SchemaValidationError,
    ConfigError,
    YAMLSizeError,
    ConfigValidationError,
    DataLoadError,
    FileNotFoundError,
    UnsupportedFormatError,
    SinkError,
    UnsupportedProviderError,
    SinkConfigError,
)


@pytest.mark.unit
class TestErrorSeverity:
    """Test error severity enum."""

    def test_severity_values(self):
        assert ErrorSeverity.FATAL.value == "fatal"
        assert ErrorSeverity.CRITICAL.value == "critical"
        assert ErrorSeverity.RECOVERABLE.value == "recoverable"
        assert ErrorSeverity.WARNING.value == "warning"


@pytest.mark.unit
class TestReconcileException:
    """Test base exception class."""

    def test_basic_exception(self):
        exc = ReconcileException("Test error")

        assert str(exc) == "Test error"
        assert exc.message == "Test error"
        assert exc.severity == ErrorSeverity.RECOVERABLE
        assert exc.details == {}
        assert exc.original_exception is None

    def test_exception_serialization(self):
        exc = ReconcileException(
            "Test error",
            severity=ErrorSeverity.CRITICAL,
            details={'batch': 3},
            original_exception=ValueError("Original")
        )

        result = exc.to_dict()

        assert result['type'] == 'ReconcileException'
        assert result['message'] == 'Test error'
        assert result['severity'] == 'critical'
        assert result['details'] == {'batch': 3}
        assert 'Original' in result['original_error']

    def test_serialization_without_original(self):
        assert ReconcileException("x").to_dict()['original_error'] is None


@pytest.mark.unit
class TestInputErrors:
    """Structural input problems are fatal."""

    def test_empty_input(self):
        exc = EmptyInputError()
        assert isinstance(exc, InputError)
        assert exc.severity == ErrorSeverity.FATAL
        assert "no data rows" in exc.message

    def test_missing_headers(self):
        exc = MissingHeadersError()
        assert exc.severity == ErrorSeverity.FATAL
        assert "headers" in exc.message

    def test_schema_validation_error_keeps_problems(self):
        problems = ["Duplicate field names: email", 'Field "age": min cannot be greater than max']
        exc = SchemaValidationError(problems)

        assert exc.problems == problems
        assert exc.details['problems'] == problems
        assert exc.severity == ErrorSeverity.FATAL
        assert "Duplicate field names: email" in exc.message


@pytest.mark.unit
class TestConfigErrors:

    def test_config_error_field(self):
        exc = ConfigError("bad", field="reconcile_job.sample_size")
        assert exc.field == "reconcile_job.sample_size"
        assert exc.details == {'field': "reconcile_job.sample_size"}

    def test_yaml_size_error(self):
        exc = YAMLSizeError("too big", file_size=20, max_size=10)
        assert isinstance(exc, ConfigError)
        assert exc.details['file_size'] == 20
        assert exc.details['max_size'] == 10

    def test_config_validation_error(self):
        exc = ConfigValidationError("bad", field="f", expected="int", actual="'x'")
        assert exc.details['expected'] == "int"
        assert exc.details['actual'] == "'x'"


@pytest.mark.unit
class TestLoadAndSinkErrors:

    def test_file_not_found(self):
        exc = FileNotFoundError("missing.csv")
        assert isinstance(exc, DataLoadError)
        assert exc.file_path == "missing.csv"
        assert exc.severity == ErrorSeverity.CRITICAL

    def test_unsupported_format(self):
        exc = UnsupportedFormatError("data.xlsx", ".xlsx", [".csv", ".tsv"])
        assert ".xlsx" in exc.message
        assert exc.details['supported_formats'] == [".csv", ".tsv"]

    def test_unsupported_provider(self):
        exc = UnsupportedProviderError("mongo", ["jsonl", "memory", "sqlite"])
        assert isinstance(exc, SinkError)
        assert exc.details['provider'] == "mongo"
        assert "mongo" in exc.message

    def test_sink_config_error(self):
        exc = SinkConfigError(["Provider is required"], provider=None)
        assert exc.problems == ["Provider is required"]
