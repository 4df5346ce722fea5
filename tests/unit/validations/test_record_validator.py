"""
Unit tests for record validation in both modes.
"""

import pytest

from reconcile_framework.core.results import Severity
from reconcile_framework.core.schema import Schema
from reconcile_framework.validations.validator import RecordValidator


def _schema(*fields, **extra):
    return Schema.from_dict(dict(fields=list(fields), **extra))


def _messages(outcome):
    return [d.message for d in outcome.errors]


@pytest.fixture
def validator():
    return RecordValidator()


@pytest.mark.unit
class TestRequiredAndType:

    def test_valid_record(self, validator, customer_schema):
        record = {"email": "a@b.io", "name": "Ann", "phone": "555", "age": "32", "active": "yes"}

        outcome = validator.validate([record], customer_schema)

        assert outcome.is_valid
        assert outcome.errors == []
        assert outcome.warnings == []
        assert outcome.valid_row_count == 1

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_required_missing(self, validator, value):
        schema = _schema({"name": "email", "type": "email", "required": True})

        outcome = validator.validate([{"email": value}], schema)

        assert _messages(outcome) == ["Required field is missing or empty"]
        assert outcome.errors[0].field == "email"

    def test_required_key_absent(self, validator):
        schema = _schema({"name": "email", "required": True}, {"name": "name"})
        outcome = validator.validate([{"name": "Ann"}], schema)
        assert _messages(outcome) == ["Required field is missing or empty"]

    def test_type_errors_carry_suggestions(self, validator, customer_schema):
        record = {"email": " A@B.IO ", "age": "32"}

        outcome = validator.validate([record], customer_schema)

        diagnostic = outcome.errors[0]
        assert diagnostic.message == "Invalid email format"
        assert diagnostic.original_value == " A@B.IO "
        assert diagnostic.suggested_value == "a@b.io"
        assert diagnostic.severity == Severity.ERROR

    def test_optional_blank_is_not_type_checked(self, validator):
        schema = _schema({"name": "site", "type": "url"})
        assert validator.validate([{"site": ""}], schema).is_valid

    def test_type_checked_on_original_value(self, validator):
        schema = _schema({"name": "age", "type": "number"})
        outcome = validator.validate([{"age": "forty"}], schema)
        assert _messages(outcome) == ["Invalid number format"]


@pytest.mark.unit
class TestRules:

    def test_range(self, validator, customer_schema):
        outcome = validator.validate(
            [{"email": "a@b.io", "age": "150"}, {"email": "a@b.io", "age": -5}],
            customer_schema,
        )
        assert _messages(outcome) == ["Value 150 exceeds maximum 120", "Value -5 is below minimum 0"]

    def test_float_bound_rendering(self, validator):
        schema = _schema({"name": "score", "type": "number", "validation": {"max": 9.5}})
        outcome = validator.validate([{"score": "10.25"}], schema)
        assert _messages(outcome) == ["Value 10.25 exceeds maximum 9.5"]

    def test_length(self, validator):
        schema = _schema({"name": "code", "validation": {"minLength": 2, "maxLength": 4}})
        outcome = validator.validate([{"code": "A"}, {"code": "ABCDE"}], schema)
        assert _messages(outcome) == [
            "String length 1 is below minimum 2",
            "String length 5 exceeds maximum 4",
        ]

    def test_pattern(self, validator):
        schema = _schema({"name": "sku", "validation": {"pattern": "^[A-Z]{3}-\\d+$"}})
        outcome = validator.validate([{"sku": "ABC-12"}, {"sku": "abc-12"}], schema)

        assert _messages(outcome) == ["Value does not match required pattern: ^[A-Z]{3}-\\d+$"]
        assert outcome.errors[0].row == 2

    def test_rule_diagnostics_have_no_suggestion(self, validator, customer_schema):
        outcome = validator.validate([{"email": "a@b.io", "age": "500"}], customer_schema)
        assert not outcome.errors[0].has_suggestion

    def test_type_and_rule_both_reported(self, validator):
        schema = _schema({"name": "code", "type": "email", "validation": {"minLength": 5}})
        outcome = validator.validate([{"code": "x"}], schema)
        assert _messages(outcome) == ["Invalid email format", "String length 1 is below minimum 5"]


@pytest.mark.unit
class TestUnique:

    def test_unique_empty(self, validator):
        schema = _schema({"name": "id", "unique": True})
        outcome = validator.validate([{"id": ""}], schema)
        assert _messages(outcome) == ["Unique field cannot be empty"]

    def test_unique_and_required_both_flag(self, validator):
        schema = _schema({"name": "id", "unique": True, "required": True})
        outcome = validator.validate([{"id": None}], schema)
        assert _messages(outcome) == ["Required field is missing or empty", "Unique field cannot be empty"]

    def test_cross_row_duplicates_not_checked(self, validator):
        schema = _schema({"name": "id", "unique": True})
        assert validator.validate([{"id": "1"}, {"id": "1"}], schema).is_valid


@pytest.mark.unit
class TestBasicMode:

    def test_email_like_names(self, validator):
        outcome = validator.validate([{"contact_mail": "nope", "user_email": "x@y.io"}], None)
        assert [(d.field, d.message) for d in outcome.errors] == [("contact_mail", "Invalid email format")]

    def test_url_like_names(self, validator):
        outcome = validator.validate([{"website": "example.com", "profile_url": "https://a.io"}])
        assert [(d.field, d.message) for d in outcome.errors] == [("website", "Invalid URL format")]

    def test_long_value_warning(self, validator):
        outcome = validator.validate([{"notes": "x" * 10_001}])

        assert outcome.errors[0].severity == Severity.WARNING
        assert outcome.is_valid
        assert outcome.valid_row_count == 1

    def test_other_fields_unchecked(self, validator):
        assert validator.validate([{"age": "not-a-number"}]).errors == []

    def test_schema_absent_warning(self, validator):
        outcome = validator.validate([{"mail": "bad"}])
        assert outcome.warnings == [
            "1 rows have validation errors that must be fixed before import",
            "No schema provided - only basic validation performed",
        ]


@pytest.mark.unit
class TestRowNumbers:

    def test_original_row_numbers(self, validator, customer_schema):
        outcome = validator.validate(
            [{"email": "bad", "age": "1"}, {"email": "also-bad", "age": "1"}],
            customer_schema,
            row_numbers=[2, 5],
        )

        assert [d.row for d in outcome.errors] == [2, 5]
        assert outcome.errors_for_row(5)[0].original_value == "also-bad"
        assert outcome.invalid_row_count == 2
