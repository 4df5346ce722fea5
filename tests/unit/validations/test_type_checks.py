"""
Unit tests for per-type value checks.
"""

import datetime

import pytest

from reconcile_framework.validations.type_checks import (
    check_boolean,
    check_date,
    check_email,
    check_number,
    check_type,
    check_url,
)


@pytest.mark.unit
class TestEmailCheck:

    def test_valid(self):
        assert check_email("a@b.io").valid

    def test_fixable_case_and_whitespace(self):
        outcome = check_email("  JANE@EXAMPLE.COM  ")
        assert not outcome.valid
        assert outcome.suggestion == "jane@example.com"

    def test_unfixable(self):
        outcome = check_email("invalid-email")
        assert not outcome.valid
        assert outcome.suggestion is None

    def test_uppercase_without_spaces_is_valid(self):
        assert check_email("JANE@EXAMPLE.COM").valid


@pytest.mark.unit
class TestUrlCheck:

    @pytest.mark.parametrize("value", ["https://example.com", "ftp://files.example.com/a", "mailto:a@b.io"])
    def test_valid(self, value):
        assert check_url(value).valid

    @pytest.mark.parametrize("value", ["example.com", "http://exa mple.com", "not a url"])
    def test_invalid(self, value):
        outcome = check_url(value)
        assert not outcome.valid
        assert outcome.suggestion is None


@pytest.mark.unit
class TestNumberCheck:

    @pytest.mark.parametrize("value", ["42", "-3.5", "1,200", "$45.50", " 7 ", "1e3", 12, 4.5])
    def test_valid(self, value):
        assert check_number(value).valid

    @pytest.mark.parametrize("value", ["abc", "12abc", "1.2.3", True])
    def test_invalid(self, value):
        outcome = check_number(value)
        assert not outcome.valid
        assert outcome.suggestion is None


@pytest.mark.unit
class TestBooleanCheck:

    @pytest.mark.parametrize("value", ["true", "FALSE", "Yes", "no", "1", "0", True, False])
    def test_valid(self, value):
        assert check_boolean(value).valid

    def test_padded_vocabulary_is_fixable(self):
        outcome = check_boolean(" yes ")
        assert not outcome.valid
        assert outcome.suggestion is True

    def test_padded_false_suggests_false(self):
        outcome = check_boolean(" no ")
        assert not outcome.valid
        assert outcome.suggestion is False
        assert outcome.suggestion is not None

    def test_unknown_word(self):
        outcome = check_boolean("maybe")
        assert not outcome.valid
        assert outcome.suggestion is None


@pytest.mark.unit
class TestDateCheck:

    @pytest.mark.parametrize("value", [
        "2024-01-15",
        "2024-01-15T10:30:00",
        "2024-01-15T10:30:00Z",
        "01/15/2024",
        datetime.date(2024, 1, 15),
    ])
    def test_canonical(self, value):
        assert check_date(value).valid

    def test_parseable_text_gets_iso_suggestion(self):
        outcome = check_date("January 15, 2024")
        assert not outcome.valid
        assert outcome.suggestion == "2024-01-15"

    def test_unparseable(self):
        outcome = check_date("someday")
        assert not outcome.valid
        assert outcome.suggestion is None

    def test_bare_number_is_not_a_date(self):
        assert check_date("2024").suggestion is None


@pytest.mark.unit
class TestCheckType:

    def test_string_and_unknown_accept_anything(self):
        assert check_type(12345, "string").valid
        assert check_type("x", "whatever").valid

    def test_array_and_object(self):
        assert check_type([1, 2], "array").valid
        assert not check_type("1,2", "array").valid
        assert check_type({"a": 1}, "object").valid
        assert not check_type("{}", "object").valid
