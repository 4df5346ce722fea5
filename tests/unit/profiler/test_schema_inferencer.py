"""
Unit tests for schema inference, structural checks and merging.
"""

import pytest

from reconcile_framework.core.exceptions import SchemaValidationError
from reconcile_framework.core.schema import Schema, SchemaField, ValidationRules
from reconcile_framework.profiler.analyzer import ColumnAnalyzer
from reconcile_framework.profiler.schema_inferencer import (
    SchemaInferencer,
    ensure_valid,
    generate_schema_doc,
    merge_schemas,
    normalize_field_name,
    validate_schema,
)


def _analyze(headers, rows):
    return ColumnAnalyzer().analyze(headers, rows)


@pytest.mark.unit
class TestNormalizeFieldName:

    @pytest.mark.parametrize("raw,expected", [
        ("Email Address", "email_address"),
        ("  Email Address ", "email_address"),
        ("--Phone #", "phone"),
        ("First__Name", "first_name"),
        ("ZIP-Code", "zip_code"),
        ("   ", ""),
        (None, ""),
    ])
    def test_normalization(self, raw, expected):
        assert normalize_field_name(raw) == expected


@pytest.mark.unit
class TestInferSchema:

    def test_one_field_per_header(self, customer_headers, customer_rows):
        schema = SchemaInferencer().infer_schema(_analyze(customer_headers, customer_rows))

        assert schema.field_names == ["email_address", "full_name", "phone_number", "age", "active_status"]
        assert schema.get_field("active_status").type == "boolean"
        assert all(not f.unique for f in schema.fields)

    def test_required_threshold(self):
        rows = [[str(i), "x" if i < 8 else ""] for i in range(10)]
        schema = SchemaInferencer().infer_schema(_analyze(["Id", "Note"], rows))

        assert schema.is_required("id")
        assert not schema.is_required("note")

    def test_exactly_ninety_percent_is_required(self):
        rows = [["x"]] * 9 + [[""]]
        schema = SchemaInferencer().infer_schema(_analyze(["Note"], rows))
        assert schema.required == ["note"]

    def test_blank_and_repeated_headers_are_skipped(self):
        schema = SchemaInferencer().infer_schema(
            _analyze(["Email", "", "email", "Name"], [["a@b.io", "x", "c@d.org", "Ann"]])
        )
        assert schema.field_names == ["email", "name"]

    def test_custom_threshold(self):
        rows = [["x"], [""]]
        schema = SchemaInferencer(required_threshold=0.5).infer_schema(_analyze(["Note"], rows))
        assert schema.required == ["note"]


@pytest.mark.unit
class TestValidateSchema:

    def test_valid_schema(self, customer_schema):
        assert validate_schema(customer_schema) == []
        assert ensure_valid(customer_schema) is customer_schema

    def test_empty_schema(self):
        assert validate_schema(Schema(fields=[])) == ["Schema must have at least one field"]

    def test_collects_every_problem(self):
        schema = Schema(fields=[
            SchemaField(name="email"),
            SchemaField(name="email"),
            SchemaField(name="age", type="integer", validation=ValidationRules(min=10, max=1)),
            SchemaField(name="code", validation=ValidationRules(min_length=5, max_length=2, pattern="(")),
            SchemaField(name=""),
        ])

        problems = validate_schema(schema)

        assert problems[0] == "Duplicate field names: email"
        assert 'Invalid type "integer" for field "age"' in problems
        assert 'Field "age": min cannot be greater than max' in problems
        assert 'Field "code": minLength cannot be greater than maxLength' in problems
        assert any(p.startswith('Field "code": invalid pattern') for p in problems)
        assert "Field #5 has no name" in problems

    @pytest.mark.parametrize("rules,problem", [
        ({"max": "120"}, "Field \"age\": max must be a number, got '120'"),
        ({"min": True}, 'Field "age": min must be a number, got True'),
        ({"min": float("nan")}, 'Field "age": min must be a number, got nan'),
        ({"minLength": "3"}, "Field \"age\": minLength must be a non-negative integer, got '3'"),
        ({"maxLength": 2.5}, 'Field "age": maxLength must be a non-negative integer, got 2.5'),
        ({"maxLength": -1}, 'Field "age": maxLength must be a non-negative integer, got -1'),
        ({"pattern": 5}, 'Field "age": pattern must be a string'),
    ])
    def test_rule_bounds_must_have_the_right_type(self, rules, problem):
        schema = Schema.from_dict({"fields": [{"name": "age", "type": "number", "validation": rules}]})
        assert validate_schema(schema) == [problem]

    def test_single_bad_bound_is_not_compared(self):
        schema = Schema.from_dict({"fields": [
            {"name": "age", "validation": {"min": 0, "max": "120", "pattern": "("}},
        ]})

        problems = validate_schema(schema)

        assert problems[0] == "Field \"age\": max must be a number, got '120'"
        assert problems[1].startswith('Field "age": invalid pattern')
        assert len(problems) == 2

    def test_ensure_valid_raises(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            ensure_valid(Schema(fields=[]))
        assert exc_info.value.problems == ["Schema must have at least one field"]


@pytest.mark.unit
class TestMergeSchemas:

    def test_user_declared_attributes_win(self):
        inferred = Schema(fields=[
            SchemaField(name="email", type="email", required=True),
            SchemaField(name="age", type="string", required=True),
        ])
        user = Schema.from_dict({"fields": [
            {"name": "age", "type": "number", "validation": {"max": 120}},
            {"name": "tier", "type": "string", "defaultValue": "free"},
        ]})

        merged = merge_schemas(inferred, user)

        assert merged.field_names == ["email", "age", "tier"]
        age = merged.get_field("age")
        assert age.type == "number"
        assert age.required is True
        assert age.validation.max == 120
        assert merged.get_field("tier").default_value == "free"

    def test_required_falls_back_to_merged_flags(self):
        inferred = Schema(fields=[SchemaField(name="email", required=True)])
        user = Schema.from_dict({"fields": [{"name": "email", "required": False}]})

        merged = merge_schemas(inferred, user)

        assert merged.required == []

    def test_user_required_list_wins(self):
        inferred = Schema(fields=[SchemaField(name="a", required=True), SchemaField(name="b")])
        user = Schema.from_dict({"fields": [{"name": "b"}], "required": ["b"]})
        assert merge_schemas(inferred, user).required == ["b"]


@pytest.mark.unit
class TestSchemaDoc:

    def test_doc_lists_fields(self, customer_schema):
        doc = generate_schema_doc(customer_schema)

        assert doc.startswith("Collection Schema:\n\n")
        assert "- email (email) *required*" in doc
        assert "- age (number) *required*\n  min: 0\n  max: 120" in doc
