"""
Unit tests for the schema model.
"""

import pytest

from reconcile_framework.core.exceptions import SchemaValidationError
from reconcile_framework.core.schema import Schema, SchemaField, ValidationRules


@pytest.mark.unit
class TestValidationRules:

    def test_camel_and_snake_keys(self):
        camel = ValidationRules.from_dict({"minLength": 2, "maxLength": 5})
        snake = ValidationRules.from_dict({"min_length": 2, "max_length": 5})

        assert camel == snake
        assert camel.min_length == 2
        assert camel.max_length == 5

    def test_empty_rules_are_none(self):
        assert ValidationRules.from_dict(None) is None
        assert ValidationRules.from_dict({}) is None

    def test_to_dict_omits_unset(self):
        rules = ValidationRules(max=120)
        assert rules.to_dict() == {"max": 120}


@pytest.mark.unit
class TestSchemaField:

    def test_from_dict_records_declared_attributes(self):
        schema_field = SchemaField.from_dict({"name": "age", "type": "number"})

        assert schema_field.required is False
        assert schema_field.declared_attributes() == frozenset({"name", "type"})

    def test_constructed_field_declares_everything(self):
        schema_field = SchemaField(name="age")
        assert "required" in schema_field.declared_attributes()
        assert "validation" in schema_field.declared_attributes()

    def test_default_value_aliases(self):
        assert SchemaField.from_dict({"name": "s", "defaultValue": "x"}).default_value == "x"
        assert SchemaField.from_dict({"name": "s", "default": "y"}).default_value == "y"

    def test_to_dict(self):
        schema_field = SchemaField.from_dict({
            "name": "age",
            "type": "number",
            "required": True,
            "validation": {"max": 120},
        })
        assert schema_field.to_dict() == {
            "name": "age",
            "type": "number",
            "required": True,
            "unique": False,
            "validation": {"max": 120},
        }


@pytest.mark.unit
class TestSchema:

    def test_required_derived_from_fields(self, customer_schema):
        assert customer_schema.required == ["email", "age"]

    def test_explicit_required_list(self):
        schema = Schema.from_dict({
            "fields": [{"name": "a"}, {"name": "b"}],
            "required": ["b"],
        })
        assert schema.required == ["b"]
        assert schema.is_required("b")
        assert not schema.is_required("a")

    def test_unique_fields_alias(self):
        schema = Schema.from_dict({"fields": [{"name": "id"}], "uniqueFields": ["id"]})
        assert schema.unique_fields == ["id"]
        assert schema.to_dict()["uniqueFields"] == ["id"]

    def test_field_lookup(self, customer_schema):
        assert customer_schema.field_names == ["email", "name", "phone", "age", "active"]
        assert customer_schema.get_field("age").type == "number"
        assert customer_schema.get_field("missing") is None

    def test_defaults(self):
        schema = Schema.from_dict({"fields": [
            {"name": "status", "defaultValue": "active"},
            {"name": "name"},
        ]})
        assert schema.defaults() == {"status": "active"}

    def test_fields_must_be_mappings(self):
        with pytest.raises(SchemaValidationError):
            Schema.from_dict({"fields": ["email", "name"]})
