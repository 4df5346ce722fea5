"""
Target Schema Model.

A schema is an ordered collection of SchemaField definitions plus the derived
list of required field names and an optional list of unique fields. Schemas
are either supplied whole by the caller (usually from YAML) or synthesized by
the SchemaInferencer.

Both camelCase keys (``minLength``, ``uniqueFields``, ``defaultValue``) and
snake_case keys are accepted when loading from dictionaries.
"""

import copy
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, FrozenSet

from reconcile_framework.core.exceptions import SchemaValidationError


# Dictionary keys accepted for each SchemaField attribute
_FIELD_KEYS = {
    "name": ("name",),
    "type": ("type",),
    "required": ("required",),
    "unique": ("unique",),
    "default_value": ("defaultValue", "default_value", "default"),
    "validation": ("validation",),
}


def _pick(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first key present in data."""
    for key in keys:
        if key in data:
            return data[key]
    return default


@dataclass(frozen=True)
class ValidationRules:
    """
    Optional per-field value rules.

    Attributes:
        min: Minimum numeric value (inclusive)
        max: Maximum numeric value (inclusive)
        pattern: Regular expression the string form must match
        min_length: Minimum string length
        max_length: Maximum string length
    """
    min: Optional[float] = None
    max: Optional[float] = None
    pattern: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["ValidationRules"]:
        if not data:
            return None
        return cls(
            min=data.get("min"),
            max=data.get("max"),
            pattern=data.get("pattern"),
            min_length=_pick(data, "minLength", "min_length"),
            max_length=_pick(data, "maxLength", "max_length"),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "min": self.min,
            "max": self.max,
            "pattern": self.pattern,
            "minLength": self.min_length,
            "maxLength": self.max_length,
        }
        return {key: value for key, value in result.items() if value is not None}


@dataclass(frozen=True)
class SchemaField:
    """
    Definition of one target field.

    Attributes:
        name: Field name as it appears in output records
        type: One of string, number, boolean, date, email, url, array, object
        required: Value must be present and non-blank
        unique: Value must be non-blank (cross-row uniqueness is not checked)
        default_value: Value used by fill_defaults for empty cells
        validation: Optional value rules
        declared: Attribute names the author actually set. None means every
            attribute counts as declared (fields built in code).
    """
    name: str
    type: str = "string"
    required: bool = False
    unique: bool = False
    default_value: Any = None
    validation: Optional[ValidationRules] = None
    declared: Optional[FrozenSet[str]] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SchemaField":
        declared = set()
        for attribute, keys in _FIELD_KEYS.items():
            if any(key in data for key in keys):
                declared.add(attribute)
        return cls(
            name=data.get("name"),
            type=data.get("type", "string"),
            required=bool(data.get("required", False)),
            unique=bool(data.get("unique", False)),
            default_value=_pick(data, *_FIELD_KEYS["default_value"]),
            validation=ValidationRules.from_dict(data.get("validation")),
            declared=frozenset(declared),
        )

    def declared_attributes(self) -> FrozenSet[str]:
        if self.declared is None:
            return frozenset(_FIELD_KEYS)
        return self.declared

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "name": self.name,
            "type": self.type,
            "required": self.required,
            "unique": self.unique,
        }
        if self.default_value is not None:
            result["defaultValue"] = copy.deepcopy(self.default_value)
        if self.validation is not None:
            result["validation"] = self.validation.to_dict()
        return result


@dataclass(frozen=True)
class Schema:
    """
    Ordered set of fields plus derived required/unique name lists.

    When ``required`` is not given explicitly it is derived from the fields'
    required flags.
    """
    fields: List[SchemaField] = field(default_factory=list)
    required: Optional[List[str]] = None
    unique_fields: Optional[List[str]] = None

    def __post_init__(self):
        if self.required is None:
            object.__setattr__(self, "required", [f.name for f in self.fields if f.required])

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Schema":
        raw_fields = data.get("fields") or []
        if not isinstance(raw_fields, list) or not all(isinstance(f, dict) for f in raw_fields):
            raise SchemaValidationError(["Schema fields must be a list of mappings"])
        fields = [SchemaField.from_dict(f) for f in raw_fields]
        required = data.get("required")
        unique_fields = _pick(data, "uniqueFields", "unique_fields")
        return cls(
            fields=fields,
            required=list(required) if required is not None else None,
            unique_fields=list(unique_fields) if unique_fields is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "fields": [f.to_dict() for f in self.fields],
            "required": list(self.required),
        }
        if self.unique_fields is not None:
            result["uniqueFields"] = list(self.unique_fields)
        return result

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> Optional[SchemaField]:
        for schema_field in self.fields:
            if schema_field.name == name:
                return schema_field
        return None

    def is_required(self, name: str) -> bool:
        schema_field = self.get_field(name)
        return name in self.required or bool(schema_field and schema_field.required)

    def defaults(self) -> Dict[str, Any]:
        """Field name to default value for every field that declares one."""
        return {f.name: f.default_value for f in self.fields if f.default_value is not None}
