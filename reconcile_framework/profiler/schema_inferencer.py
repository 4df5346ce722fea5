"""
Schema Inferencer - builds, checks and merges target schemas.

When the caller supplies no schema, one SchemaField is synthesized per header
from the Analyzer's detected type. A caller-supplied schema is checked
structurally before anything else runs; problems there are fatal.
"""

import logging
import re
from dataclasses import replace
from typing import List, Dict, Any

from reconcile_framework.core.constants import (
    REQUIRED_FIELD_THRESHOLD,
    SCHEMA_FIELD_TYPES,
    DETECTABLE_TYPES,
)
from reconcile_framework.core.exceptions import SchemaValidationError
from reconcile_framework.core.schema import Schema, SchemaField, ValidationRules
from reconcile_framework.profiler.analyzer import AnalysisResult
from reconcile_framework.utils.value_patterns import is_number, parse_number

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r'[^a-z0-9]')
_REPEATED_UNDERSCORES = re.compile(r'_{2,}')


def normalize_field_name(name: Any) -> str:
    """
    Normalize a header or field name for storage and comparison.

    Lower-cases, replaces every non-alphanumeric character with '_',
    collapses runs of '_' and trims leading/trailing '_'.

    Example:
        >>> normalize_field_name("  Email Address ")
        'email_address'
        >>> normalize_field_name("--Phone #")
        'phone'
    """
    if name is None:
        return ''
    text = _NON_ALNUM.sub('_', str(name).lower().strip())
    text = _REPEATED_UNDERSCORES.sub('_', text)
    return text.strip('_')


class SchemaInferencer:
    """
    Synthesize a schema from column profiles and reconcile it with user input.

    Example:
        >>> analysis = ColumnAnalyzer().analyze(headers, rows)
        >>> schema = SchemaInferencer().infer_schema(analysis)
        >>> schema.field_names
        ['email', 'full_name', 'age']
    """

    def __init__(self, required_threshold: float = REQUIRED_FIELD_THRESHOLD):
        self.required_threshold = required_threshold

    def infer_schema(self, analysis: AnalysisResult) -> Schema:
        """
        Build one field per analyzed column.

        A field is required when at least ``required_threshold`` of the
        sampled values for its column are non-empty. Uniqueness cannot be
        decided from a sample so every inferred field is non-unique.
        """
        logger.debug(f"Inferring schema for {len(analysis.profiles)} columns")

        fields: List[SchemaField] = []
        seen = set()
        for profile in analysis.profiles:
            name = normalize_field_name(profile.header)
            # Blank headers get no field; repeated names keep the first column
            if not name or name in seen:
                continue
            seen.add(name)

            field_type = profile.detected_type if profile.detected_type in DETECTABLE_TYPES else "string"
            if analysis.row_count:
                filled_ratio = profile.non_empty_count(analysis.row_count) / analysis.row_count
            else:
                filled_ratio = 0.0
            fields.append(SchemaField(
                name=name,
                type=field_type,
                required=filled_ratio >= self.required_threshold,
                unique=False,
            ))

        schema = Schema(fields=fields)
        logger.info(
            f"Inferred schema with {len(fields)} fields ({len(schema.required)} required)"
        )
        return schema


def _rule_bound_problems(name: str, rules: ValidationRules) -> List[str]:
    """
    Type problems of individual rule bounds.

    min/max must be finite numbers; minLength/maxLength must be non-negative
    integers. Booleans are rejected for both even though they are ints.
    """
    problems: List[str] = []
    for label, value in (("min", rules.min), ("max", rules.max)):
        if value is None:
            continue
        if not is_number(value) or parse_number(value) is None:
            problems.append(f'Field "{name}": {label} must be a number, got {value!r}')

    for label, value in (("minLength", rules.min_length), ("maxLength", rules.max_length)):
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            problems.append(f'Field "{name}": {label} must be a non-negative integer, got {value!r}')
    return problems


def validate_schema(schema: Schema) -> List[str]:
    """
    Check a schema's structure.

    Returns:
        Every problem found, in field order. An empty list means the schema
        is valid.
    """
    problems: List[str] = []

    if not schema.fields:
        problems.append("Schema must have at least one field")
        return problems

    names = [f.name for f in schema.fields]
    seen = set()
    duplicates: List[str] = []
    for name in names:
        if name in seen and name not in duplicates:
            duplicates.append(name)
        seen.add(name)
    if duplicates:
        problems.append(f"Duplicate field names: {', '.join(str(d) for d in duplicates)}")

    for position, schema_field in enumerate(schema.fields, start=1):
        if not isinstance(schema_field.name, str) or not schema_field.name.strip():
            problems.append(f"Field #{position} has no name")
            continue

        if schema_field.type not in SCHEMA_FIELD_TYPES:
            problems.append(f'Invalid type "{schema_field.type}" for field "{schema_field.name}"')

        rules = schema_field.validation
        if rules is None:
            continue

        bound_problems = _rule_bound_problems(schema_field.name, rules)
        problems.extend(bound_problems)

        if (not bound_problems and rules.min is not None and rules.max is not None
                and rules.min > rules.max):
            problems.append(f'Field "{schema_field.name}": min cannot be greater than max')

        if (not bound_problems and rules.min_length is not None and rules.max_length is not None
                and rules.min_length > rules.max_length):
            problems.append(
                f'Field "{schema_field.name}": minLength cannot be greater than maxLength'
            )

        if rules.pattern is not None:
            if not isinstance(rules.pattern, str):
                problems.append(f'Field "{schema_field.name}": pattern must be a string')
                continue
            try:
                re.compile(rules.pattern)
            except re.error as e:
                problems.append(f'Field "{schema_field.name}": invalid pattern ({e})')

    return problems


def ensure_valid(schema: Schema) -> Schema:
    """Return the schema unchanged, or raise SchemaValidationError."""
    problems = validate_schema(schema)
    if problems:
        logger.error(f"Schema validation failed: {problems}")
        raise SchemaValidationError(problems)
    return schema


def merge_schemas(inferred: Schema, user: Schema) -> Schema:
    """
    Union of two schemas where user-declared attributes win field by field.

    Field order follows the inferred schema; user-only fields are appended in
    their own order. ``required`` and ``unique_fields`` come from the user
    schema when it declares them.
    """
    user_fields: Dict[str, SchemaField] = {f.name: f for f in user.fields}
    merged: List[SchemaField] = []
    merged_names = set()

    for inferred_field in inferred.fields:
        user_field = user_fields.get(inferred_field.name)
        if user_field is None:
            merged.append(inferred_field)
        else:
            overrides = {
                attribute: getattr(user_field, attribute)
                for attribute in user_field.declared_attributes()
            }
            merged.append(replace(inferred_field, declared=None, **overrides))
        merged_names.add(inferred_field.name)

    for user_field in user.fields:
        if user_field.name not in merged_names:
            merged.append(user_field)
            merged_names.add(user_field.name)

    if user.required:
        required = list(user.required)
    else:
        required = [f.name for f in merged if f.required]

    unique_fields = user.unique_fields if user.unique_fields is not None else inferred.unique_fields

    return Schema(fields=merged, required=required, unique_fields=unique_fields)


def generate_schema_doc(schema: Schema) -> str:
    """Plain-text description of a schema, one field per line."""
    lines = ["Collection Schema:", ""]
    for schema_field in schema.fields:
        line = f"- {schema_field.name} ({schema_field.type})"
        if schema_field.required:
            line += " *required*"
        if schema_field.unique:
            line += " *unique*"
        lines.append(line)

        rules = schema_field.validation
        if rules is not None:
            if rules.min is not None:
                lines.append(f"  min: {rules.min}")
            if rules.max is not None:
                lines.append(f"  max: {rules.max}")
            if rules.min_length is not None:
                lines.append(f"  minLength: {rules.min_length}")
            if rules.max_length is not None:
                lines.append(f"  maxLength: {rules.max_length}")
            if rules.pattern:
                lines.append(f"  pattern: {rules.pattern}")
        if schema_field.default_value is not None:
            lines.append(f"  default: {schema_field.default_value}")

    return "\n".join(lines) + "\n"

