"""
Record Validator - checks every record against the resolved schema.

Schema-present mode runs, per record:
    1. Required check for every name in ``schema.required``
    2. Type check for every field that has a value
    3. Rule checks: min/max, minLength/maxLength, pattern
    4. Unique fields must not be empty

Schema-absent mode only looks at fields whose NAME suggests an email or a
URL, and warns about implausibly long values.

Diagnostics are collected, never raised. Row numbers on diagnostics are the
original 1-based row numbers handed in by the caller.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from reconcile_framework.core.constants import MAX_REASONABLE_STRING_LENGTH
from reconcile_framework.core.results import Diagnostic, Severity
from reconcile_framework.core.schema import Schema, SchemaField, ValidationRules
from reconcile_framework.utils.value_patterns import (
    format_number,
    has_value,
    is_number,
    parse_number,
)
from reconcile_framework.validations.type_checks import check_type, check_email, check_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationOutcome:
    """
    Result of validating a batch of records.

    Attributes:
        is_valid: True when no error-severity diagnostic was produced
        errors: Every diagnostic, both severities, in row order
        warnings: Batch-level advisory messages
        valid_row_count: Records without error-severity diagnostics
        invalid_row_count: Records with at least one error
    """
    is_valid: bool
    errors: List[Diagnostic] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    valid_row_count: int = 0
    invalid_row_count: int = 0

    def errors_for_row(self, row: int) -> List[Diagnostic]:
        return [d for d in self.errors if d.row == row]


class RecordValidator:
    """
    Validate records with or without a schema.

    Example:
        >>> validator = RecordValidator()
        >>> outcome = validator.validate([{"email": "nope"}], schema)
        >>> outcome.errors[0].message
        'Invalid email format'
    """

    def __init__(self):
        self._pattern_cache: Dict[str, "re.Pattern"] = {}

    def validate(
        self,
        records: Sequence[Dict[str, Any]],
        schema: Optional[Schema] = None,
        row_numbers: Optional[Sequence[int]] = None,
    ) -> ValidationOutcome:
        """
        Validate every record.

        Args:
            records: Field -> value records
            schema: Target schema, or None for heuristic validation
            row_numbers: Original row number of each record; defaults to
                1..len(records)

        Returns:
            ValidationOutcome
        """
        if row_numbers is None:
            row_numbers = range(1, len(records) + 1)
        logger.debug(f"Validating {len(records)} records (schema={'yes' if schema else 'no'})")

        diagnostics: List[Diagnostic] = []
        valid_rows = 0
        invalid_rows = 0

        for record, row in zip(records, row_numbers):
            if schema is None:
                row_diagnostics = self._validate_basic(record, row)
            else:
                row_diagnostics = self._validate_row(record, schema, row)
            diagnostics.extend(row_diagnostics)

            if any(d.is_error for d in row_diagnostics):
                invalid_rows += 1
            else:
                valid_rows += 1

        warnings: List[str] = []
        if invalid_rows > 0:
            warnings.append(
                f"{invalid_rows} rows have validation errors that must be fixed before import"
            )
        if schema is None:
            warnings.append("No schema provided - only basic validation performed")

        logger.info(
            f"Validation complete: {valid_rows} valid, {invalid_rows} invalid, "
            f"{len(diagnostics)} diagnostics"
        )
        return ValidationOutcome(
            is_valid=invalid_rows == 0,
            errors=diagnostics,
            warnings=warnings,
            valid_row_count=valid_rows,
            invalid_row_count=invalid_rows,
        )

    # ------------------------------------------------------------------
    # Schema-present mode
    # ------------------------------------------------------------------

    def _validate_row(self, record: Dict[str, Any], schema: Schema, row: int) -> List[Diagnostic]:
        diagnostics: List[Diagnostic] = []

        for name in schema.required:
            value = record.get(name)
            if not has_value(value):
                diagnostics.append(Diagnostic(
                    row=row,
                    field=name,
                    message="Required field is missing or empty",
                    original_value=value,
                ))

        for schema_field in schema.fields:
            value = record.get(schema_field.name)
            present = has_value(value)

            if present:
                diagnostics.extend(self._check_field(schema_field, value, row))

            if schema_field.unique and not present:
                diagnostics.append(Diagnostic(
                    row=row,
                    field=schema_field.name,
                    message="Unique field cannot be empty",
                    original_value=value,
                ))

        return diagnostics

    def _check_field(self, schema_field: SchemaField, value: Any, row: int) -> List[Diagnostic]:
        diagnostics: List[Diagnostic] = []

        outcome = check_type(value, schema_field.type)
        if not outcome.valid:
            diagnostics.append(Diagnostic(
                row=row,
                field=schema_field.name,
                message=f"Invalid {schema_field.type} format",
                original_value=value,
                suggested_value=outcome.suggestion,
            ))

        if schema_field.validation is not None:
            diagnostics.extend(self._check_rules(schema_field.name, value, schema_field.validation, row))

        return diagnostics

    def _check_rules(self, name: str, value: Any, rules: ValidationRules, row: int) -> List[Diagnostic]:
        """Range, length and pattern rules. None of these carry a suggestion."""
        messages: List[str] = []

        number = value if is_number(value) else (parse_number(value) if isinstance(value, str) else None)
        if number is not None:
            if rules.min is not None and number < rules.min:
                messages.append(f"Value {format_number(number)} is below minimum {format_number(rules.min)}")
            if rules.max is not None and number > rules.max:
                messages.append(f"Value {format_number(number)} exceeds maximum {format_number(rules.max)}")

        text = str(value)
        if rules.min_length is not None and len(text) < rules.min_length:
            messages.append(f"String length {len(text)} is below minimum {rules.min_length}")
        if rules.max_length is not None and len(text) > rules.max_length:
            messages.append(f"String length {len(text)} exceeds maximum {rules.max_length}")

        if rules.pattern:
            if not self._compiled(rules.pattern).search(text):
                messages.append(f"Value does not match required pattern: {rules.pattern}")

        return [
            Diagnostic(row=row, field=name, message=message, original_value=value)
            for message in messages
        ]

    def _compiled(self, pattern: str) -> "re.Pattern":
        compiled = self._pattern_cache.get(pattern)
        if compiled is None:
            compiled = re.compile(pattern)
            self._pattern_cache[pattern] = compiled
        return compiled

    # ------------------------------------------------------------------
    # Schema-absent mode
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_basic(record: Dict[str, Any], row: int) -> List[Diagnostic]:
        diagnostics: List[Diagnostic] = []

        for name, value in record.items():
            if not has_value(value):
                continue

            text = str(value)
            lowered_name = name.lower()

            if "email" in lowered_name or "mail" in lowered_name:
                outcome = check_email(value)
                if not outcome.valid:
                    diagnostics.append(Diagnostic(
                        row=row,
                        field=name,
                        message="Invalid email format",
                        original_value=value,
                        suggested_value=outcome.suggestion,
                    ))

            if "url" in lowered_name or "website" in lowered_name:
                if not check_url(value).valid:
                    diagnostics.append(Diagnostic(
                        row=row,
                        field=name,
                        message="Invalid URL format",
                        original_value=value,
                    ))

            if len(text) > MAX_REASONABLE_STRING_LENGTH:
                diagnostics.append(Diagnostic(
                    row=row,
                    field=name,
                    message="Field value exceeds reasonable length (10,000 characters)",
                    severity=Severity.WARNING,
                    original_value=value,
                ))

        return diagnostics
