"""
Data Fixer - safe, deterministic corrections with a full audit trail.

Per record the Fixer applies, in order:

    1. Universal fixes to every value: trim strings, lower-case fields whose
       name contains "email", coerce formatted numbers ("$1,200" -> 1200),
       coerce the boolean vocabulary ("yes" -> True)
    2. Validator suggestions: any diagnostic with a suggested value overwrites
       the field; diagnostics without one are passed through as unfixable
    3. Duplicate marking across all records (rows are never removed here)

Every change appends a Transformation. Running the Fixer on its own output
with the same diagnostics produces no further transformations.

When a schema is supplied, number coercion only touches fields typed
``number`` and boolean coercion only fields typed ``boolean``; fields the
schema does not know are coerced as if no schema were given. Fields typed
``number`` accept every form the Validator accepts ("+5", ".5", "1e3"), so
a value that passes the number check always leaves the Fixer as a number.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from reconcile_framework.core.constants import (
    OPERATION_AUTO_FIX,
    OPERATION_MARK_DUPLICATE,
)
from reconcile_framework.core.results import Diagnostic, Transformation
from reconcile_framework.core.schema import Schema
from reconcile_framework.utils.value_patterns import coerce_formatted_number, parse_boolean, parse_number

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FixResult:
    """
    Output of one Fixer pass.

    Attributes:
        fixed_data: Corrected copies of the input records, same order
        row_numbers: Original 1-based row number of each record
        transformations: Every change made, in row order
        unfixable_errors: Diagnostics without a safe suggestion
    """
    fixed_data: List[Dict[str, Any]]
    row_numbers: List[int]
    transformations: List[Transformation] = field(default_factory=list)
    unfixable_errors: List[Diagnostic] = field(default_factory=list)

    @property
    def duplicate_rows(self) -> List[int]:
        return [t.row for t in self.transformations if t.operation == OPERATION_MARK_DUPLICATE]


def fix_operation_tag(message: str) -> str:
    """Transformation tag for an applied suggestion: "fix-invalid-email-format"."""
    return "fix-" + "-".join(message.lower().split())


def same_value(left: Any, right: Any) -> bool:
    """Strict equality: True and 1 are different values here."""
    return type(left) is type(right) and left == right


def row_hash(record: Dict[str, Any]) -> str:
    """
    Canonical duplicate-detection key.

    Values are taken in sorted key order, lower-cased and trimmed, with None
    rendered as an empty string.
    """
    values = []
    for key in sorted(record):
        value = record[key]
        values.append('' if value is None else str(value).lower().strip())
    return '||'.join(values)


class DataFixer:
    """
    Apply safe fixes and Validator suggestions to records.

    Example:
        >>> fixer = DataFixer()
        >>> result = fixer.fix([{"email": "  A@B.IO "}], [], row_numbers=[1])
        >>> result.fixed_data
        [{'email': 'a@b.io'}]
        >>> result.transformations[0].operation
        'auto-fix'
    """

    def __init__(self, schema: Optional[Schema] = None):
        self.schema = schema

    def fix(
        self,
        records: Sequence[Dict[str, Any]],
        diagnostics: Sequence[Diagnostic],
        row_numbers: Optional[Sequence[int]] = None,
    ) -> FixResult:
        """
        Fix every record.

        Args:
            records: Records as produced by the Transformer (never mutated)
            diagnostics: Validator diagnostics for these records
            row_numbers: Original row number of each record; defaults to
                1..len(records)

        Returns:
            FixResult with corrected copies, transformations and the
            diagnostics that could not be fixed
        """
        row_numbers = list(row_numbers) if row_numbers is not None else list(range(1, len(records) + 1))
        logger.debug(f"Fixing {len(records)} records with {len(diagnostics)} diagnostics")

        by_row: Dict[int, List[Diagnostic]] = {}
        for diagnostic in diagnostics:
            by_row.setdefault(diagnostic.row, []).append(diagnostic)

        fixed_data: List[Dict[str, Any]] = []
        transformations: List[Transformation] = []
        unfixable: List[Diagnostic] = []

        for record, row in zip(records, row_numbers):
            fixed, row_transformations, row_unfixable = self._fix_row(record, by_row.get(row, []), row)
            fixed_data.append(fixed)
            transformations.extend(row_transformations)
            unfixable.extend(row_unfixable)

        # Diagnostics for rows that produced no record stay unresolved
        known_rows = set(row_numbers)
        for row, row_diagnostics in by_row.items():
            if row not in known_rows:
                unfixable.extend(row_diagnostics)

        transformations.extend(mark_duplicates(fixed_data, row_numbers))

        logger.info(
            f"Applied {len(transformations)} transformations, "
            f"{len(unfixable)} diagnostics left unresolved"
        )
        return FixResult(
            fixed_data=fixed_data,
            row_numbers=row_numbers,
            transformations=transformations,
            unfixable_errors=unfixable,
        )

    def _fix_row(
        self,
        record: Dict[str, Any],
        diagnostics: List[Diagnostic],
        row: int,
    ) -> Tuple[Dict[str, Any], List[Transformation], List[Diagnostic]]:
        fixed = dict(record)
        transformations: List[Transformation] = []
        unfixable: List[Diagnostic] = []

        for name in list(fixed):
            original = fixed[name]
            if original is None:
                continue
            new_value = self._universal_fix(name, original)
            if not same_value(new_value, original):
                fixed[name] = new_value
                transformations.append(Transformation(
                    row=row,
                    field=name,
                    operation=OPERATION_AUTO_FIX,
                    original_value=original,
                    new_value=new_value,
                ))

        for diagnostic in diagnostics:
            if not diagnostic.has_suggestion:
                unfixable.append(diagnostic)
                continue

            current = fixed.get(diagnostic.field)
            if same_value(current, diagnostic.suggested_value):
                continue
            fixed[diagnostic.field] = copy.deepcopy(diagnostic.suggested_value)
            transformations.append(Transformation(
                row=row,
                field=diagnostic.field,
                operation=fix_operation_tag(diagnostic.message),
                original_value=current,
                new_value=diagnostic.suggested_value,
            ))

        return fixed, transformations, unfixable

    def _universal_fix(self, name: str, value: Any) -> Any:
        if not isinstance(value, str):
            return value

        new_value: Any = value.strip()

        if "email" in name.lower():
            new_value = new_value.lower()

        if self._coerces(name, "number"):
            number = self._coerce_number(name, new_value)
            if number is not None:
                return number

        if self._coerces(name, "boolean"):
            flag = parse_boolean(new_value)
            if flag is not None:
                return flag

        return new_value

    def _coerce_number(self, name: str, value: str) -> Optional[Any]:
        schema_field = self.schema.get_field(name) if self.schema is not None else None
        if schema_field is not None and schema_field.type == "number":
            return parse_number(value)
        return coerce_formatted_number(value)

    def _coerces(self, name: str, type_name: str) -> bool:
        if self.schema is None:
            return True
        schema_field = self.schema.get_field(name)
        return schema_field is None or schema_field.type == type_name


def mark_duplicates(records: Sequence[Dict[str, Any]], row_numbers: Sequence[int]) -> List[Transformation]:
    """
    One ``mark-duplicate`` Transformation per record whose canonical hash was
    already seen. Records are left in place.
    """
    seen = set()
    transformations: List[Transformation] = []
    for record, row in zip(records, row_numbers):
        key = row_hash(record)
        if key in seen:
            transformations.append(Transformation(
                row=row,
                field="*",
                operation=OPERATION_MARK_DUPLICATE,
                original_value=copy.deepcopy(record),
                new_value=copy.deepcopy(record),
            ))
        else:
            seen.add(key)
    if transformations:
        logger.info(f"Marked {len(transformations)} duplicate rows")
    return transformations
