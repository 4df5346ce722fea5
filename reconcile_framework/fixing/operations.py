"""
Caller-invoked record operations.

None of these run as part of the default pipeline. Each returns new record
lists plus the Transformations describing what changed, leaving the inputs
untouched.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from reconcile_framework.core.constants import (
    OPERATION_REMOVE_DUPLICATE,
    OPERATION_NORMALIZE_DATE,
    OPERATION_FILL_DEFAULT,
)
from reconcile_framework.core.results import Transformation
from reconcile_framework.utils.json_utils import canonical_record_key
from reconcile_framework.utils.value_patterns import has_value, parse_date, to_iso_date

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationResult:
    records: List[Dict[str, Any]]
    row_numbers: List[int]
    transformations: List[Transformation] = field(default_factory=list)


def _rows(records: Sequence[Any], row_numbers: Optional[Sequence[int]]) -> List[int]:
    if row_numbers is None:
        return list(range(1, len(records) + 1))
    return list(row_numbers)


def remove_duplicates(
    records: Sequence[Dict[str, Any]],
    row_numbers: Optional[Sequence[int]] = None,
) -> OperationResult:
    """
    Drop records whose full serialized form was already seen.

    Unlike duplicate marking, comparison is exact: values keep their type and
    case, and only key order is ignored.
    """
    rows = _rows(records, row_numbers)
    seen = set()
    kept: List[Dict[str, Any]] = []
    kept_rows: List[int] = []
    transformations: List[Transformation] = []

    for record, row in zip(records, rows):
        key = canonical_record_key(record)
        if key in seen:
            transformations.append(Transformation(
                row=row,
                field="*",
                operation=OPERATION_REMOVE_DUPLICATE,
                original_value=copy.deepcopy(record),
                new_value=None,
            ))
            continue
        seen.add(key)
        kept.append(copy.deepcopy(record))
        kept_rows.append(row)

    logger.info(f"Removed {len(transformations)} duplicate records")
    return OperationResult(records=kept, row_numbers=kept_rows, transformations=transformations)


def normalize_dates(
    records: Sequence[Dict[str, Any]],
    date_fields: Sequence[str],
    row_numbers: Optional[Sequence[int]] = None,
) -> OperationResult:
    """Rewrite parseable values of ``date_fields`` as ISO-8601 strings."""
    rows = _rows(records, row_numbers)
    normalized: List[Dict[str, Any]] = []
    transformations: List[Transformation] = []

    for record, row in zip(records, rows):
        updated = dict(record)
        for name in date_fields:
            value = updated.get(name)
            if not has_value(value):
                continue
            parsed = parse_date(value)
            if parsed is None:
                continue
            iso = to_iso_date(parsed)
            if iso != value:
                updated[name] = iso
                transformations.append(Transformation(
                    row=row,
                    field=name,
                    operation=OPERATION_NORMALIZE_DATE,
                    original_value=value,
                    new_value=iso,
                ))
        normalized.append(updated)

    return OperationResult(records=normalized, row_numbers=rows, transformations=transformations)


def fill_defaults(
    records: Sequence[Dict[str, Any]],
    defaults: Dict[str, Any],
    row_numbers: Optional[Sequence[int]] = None,
) -> OperationResult:
    """Fill empty values from ``defaults`` (field name -> default value)."""
    rows = _rows(records, row_numbers)
    filled: List[Dict[str, Any]] = []
    transformations: List[Transformation] = []

    for record, row in zip(records, rows):
        updated = dict(record)
        for name, default in defaults.items():
            current = updated.get(name)
            if has_value(current):
                continue
            updated[name] = copy.deepcopy(default)
            transformations.append(Transformation(
                row=row,
                field=name,
                operation=OPERATION_FILL_DEFAULT,
                original_value=current,
                new_value=default,
            ))
        filled.append(updated)

    return OperationResult(records=filled, row_numbers=rows, transformations=transformations)
