"""
Transformer - projects raw rows into field -> value records.

For each row, every header with a resolved mapping copies its raw cell under
the mapped field name. Unmapped headers are dropped. When several columns map
to the same field the leftmost one wins.

Structural rejection happens here and nowhere else: rows in which every cell
is blank produce no record. Short rows are padded with None and long rows are
truncated to the header count. Each record keeps its original 1-based row
number.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from reconcile_framework.utils.value_patterns import is_blank

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransformResult:
    """
    Projected records with their provenance.

    Attributes:
        records: One dict per accepted row
        row_numbers: Original 1-based row number of each record
        rejected_rows: 1-based numbers of structurally rejected rows
    """
    records: List[Dict[str, Any]]
    row_numbers: List[int]
    rejected_rows: List[int] = field(default_factory=list)


def resolve_columns(headers: Sequence[str], mapping: Dict[str, str]) -> List[Tuple[str, int]]:
    """(field name, column index) pairs in column order, first column per field."""
    columns: List[Tuple[str, int]] = []
    claimed = set()
    for position, header in enumerate(headers):
        target: Optional[str] = mapping.get(header)
        if target is None or target in claimed:
            continue
        claimed.add(target)
        columns.append((target, position))
    return columns


class Transformer:
    """
    Apply a header mapping to raw rows.

    Example:
        >>> result = Transformer().transform(
        ...     ["Email", "Notes"], [["a@b.io", "x"]], {"Email": "email"}
        ... )
        >>> result.records
        [{'email': 'a@b.io'}]
    """

    def transform(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[Any]],
        mapping: Dict[str, str],
    ) -> TransformResult:
        columns = resolve_columns(headers, mapping)
        width = len(headers)
        logger.debug(f"Transforming {len(rows)} rows into {len(columns)} fields")

        records: List[Dict[str, Any]] = []
        row_numbers: List[int] = []
        rejected: List[int] = []

        for row_number, row in enumerate(rows, start=1):
            cells = list(row[:width])
            if all(is_blank(cell) for cell in cells):
                rejected.append(row_number)
                continue

            record = {
                target: cells[position] if position < len(cells) else None
                for target, position in columns
            }
            records.append(record)
            row_numbers.append(row_number)

        if rejected:
            logger.info(f"Skipped {len(rejected)} blank rows")
        logger.info(f"Transformed {len(records)} of {len(rows)} rows")

        return TransformResult(records=records, row_numbers=row_numbers, rejected_rows=rejected)
