"""
Safe record fixes.

DataFixer runs inside the pipeline; the operations module holds the
caller-invoked extras (duplicate removal, date normalization, defaults).
"""

from reconcile_framework.fixing.fixer import DataFixer, FixResult
from reconcile_framework.fixing.operations import (
    OperationResult,
    remove_duplicates,
    normalize_dates,
    fill_defaults,
)

__all__ = [
    'DataFixer',
    'FixResult',
    'OperationResult',
    'remove_duplicates',
    'normalize_dates',
    'fill_defaults',
]
