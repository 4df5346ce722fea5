"""
Reconciliation Result Classes.

This module defines the dataclasses that carry findings and changes through
the pipeline and the consolidated result handed back to the caller:
- Diagnostic: A single validation finding tied to a row and field
- Transformation: An audit entry for every value the Fixer changes
- PipelineStats: Aggregate counters for one run
- PipelineResult: The sole externally visible artifact of a run

Row numbers are always 1-based and refer to the original RawTable row order.
"""

import copy
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional
from enum import Enum


class Severity(Enum):
    """
    Diagnostic severity levels.

    - ERROR: Blocks the record from being import-ready unless auto-fixed
    - WARNING: Advisory, never blocks
    """
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """
    One validation finding.

    Attributes:
        row: 1-based row number in the original table
        field: Schema field name the finding applies to
        message: Human-readable description ("Invalid email format")
        severity: ERROR or WARNING
        original_value: Value as seen by the Validator
        suggested_value: Safe replacement, or None when no safe fix exists

    Example:
        >>> Diagnostic(
        ...     row=3,
        ...     field="email",
        ...     message="Invalid email format",
        ...     severity=Severity.ERROR,
        ...     original_value=" JANE@EXAMPLE.COM ",
        ...     suggested_value="jane@example.com"
        ... )
    """
    row: int
    field: str
    message: str
    severity: Severity = Severity.ERROR
    original_value: Any = None
    suggested_value: Any = None

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    @property
    def has_suggestion(self) -> bool:
        return self.suggested_value is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "row": self.row,
            "field": self.field,
            "message": self.message,
            "severity": self.severity.value,
            "originalValue": copy.deepcopy(self.original_value),
            "suggestedValue": copy.deepcopy(self.suggested_value),
        }


@dataclass(frozen=True)
class Transformation:
    """
    Audit entry for one change made to a record.

    Attributes:
        row: 1-based row number in the original table
        field: Field that changed, or "*" for whole-record operations
        operation: Operation tag ("auto-fix", "mark-duplicate", "fix-invalid-email-format", ...)
        original_value: Value before the change
        new_value: Value after the change
    """
    row: int
    field: str
    operation: str
    original_value: Any = None
    new_value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "row": self.row,
            "field": self.field,
            "operation": self.operation,
            "originalValue": copy.deepcopy(self.original_value),
            "newValue": copy.deepcopy(self.new_value),
        }


@dataclass(frozen=True)
class PipelineStats:
    """Aggregate counters for one pipeline run."""

    total_rows: int = 0
    valid_rows: int = 0
    invalid_rows: int = 0
    fields_processed: int = 0
    transformations_applied: int = 0
    duplicates_removed: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "totalRows": self.total_rows,
            "validRows": self.valid_rows,
            "invalidRows": self.invalid_rows,
            "fieldsProcessed": self.fields_processed,
            "transformationsApplied": self.transformations_applied,
            "duplicatesRemoved": self.duplicates_removed,
        }


@dataclass(frozen=True)
class PipelineResult:
    """
    Consolidated result of one reconciliation run.

    Produced once per run and never mutated afterwards. ``to_dict()`` renders
    the canonical output shape consumed by UIs and import calls; the remaining
    attributes are kept for auditing.

    Attributes:
        mapping: Source header -> schema field name
        cleaned_data: One record per row that was not structurally rejected
        errors: Unresolved diagnostics only
        warnings: Validator warnings
        stats: Aggregate counters
        suggestions: Analyzer recommendations, mapping suggestions and
            Validator warnings, in that order
        row_numbers: Original 1-based row number of each cleaned record
        transformations: Every change the Fixer (and optional dedupe) made
        confidence: Source header -> mapping confidence
        schema: Schema the records were validated against
    """
    mapping: Dict[str, str]
    cleaned_data: List[Dict[str, Any]]
    errors: List[Diagnostic]
    warnings: List[str]
    stats: PipelineStats
    suggestions: List[str]
    row_numbers: List[int] = field(default_factory=list)
    transformations: List[Transformation] = field(default_factory=list)
    confidence: Dict[str, float] = field(default_factory=dict)
    schema: Optional[Any] = None

    @property
    def has_errors(self) -> bool:
        return any(d.is_error for d in self.errors)

    def import_ready(self) -> List[Dict[str, Any]]:
        """
        Records without residual error-severity diagnostics.

        This is the usual accept/reject decision a caller makes before
        handing data to a sink.
        """
        blocked = {d.row for d in self.errors if d.is_error}
        return [
            copy.deepcopy(record)
            for record, row in zip(self.cleaned_data, self.row_numbers)
            if row not in blocked
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mapping": dict(self.mapping),
            "cleanedData": copy.deepcopy(self.cleaned_data),
            "errors": [d.to_dict() for d in self.errors],
            "warnings": list(self.warnings),
            "stats": self.stats.to_dict(),
            "suggestions": list(self.suggestions),
        }

    def to_json(self, **kwargs) -> str:
        """Serialize the canonical shape to JSON with stable key order."""
        from reconcile_framework.utils.json_utils import safe_json_dumps
        return safe_json_dumps(self.to_dict(), **kwargs)
