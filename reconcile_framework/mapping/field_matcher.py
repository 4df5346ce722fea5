"""
Field Matcher - maps source headers onto schema field names.

Each header is resolved through four fixed tiers and the first tier that
yields a match wins:

    1. Exact match after normalization          confidence 1.0
    2. Generated variations (user_<h>, ...)      confidence 0.9
    3. Synonym table lookup                      confidence 0.85
    4. Substring containment, either direction   confidence 0.6

Within a tier the first schema field in schema order wins, so results are
deterministic. Matching is purely rule-based.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Sequence

from reconcile_framework.core.constants import (
    EXACT_MATCH_CONFIDENCE,
    VARIANT_MATCH_CONFIDENCE,
    SYNONYM_MATCH_CONFIDENCE,
    PARTIAL_MATCH_CONFIDENCE,
    REVIEW_CONFIDENCE_THRESHOLD,
)
from reconcile_framework.core.schema import Schema
from reconcile_framework.mapping.synonyms import (
    SYNONYM_TABLE,
    SYNONYM_TABLE_VERSION,
    VARIATION_PATTERNS,
)
from reconcile_framework.profiler.schema_inferencer import normalize_field_name

logger = logging.getLogger(__name__)

# Sentinel for "no override given" (None means "unmap this header")
_NO_OVERRIDE = object()


@dataclass(frozen=True)
class MappingResult:
    """
    Outcome of matching headers against a schema.

    Attributes:
        mapping: Header text -> schema field name (mapped headers only)
        confidence: Header text -> confidence of the chosen field
        unmapped_headers: Headers with no match, in header order
        unmapped_fields: Schema fields no header claimed, in schema order
        suggestions: Reviewer-facing notes, in the order they were raised
        table_version: Version of the synonym table used
    """
    mapping: Dict[str, str]
    confidence: Dict[str, float]
    unmapped_headers: List[str] = field(default_factory=list)
    unmapped_fields: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    table_version: str = SYNONYM_TABLE_VERSION


class FieldMatcher:
    """
    Rule-based header to field resolution.

    Example:
        >>> matcher = FieldMatcher()
        >>> matcher.find_best_match("Email Address", ["email", "name"])
        ('email', 0.85)
        >>> matcher.find_best_match("Age", ["email", "age"])
        ('age', 1.0)
    """

    def __init__(self, synonym_table: Optional[Dict[str, Tuple[str, ...]]] = None):
        self.synonym_table = synonym_table if synonym_table is not None else SYNONYM_TABLE

    def create_mapping(
        self,
        headers: Sequence[str],
        schema: Optional[Schema] = None,
        overrides: Optional[Dict[str, Optional[str]]] = None,
    ) -> MappingResult:
        """
        Resolve every header.

        Args:
            headers: Source headers in column order
            schema: Target schema; None (or a schema without fields) maps each
                header to its own normalized form
            overrides: Manual header -> field choices applied at confidence
                1.0; a None value leaves the header unmapped

        Returns:
            MappingResult keyed on header text. Duplicate headers share the
            entry of their first occurrence.
        """
        overrides = overrides or {}
        logger.debug(f"Mapping {len(headers)} headers (schema={'yes' if schema and schema.fields else 'no'})")

        if schema is None or not schema.fields:
            result = self._default_mapping(headers, overrides)
        else:
            result = self._schema_mapping(headers, schema, overrides)

        logger.info(
            f"Mapped {len(result.mapping)} headers, {len(result.unmapped_headers)} unmapped, "
            f"{len(result.unmapped_fields)} schema fields unclaimed"
        )
        return result

    def _schema_mapping(
        self,
        headers: Sequence[str],
        schema: Schema,
        overrides: Dict[str, Optional[str]],
    ) -> MappingResult:
        field_names = schema.field_names
        mapping: Dict[str, str] = {}
        confidence: Dict[str, float] = {}
        unmapped_headers: List[str] = []
        claimed = set()
        suggestions: List[str] = []

        for header in _unique_in_order(headers):
            override = overrides.get(header, _NO_OVERRIDE)
            if override is not _NO_OVERRIDE:
                if override is None:
                    unmapped_headers.append(header)
                else:
                    mapping[header] = override
                    confidence[header] = EXACT_MATCH_CONFIDENCE
                    claimed.add(override)
                continue

            match, score = self.find_best_match(header, field_names)
            if match is None:
                unmapped_headers.append(header)
                suggestions.append(
                    f'No schema match found for CSV field "{header}" - will be ignored unless manually mapped'
                )
                continue

            mapping[header] = match
            confidence[header] = score
            claimed.add(match)
            if score < REVIEW_CONFIDENCE_THRESHOLD:
                suggestions.append(
                    f'Mapped "{header}" → "{match}" with {score * 100:.0f}% confidence - please review'
                )

        unmapped_fields = [name for name in field_names if name not in claimed]
        for name in unmapped_fields:
            if schema.is_required(name):
                suggestions.append(
                    f'⚠️ Required schema field "{name}" has no CSV mapping - import may fail'
                )

        return MappingResult(
            mapping=mapping,
            confidence=confidence,
            unmapped_headers=unmapped_headers,
            unmapped_fields=unmapped_fields,
            suggestions=suggestions,
        )

    @staticmethod
    def _default_mapping(
        headers: Sequence[str],
        overrides: Dict[str, Optional[str]],
    ) -> MappingResult:
        mapping: Dict[str, str] = {}
        confidence: Dict[str, float] = {}
        unmapped_headers: List[str] = []

        for header in _unique_in_order(headers):
            target = overrides.get(header, _NO_OVERRIDE)
            if target is _NO_OVERRIDE:
                target = normalize_field_name(header) or None
            if target is None:
                unmapped_headers.append(header)
                continue
            mapping[header] = target
            confidence[header] = EXACT_MATCH_CONFIDENCE

        return MappingResult(
            mapping=mapping,
            confidence=confidence,
            unmapped_headers=unmapped_headers,
            unmapped_fields=[],
            suggestions=["No schema provided - using normalized field names"],
        )

    def find_best_match(self, header: str, field_names: Sequence[str]) -> Tuple[Optional[str], float]:
        """
        Resolve one header against the schema field names.

        Returns:
            (field name, confidence), or (None, 0.0) when no tier matches
        """
        normalized = normalize_field_name(header)
        if not normalized:
            return None, 0.0

        normalized_fields = [(name, normalize_field_name(name)) for name in field_names]

        for name, field_norm in normalized_fields:
            if field_norm == normalized:
                return name, EXACT_MATCH_CONFIDENCE

        for pattern in VARIATION_PATTERNS:
            variation = normalize_field_name(pattern(normalized))
            for name, field_norm in normalized_fields:
                if field_norm == variation:
                    return name, VARIANT_MATCH_CONFIDENCE

        synonym_match = self._find_synonym_match(normalized, normalized_fields)
        if synonym_match is not None:
            return synonym_match, SYNONYM_MATCH_CONFIDENCE

        for name, field_norm in normalized_fields:
            if field_norm and (normalized in field_norm or field_norm in normalized):
                return name, PARTIAL_MATCH_CONFIDENCE

        return None, 0.0

    def _find_synonym_match(
        self,
        normalized: str,
        normalized_fields: List[Tuple[str, str]],
    ) -> Optional[str]:
        for concept, alternates in self.synonym_table.items():
            if normalized != concept and normalized not in alternates:
                continue
            options = (concept,) + tuple(alternates)
            for name, field_norm in normalized_fields:
                if field_norm in options:
                    return name
        return None


def _unique_in_order(headers: Sequence[str]) -> List[str]:
    seen = set()
    unique: List[str] = []
    for header in headers:
        if header in seen:
            continue
        seen.add(header)
        unique.append(header)
    return unique
