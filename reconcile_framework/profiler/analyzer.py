"""
Column Analyzer - profiles each column of a sampled raw table.

The Analyzer is the first pipeline stage. For every header it computes the
inferred primitive type, the null count, the distinct-value count and a few
sample values, then emits free-text recommendations for the reviewer.

All percentages are relative to the number of SAMPLED rows, not the full
table. The Analyzer is a pure function of its inputs.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Sequence

import pandas as pd

from reconcile_framework.core.constants import (
    DEFAULT_SAMPLE_SIZE,
    MAX_SAMPLE_VALUES,
    HIGH_NULL_PERCENTAGE,
    ENUM_MAX_UNIQUE_VALUES,
    ENUM_MAX_UNIQUE_PERCENTAGE,
    LOW_COMPLETENESS_PERCENTAGE,
)
from reconcile_framework.profiler.type_inferrer import TypeInferrer, TypeInference
from reconcile_framework.utils.value_patterns import is_blank

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnProfile:
    """
    Per-column summary computed from the sample.

    Attributes:
        header: Source header text
        position: Zero-based column index
        detected_type: One of string, number, boolean, date, email, url
        null_count: Sampled cells that are null or blank
        unique_count: Distinct non-null raw values
        sample_values: Up to five distinct non-blank values in row order
        type_confidence: Share of non-blank values matching detected_type
    """
    header: str
    position: int
    detected_type: str
    null_count: int
    unique_count: int
    sample_values: List[Any] = field(default_factory=list)
    type_confidence: float = 0.0

    def non_empty_count(self, sampled_rows: int) -> int:
        return sampled_rows - self.null_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "header": self.header,
            "position": self.position,
            "detectedType": self.detected_type,
            "nullCount": self.null_count,
            "uniqueCount": self.unique_count,
            "sampleValues": list(self.sample_values),
            "typeConfidence": round(self.type_confidence, 3),
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Column profiles in header order plus reviewer recommendations."""

    headers: List[str]
    row_count: int
    profiles: List[ColumnProfile]
    recommendations: List[str]

    @property
    def detected_types(self) -> Dict[str, str]:
        """Header -> detected type. Duplicate headers keep the first column."""
        types: Dict[str, str] = {}
        for profile in self.profiles:
            types.setdefault(profile.header, profile.detected_type)
        return types

    def to_dict(self) -> Dict[str, Any]:
        return {
            "headers": list(self.headers),
            "rowCount": self.row_count,
            "columns": [p.to_dict() for p in self.profiles],
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class QualityReport:
    """Whole-table completeness summary."""

    completeness: float
    consistency: float
    issues: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "completeness": round(self.completeness, 1),
            "consistency": self.consistency,
            "issues": list(self.issues),
        }


def sample_frame(headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> pd.DataFrame:
    """
    Build an object-dtype DataFrame with positional columns.

    Short rows are padded with None and long rows truncated so every row has
    exactly ``len(headers)`` cells. Columns are addressed by position because
    headers need not be unique.
    """
    width = len(headers)
    data = [
        (list(row[:width]) + [None] * (width - len(row)))
        for row in rows
    ]
    return pd.DataFrame(data, columns=range(width), dtype=object)


class ColumnAnalyzer:
    """
    Profile columns from the first ``sample_size`` rows.

    Example:
        >>> analyzer = ColumnAnalyzer(sample_size=10)
        >>> result = analyzer.analyze(["Email"], [["a@b.io"], ["c@d.org"]])
        >>> result.profiles[0].detected_type
        'email'
    """

    def __init__(
        self,
        sample_size: int = DEFAULT_SAMPLE_SIZE,
        max_sample_values: int = MAX_SAMPLE_VALUES,
        type_inferrer: Optional[TypeInferrer] = None,
    ):
        self.sample_size = sample_size
        self.max_sample_values = max_sample_values
        self.type_inferrer = type_inferrer or TypeInferrer()

    def analyze(self, headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> AnalysisResult:
        """
        Profile every column over the leading sample of rows.

        Args:
            headers: Ordered header strings (may contain blanks or duplicates)
            rows: Raw rows; only the first ``sample_size`` are examined

        Returns:
            AnalysisResult with one ColumnProfile per header
        """
        sample = list(rows[:self.sample_size])
        logger.debug(f"Analyzing {len(headers)} columns over {len(sample)} sampled rows")

        frame = sample_frame(headers, sample)
        profiles = [
            self._profile_column(header, position, frame[position])
            for position, header in enumerate(headers)
        ]
        recommendations = self._generate_recommendations(profiles, len(sample))

        logger.info(
            f"Analyzed {len(profiles)} columns: {len(recommendations)} recommendations"
        )
        return AnalysisResult(
            headers=list(headers),
            row_count=len(sample),
            profiles=profiles,
            recommendations=recommendations,
        )

    def _profile_column(self, header: str, position: int, column: pd.Series) -> ColumnProfile:
        values = column.tolist()
        inference: TypeInference = self.type_inferrer.infer_column_type(values)

        blank_mask = column.map(is_blank).astype(bool)
        null_count = int(blank_mask.sum())
        unique_count = int(column.dropna().nunique())

        sample_values = (
            column[~blank_mask]
            .drop_duplicates()
            .head(self.max_sample_values)
            .tolist()
        )

        return ColumnProfile(
            header=header,
            position=position,
            detected_type=inference.inferred_type,
            null_count=null_count,
            unique_count=unique_count,
            sample_values=sample_values,
            type_confidence=inference.confidence,
        )

    @staticmethod
    def _generate_recommendations(profiles: List[ColumnProfile], total_rows: int) -> List[str]:
        recommendations: List[str] = []
        if total_rows == 0:
            return recommendations

        for profile in profiles:
            header = profile.header
            null_percentage = profile.null_count / total_rows * 100
            unique_percentage = profile.unique_count / total_rows * 100

            if null_percentage > HIGH_NULL_PERCENTAGE:
                recommendations.append(
                    f'Field "{header}" has {null_percentage:.0f}% null values - consider making it optional'
                )

            if profile.unique_count == total_rows and profile.detected_type == "string":
                recommendations.append(
                    f'Field "{header}" has 100% unique values - potential unique identifier'
                )

            if profile.detected_type == "email":
                recommendations.append(
                    f'Field "{header}" detected as email - validation will be applied'
                )

            if profile.detected_type == "url":
                recommendations.append(
                    f'Field "{header}" detected as URL - format validation will be applied'
                )

            if (profile.unique_count <= ENUM_MAX_UNIQUE_VALUES
                    and unique_percentage < ENUM_MAX_UNIQUE_PERCENTAGE):
                recommendations.append(
                    f'Field "{header}" has only {profile.unique_count} unique values - consider as enum/category'
                )

        return recommendations


def analyze_quality(headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> QualityReport:
    """
    Completeness of the whole table: filled cells over total cells.

    Every row contributes ``len(headers)`` cells; missing trailing cells count
    as empty.
    """
    frame = sample_frame(headers, rows)
    total_cells = frame.size
    filled_cells = int((~frame.map(is_blank).astype(bool)).to_numpy().sum()) if total_cells else 0

    completeness = (filled_cells / total_cells * 100) if total_cells else 0.0
    issues: List[str] = []
    if completeness < LOW_COMPLETENESS_PERCENTAGE:
        issues.append(f"Low data completeness: {completeness:.1f}%")

    return QualityReport(completeness=completeness, consistency=100.0, issues=issues)
