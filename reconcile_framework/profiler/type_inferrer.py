"""
Type Inferrer - Column Type Detection over Sampled Values.

This module decides which primitive type a column holds by testing the sampled
values against each candidate type in a fixed priority order.

Architecture:
    TypeInferrer follows an all-or-nothing voting strategy:
    1. Blank values are excluded from the vote and counted separately
    2. email, url, boolean and number each require EVERY remaining value to match
    3. date only requires ANY value to look like a date
    4. Everything else defaults to string

Design Decisions:
    - Boolean is tested before number so a column of 0/1 flags is boolean
    - ',' and '$' are stripped before the number test so "1,200" and "$45" count
    - Values are trimmed before testing; surrounding whitespace is a cleaning
      problem, not a type signal

Usage:
    inferrer = TypeInferrer()
    inferrer.detect_type("2024-01-15")                  # 'date'
    inferrer.infer_column_type(["1", "0", "yes"])       # TypeInference(boolean)
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, Sequence

from reconcile_framework.utils.value_patterns import (
    EMAIL_PATTERN,
    URL_PREFIX_PATTERN,
    BOOLEAN_PATTERN,
    SIMPLE_NUMBER_PATTERN,
    is_blank,
    looks_like_date,
)

logger = logging.getLogger(__name__)


@dataclass
class TypeInference:
    """
    Type inference result for a column.

    Attributes:
        inferred_type: One of string, number, boolean, date, email, url
        confidence: Share of non-blank values matching the inferred type
        type_counts: How many non-blank values match each candidate type
        null_count: Blank values excluded from the vote
    """
    inferred_type: str = "string"
    confidence: float = 0.0
    type_counts: Dict[str, int] = field(default_factory=dict)
    null_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inferred_type": self.inferred_type,
            "confidence": round(float(self.confidence), 3),
            "type_counts": dict(self.type_counts),
            "null_count": self.null_count,
        }


class TypeInferrer:
    """
    Priority-ordered type detection for sampled column values.

    Example:
        >>> inferrer = TypeInferrer()
        >>> inferrer.infer_column_type(["a@b.io", "c@d.org"]).inferred_type
        'email'
        >>> inferrer.infer_column_type(["1,200", "$45", "-3"]).inferred_type
        'number'
    """

    # Types that require every value to match, in priority order
    STRICT_TYPES = ("email", "url", "boolean", "number")

    def __init__(self):
        self._matchers = {
            "email": lambda v: bool(EMAIL_PATTERN.match(v)),
            "url": lambda v: bool(URL_PREFIX_PATTERN.match(v)),
            "boolean": lambda v: bool(BOOLEAN_PATTERN.match(v)),
            "number": self._is_simple_number,
            "date": looks_like_date,
        }

    @staticmethod
    def _is_simple_number(value: str) -> bool:
        return bool(SIMPLE_NUMBER_PATTERN.match(value.replace(',', '').replace('$', '')))

    def detect_type(self, value: Any) -> str:
        """
        Detect the type of a single value.

        Returns:
            'null' for blank values, otherwise the first type in priority
            order whose pattern the value matches, or 'string'
        """
        if is_blank(value):
            return 'null'
        text = str(value).strip()
        for type_name in self.STRICT_TYPES + ("date",):
            if self._matchers[type_name](text):
                return type_name
        return 'string'

    def infer_column_type(self, values: Sequence[Any]) -> TypeInference:
        """
        Infer the type of a column from its sampled values.

        Args:
            values: Raw sampled cell values for one column

        Returns:
            TypeInference with inferred type and confidence
        """
        texts: List[str] = [str(v).strip() for v in values if not is_blank(v)]
        null_count = len(values) - len(texts)

        if not texts:
            return TypeInference(inferred_type="string", confidence=0.0, null_count=null_count)

        type_counts = {
            type_name: sum(1 for text in texts if matcher(text))
            for type_name, matcher in self._matchers.items()
        }

        inferred: Optional[str] = None
        for type_name in self.STRICT_TYPES:
            if type_counts[type_name] == len(texts):
                inferred = type_name
                break

        if inferred is None:
            inferred = "date" if type_counts["date"] > 0 else "string"

        if inferred == "string":
            confidence = 1.0
        else:
            confidence = type_counts[inferred] / len(texts)

        if confidence < 1.0:
            logger.debug(
                f"Type inference: primary={inferred} ({confidence * 100:.1f}% confidence), "
                f"sampled={len(texts)} values"
            )

        return TypeInference(
            inferred_type=inferred,
            confidence=confidence,
            type_counts=type_counts,
            null_count=null_count,
        )
