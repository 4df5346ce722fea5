"""
Value patterns shared by the Analyzer, Validator and Fixer.

Every stage must agree on what counts as blank, numeric, boolean, an email or
a date, so the patterns and parsers live here rather than in each stage.
Patterns are pre-compiled once at import time.
"""

import math
import re
import warnings
from datetime import date, datetime
from typing import Any, Optional, Union
from urllib.parse import urlparse

import numpy as np
import pandas as pd

from reconcile_framework.core.constants import TRUE_VALUES, FALSE_VALUES

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

URL_PREFIX_PATTERN = re.compile(r'^https?://', re.IGNORECASE)

BOOLEAN_PATTERN = re.compile(r'^(true|false|yes|no|0|1)$', re.IGNORECASE)

# Analyzer number vote, applied after stripping ',' and '$'
SIMPLE_NUMBER_PATTERN = re.compile(r'^-?\d+\.?\d*$')

# Validator number check, applied after stripping ',' and '$' and whitespace
NUMBER_PATTERN = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$')

# Fixer coercion: optional sign, optional '$', digits with thousands separators
FORMATTED_NUMBER_PATTERN = re.compile(r'^-?\$?\d[\d,]*(\.\d*)?$')

# Anything that looks like a date (search semantics, not anchored at the end)
DATE_HINT_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}|\d{1,2}/\d{1,2}/\d{2,4}')

# Date strings accepted as-is by the Validator
ISO_DATE_PATTERN = re.compile(
    r'^\d{4}-\d{2}-\d{2}([T ]\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:?\d{2})?)?$'
)
SLASH_DATE_PATTERN = re.compile(r'^\d{1,2}/\d{1,2}/\d{2,4}$')

_URL_SCHEME_PATTERN = re.compile(r'^[a-z][a-z0-9+.-]*$', re.IGNORECASE)

Number = Union[int, float]


def is_blank(value: Any) -> bool:
    """None, NaN, or a string that is empty after trimming."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, (list, tuple, dict, set)):
        return False
    if value is pd.NaT:
        return True
    return str(value).strip() == ''


def has_value(value: Any) -> bool:
    return not is_blank(value)


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value))


def is_valid_url(value: str) -> bool:
    """Absolute URL with a scheme and something after it."""
    if not value or any(ch.isspace() for ch in value):
        return False
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    if not parsed.scheme or not _URL_SCHEME_PATTERN.match(parsed.scheme):
        return False
    return bool(parsed.netloc or parsed.path)


def is_number(value: Any) -> bool:
    """Native numeric value (bool excluded)."""
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, float, np.integer, np.floating))


def _to_native(number: Any) -> Optional[Number]:
    if isinstance(number, np.integer):
        number = int(number)
    elif isinstance(number, np.floating):
        number = float(number)
    if isinstance(number, float) and (math.isnan(number) or math.isinf(number)):
        return None
    return number


def parse_number(value: Any) -> Optional[Number]:
    """
    Parse a value as a number, stripping '$' and ',' from strings.

    Returns an int when the text has no fractional or exponent part, a float
    otherwise, and None when the value is not numeric.
    """
    if is_number(value):
        return _to_native(value)
    if not isinstance(value, str):
        return None

    cleaned = value.replace(',', '').replace('$', '').strip()
    if not NUMBER_PATTERN.match(cleaned):
        return None
    if re.match(r'^[+-]?\d+$', cleaned):
        return int(cleaned)
    return _to_native(float(cleaned))


def coerce_formatted_number(value: str) -> Optional[Number]:
    """Fixer coercion for strings like '1,200', '$45.50' or '-3'."""
    if not FORMATTED_NUMBER_PATTERN.match(value):
        return None
    cleaned = value.replace(',', '').replace('$', '')
    if cleaned.endswith('.'):
        cleaned = cleaned[:-1]
    if '.' in cleaned:
        return _to_native(float(cleaned))
    return int(cleaned)


def parse_boolean(value: Any) -> Optional[bool]:
    """Map the boolean vocabulary (case-insensitive, exact) to True/False."""
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if not isinstance(value, str):
        return None
    lowered = value.lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    return None


def looks_like_date(value: str) -> bool:
    return bool(DATE_HINT_PATTERN.search(value))


def parse_date(value: Any) -> Optional[pd.Timestamp]:
    """Parse a value as a timestamp, or None when it is not a date."""
    if value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        return value
    if isinstance(value, (datetime, date)):
        return pd.Timestamp(value)
    if not isinstance(value, str) or not value.strip():
        return None
    # Bare numbers are not dates even though pandas would accept "2024"
    if parse_number(value) is not None:
        return None

    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        try:
            parsed = pd.to_datetime(value.strip())
        except (ValueError, TypeError, OverflowError):
            return None
    if parsed is pd.NaT or pd.isna(parsed):
        return None
    return parsed


def is_canonical_date(value: Any) -> bool:
    """Date objects, ISO strings and D/M/Y slash strings that parse."""
    if value is pd.NaT:
        return False
    if isinstance(value, (pd.Timestamp, datetime, date)):
        return True
    if not isinstance(value, str):
        return False
    if not (ISO_DATE_PATTERN.match(value) or SLASH_DATE_PATTERN.match(value)):
        return False
    return parse_date(value) is not None


def to_iso_date(timestamp: pd.Timestamp) -> str:
    """ISO-8601 text; midnight timestamps without a timezone render as a date."""
    if timestamp.tzinfo is None and timestamp == timestamp.normalize():
        return timestamp.date().isoformat()
    return timestamp.isoformat()


def format_number(number: Any) -> str:
    """Render numbers for messages: 150 rather than 150.0."""
    if isinstance(number, float) and number.is_integer():
        return str(int(number))
    return str(number)
