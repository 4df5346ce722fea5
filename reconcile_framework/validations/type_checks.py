"""
Per-type value checks used by the RecordValidator.

Each check takes a non-blank value and returns a TypeCheck. A failed check
carries a suggested value only when a safe, deterministic coercion exists.

Checks are registered by schema type tag in TYPE_CHECKS; unknown tags (and
``string``) accept any value.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from reconcile_framework.utils.value_patterns import (
    BOOLEAN_PATTERN,
    is_canonical_date,
    is_valid_email,
    is_valid_url,
    parse_boolean,
    parse_date,
    parse_number,
    to_iso_date,
)


@dataclass(frozen=True)
class TypeCheck:
    valid: bool
    suggestion: Any = None


VALID = TypeCheck(valid=True)


def check_email(value: Any) -> TypeCheck:
    text = str(value)
    if is_valid_email(text):
        return VALID
    candidate = text.lower().strip()
    return TypeCheck(False, candidate if is_valid_email(candidate) else None)


def check_url(value: Any) -> TypeCheck:
    return TypeCheck(is_valid_url(str(value)))


def check_number(value: Any) -> TypeCheck:
    if isinstance(value, bool):
        return TypeCheck(False)
    if parse_number(value) is not None:
        return VALID
    return TypeCheck(False)


def check_boolean(value: Any) -> TypeCheck:
    if isinstance(value, bool):
        return VALID
    text = str(value)
    if BOOLEAN_PATTERN.match(text):
        return VALID
    return TypeCheck(False, parse_boolean(text.strip()))


def check_date(value: Any) -> TypeCheck:
    """
    Canonical dates pass; other parseable text fails with its ISO form.

    Canonical means a date object, an ISO-8601 string or a D/M/Y slash string.
    """
    if is_canonical_date(value):
        return VALID
    parsed = parse_date(value)
    if parsed is None:
        return TypeCheck(False)
    return TypeCheck(False, to_iso_date(parsed))


def check_array(value: Any) -> TypeCheck:
    return TypeCheck(isinstance(value, (list, tuple)))


def check_object(value: Any) -> TypeCheck:
    return TypeCheck(isinstance(value, dict))


TYPE_CHECKS: Dict[str, Callable[[Any], TypeCheck]] = {
    "email": check_email,
    "url": check_url,
    "number": check_number,
    "boolean": check_boolean,
    "date": check_date,
    "array": check_array,
    "object": check_object,
}


def check_type(value: Any, type_name: str) -> TypeCheck:
    check: Optional[Callable[[Any], TypeCheck]] = TYPE_CHECKS.get(type_name)
    if check is None:
        return VALID
    return check(value)
