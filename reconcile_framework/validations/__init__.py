"""Record validation against a schema, or basic checks without one."""

from reconcile_framework.validations.validator import RecordValidator, ValidationOutcome
from reconcile_framework.validations.type_checks import TypeCheck, check_type

__all__ = ['RecordValidator', 'ValidationOutcome', 'TypeCheck', 'check_type']
