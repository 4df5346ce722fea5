"""
Shared fixtures for the reconciliation test suite.
"""

import logging

import pytest

from reconcile_framework.core.schema import Schema
from reconcile_framework.core.table import RawTable


CUSTOMER_HEADERS = ["Email Address", "Full Name", "Phone Number", "Age", "Active Status"]

CUSTOMER_ROWS = [
    ["john@example.com", "John Doe", "555-1234", "28", "yes"],
    ["  JANE@EXAMPLE.COM  ", "  Jane Smith  ", "555-5678", "32", "true"],
    ["invalid-email", "Bob Johnson", "555-9999", "not-a-number", "no"],
]


@pytest.fixture
def customer_headers():
    return list(CUSTOMER_HEADERS)


@pytest.fixture
def customer_rows():
    return [list(row) for row in CUSTOMER_ROWS]


@pytest.fixture
def customer_table():
    return RawTable.from_lists(CUSTOMER_HEADERS, CUSTOMER_ROWS)


@pytest.fixture
def customer_schema_dict():
    return {
        "fields": [
            {"name": "email", "type": "email", "required": True},
            {"name": "name", "type": "string"},
            {"name": "phone", "type": "string"},
            {"name": "age", "type": "number", "required": True, "validation": {"min": 0, "max": 120}},
            {"name": "active", "type": "boolean"},
        ]
    }


@pytest.fixture
def customer_schema(customer_schema_dict):
    return Schema.from_dict(customer_schema_dict)


@pytest.fixture
def write_csv(tmp_path):
    """Write text to a file under tmp_path and return its path as a string."""

    def _write(content, name="data.csv", encoding="utf-8"):
        path = tmp_path / name
        path.write_text(content, encoding=encoding)
        return str(path)

    return _write


@pytest.fixture(autouse=True)
def reset_framework_logging():
    """Drop handlers installed by setup_logging so tests don't share streams."""
    yield
    logger = logging.getLogger("reconcile_framework")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
