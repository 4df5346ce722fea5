"""
End-to-end pipeline scenarios: file on disk -> engine -> sink.
"""

import pytest

from reconcile_framework.core.engine import ReconciliationEngine
from reconcile_framework.core.schema import Schema
from reconcile_framework.core.table import RawTable
from reconcile_framework.fixing.fixer import DataFixer
from reconcile_framework.loaders.csv_loader import load_csv
from reconcile_framework.sinks.delivery import deliver
from reconcile_framework.sinks.factory import SinkFactory


@pytest.mark.integration
class TestCustomerScenarios:

    def test_messy_row_is_cleaned(self, customer_table, customer_schema):
        result = ReconciliationEngine().run(customer_table, customer_schema)

        assert result.cleaned_data[1] == {
            "email": "jane@example.com",
            "name": "Jane Smith",
            "phone": "555-5678",
            "age": 32,
            "active": True,
        }

    def test_unfixable_row_is_reported_and_filterable(self, customer_table, customer_schema):
        result = ReconciliationEngine().run(customer_table, customer_schema)

        row_three = [d for d in result.errors if d.row == 3]
        assert sorted(d.message for d in row_three) == ["Invalid email format", "Invalid number format"]
        assert all(d.is_error for d in row_three)
        assert len(result.cleaned_data) == 3
        assert "invalid-email" not in [r["email"] for r in result.import_ready()]

    def test_out_of_range_value_is_not_fixed(self, customer_schema):
        table = RawTable.from_lists(["Email", "Age"], [["a@b.io", "150"]])

        result = ReconciliationEngine().run(table, customer_schema)

        assert [(d.field, d.message) for d in result.errors] == [("age", "Value 150 exceeds maximum 120")]
        assert result.errors[0].suggested_value is None
        assert result.cleaned_data[0]["age"] == 150
        assert not any(t.operation.startswith("fix-") for t in result.transformations)

    def test_duplicate_rows_are_marked_and_kept(self):
        table = RawTable.from_lists(
            ["Name", "City"],
            [["Ann", "Oslo"], ["  ANN ", "oslo"], ["Bob", "Rome"]],
        )

        result = ReconciliationEngine().run(table)

        assert len(result.cleaned_data) == 3
        marks = [t for t in result.transformations if t.operation == "mark-duplicate"]
        assert [t.row for t in marks] == [2]
        assert result.stats.duplicates_removed == 0

    def test_unknown_header_maps_to_itself(self):
        table = RawTable.from_lists(["tel"], [["555-1234"], ["555-9876"]])

        result = ReconciliationEngine().run(table)

        assert result.schema.field_names == ["tel"]
        assert result.mapping == {"tel": "tel"}
        assert result.confidence == {"tel": 1.0}


@pytest.mark.integration
class TestPipelineProperties:

    def test_identical_input_gives_identical_json(self, customer_table, customer_schema):
        first = ReconciliationEngine().run(customer_table, customer_schema).to_json()
        second = ReconciliationEngine().run(customer_table, customer_schema).to_json()
        assert first == second

    def test_row_count_bound_and_provenance(self, customer_schema):
        table = RawTable.from_lists(
            ["Email", "Age"],
            [["a@b.io", "1"], ["", ""], ["bad", "x"], [None, None], ["c@d.org", "2"]],
        )

        result = ReconciliationEngine().run(table, customer_schema)

        assert len(result.cleaned_data) <= table.row_count
        assert result.row_numbers == [1, 3, 5]
        assert {d.row for d in result.errors} <= set(result.row_numbers)
        assert {t.row for t in result.transformations} <= set(result.row_numbers)

    def test_fixer_is_idempotent_on_pipeline_output(self, customer_table, customer_schema):
        result = ReconciliationEngine().run(customer_table, customer_schema)

        rerun = DataFixer(customer_schema).fix(result.cleaned_data, result.errors, result.row_numbers)

        assert rerun.fixed_data == result.cleaned_data
        assert [t for t in rerun.transformations if t.operation != "mark-duplicate"] == []

    def test_number_fields_come_out_numeric(self):
        schema = Schema.from_dict({"fields": [{"name": "qty", "type": "number"}]})
        table = RawTable.from_lists(["qty"], [["+5"], [".5"], ["1e3"], [" 12 "]])

        result = ReconciliationEngine().run(table, schema)

        assert result.cleaned_data == [{"qty": 5}, {"qty": 0.5}, {"qty": 1000.0}, {"qty": 12}]
        assert result.errors == []

    def test_exact_match_dominates(self, customer_schema):
        extended = Schema.from_dict({
            "fields": [f.to_dict() for f in customer_schema.fields] + [{"name": "email_address"}]
        })
        table = RawTable.from_lists(["Email Address"], [["a@b.io"]])

        result = ReconciliationEngine().run(table, extended)

        assert result.mapping == {"Email Address": "email_address"}
        assert result.confidence == {"Email Address": 1.0}


@pytest.mark.integration
class TestFileToSink:

    def test_csv_to_sqlite(self, write_csv, customer_schema, tmp_path):
        path = write_csv(
            "Email Address,Full Name,Phone Number,Age,Active Status\n"
            "john@example.com,John Doe,555-1234,28,yes\n"
            "  JANE@EXAMPLE.COM  ,  Jane Smith  ,555-5678,32,true\n"
            "invalid-email,Bob Johnson,555-9999,not-a-number,no\n"
            ",,,,\n",
            name="customers.csv",
        )
        table = load_csv(path)
        result = ReconciliationEngine().run(table, customer_schema)

        config = {"provider": "sqlite", "collection": "customers", "database": str(tmp_path / "import.db")}
        sink = SinkFactory.create("sqlite")
        delivery = deliver(result.import_ready(), sink, config, batch_size=1)

        assert table.row_count == 4
        assert result.stats.total_rows == 4
        assert len(result.cleaned_data) == 3
        assert delivery.to_dict() == {"success": 2, "failure": 0, "errors": []}
        stored = sink.fetch_data(config)
        assert [r["email"] for r in stored] == ["john@example.com", "jane@example.com"]
        assert stored[0]["age"] == 28
