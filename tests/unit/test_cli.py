"""
Tests for the command-line interface.
"""

import json

import pytest
import yaml
from click.testing import CliRunner

from reconcile_framework import __version__
from reconcile_framework.cli import cli
from reconcile_framework.sinks.sqlite_sink import SqliteSink


CUSTOMERS_CSV = (
    "Email Address,Full Name,Phone Number,Age,Active Status\n"
    "john@example.com,John Doe,555-1234,28,yes\n"
    "  JANE@EXAMPLE.COM  ,  Jane Smith  ,555-5678,32,true\n"
    "invalid-email,Bob Johnson,555-9999,not-a-number,no\n"
)

CLEAN_CSV = "Name,Email\nAnn,ann@example.com\nBob,bob@example.org\n"

SCHEMA_YAML = """
fields:
  - name: email
    type: email
    required: true
  - name: name
    type: string
  - name: phone
    type: string
  - name: age
    type: number
    required: true
    validation:
      min: 0
      max: 120
  - name: active
    type: boolean
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def customers(tmp_path):
    path = tmp_path / "customers.csv"
    path.write_text(CUSTOMERS_CSV, encoding="utf-8")
    return path


@pytest.fixture
def schema_file(tmp_path):
    path = tmp_path / "schema.yaml"
    path.write_text(SCHEMA_YAML, encoding="utf-8")
    return path


@pytest.mark.unit
class TestRunCommand:

    def test_clean_file_exits_zero(self, runner, tmp_path):
        path = tmp_path / "people.csv"
        path.write_text(CLEAN_CSV, encoding="utf-8")
        output = tmp_path / "out" / "result.json"

        result = runner.invoke(cli, ["run", str(path), "-o", str(output), "--quiet"])

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert list(data) == ["mapping", "cleanedData", "errors", "warnings", "stats", "suggestions"]
        assert data["mapping"] == {"Name": "name", "Email": "email"}
        assert data["stats"]["totalRows"] == 2

    def test_unresolved_errors_exit_one(self, runner, customers, schema_file):
        result = runner.invoke(cli, ["run", str(customers), "-s", str(schema_file)])

        assert result.exit_code == 1
        assert "Header mapping" in result.output
        assert "Row 3, email: Invalid email format" in result.output

    def test_no_fix_keeps_raw_values(self, runner, customers, schema_file, tmp_path):
        output = tmp_path / "raw.json"
        runner.invoke(cli, ["run", str(customers), "-s", str(schema_file), "--no-fix", "-q", "-o", str(output)])

        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["cleanedData"][0]["age"] == "28"

    def test_deliver_to_jsonl(self, runner, customers, schema_file, tmp_path):
        target = tmp_path / "customers.jsonl"

        result = runner.invoke(cli, [
            "run", str(customers), "-s", str(schema_file), "-q",
            "--sink", "jsonl", "--target", str(target), "--drop-invalid",
        ])

        assert result.exit_code == 1
        lines = target.read_text(encoding="utf-8").splitlines()
        assert [json.loads(line)["email"] for line in lines] == ["john@example.com", "jane@example.com"]

    def test_deliver_to_sqlite_from_config(self, runner, tmp_path):
        csv_path = tmp_path / "people.csv"
        csv_path.write_text(CLEAN_CSV, encoding="utf-8")
        database = tmp_path / "people.db"
        config = tmp_path / "job.yaml"
        config.write_text(
            "reconcile_job:\n"
            "  name: People\n"
            "  sink:\n"
            "    provider: sqlite\n"
            f"    database: {database}\n",
            encoding="utf-8",
        )

        result = runner.invoke(cli, ["run", str(csv_path), "-c", str(config), "-q"])

        assert result.exit_code == 0, result.output
        assert "Delivered 2 records" in result.output
        stored = SqliteSink().fetch_data({"collection": "people", "database": str(database)})
        assert [r["name"] for r in stored] == ["Ann", "Bob"]

    def test_target_requires_sink(self, runner, customers):
        result = runner.invoke(cli, ["run", str(customers), "--target", "out.jsonl"])

        assert result.exit_code == 2
        assert "--target requires --sink" in result.output

    def test_fatal_input_exits_two(self, runner, tmp_path):
        path = tmp_path / "headers_only.csv"
        path.write_text("A,B\n", encoding="utf-8")

        result = runner.invoke(cli, ["run", str(path)])

        assert result.exit_code == 2
        assert "EmptyInputError" in result.output

    def test_invalid_schema_lists_problems(self, runner, customers, tmp_path):
        schema = tmp_path / "bad.yaml"
        schema.write_text("fields:\n  - name: a\n  - name: a\n    type: integer\n", encoding="utf-8")

        result = runner.invoke(cli, ["run", str(customers), "-s", str(schema)])

        assert result.exit_code == 2
        assert "Duplicate field names: a" in result.output
        assert 'Invalid type "integer" for field "a"' in result.output


@pytest.mark.unit
class TestProfileCommand:

    def test_profile(self, runner, customers, tmp_path):
        output = tmp_path / "profile.json"

        result = runner.invoke(cli, ["profile", str(customers), "-j", str(output)])

        assert result.exit_code == 0, result.output
        assert "Email Address" in result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["analysis"]["rowCount"] == 3
        assert data["quality"]["completeness"] == 100.0


@pytest.mark.unit
class TestInferSchemaCommand:

    def test_prints_yaml(self, runner, customers):
        result = runner.invoke(cli, ["infer-schema", str(customers)])

        assert result.exit_code == 0
        document = yaml.safe_load(result.output)
        names = [f["name"] for f in document["schema"]["fields"]]
        assert names == ["email_address", "full_name", "phone_number", "age", "active_status"]

    def test_written_schema_round_trips_into_run(self, runner, customers, tmp_path):
        schema_path = tmp_path / "inferred.yaml"
        runner.invoke(cli, ["infer-schema", str(customers), "-o", str(schema_path)])

        result = runner.invoke(cli, ["run", str(customers), "-s", str(schema_path), "-q"])

        assert result.exit_code == 0, result.output


@pytest.mark.unit
class TestVersion:

    def test_version_command(self, runner):
        result = runner.invoke(cli, ["version"])
        assert result.exit_code == 0
        assert f"Reconcile v{__version__}" in result.output

    def test_version_option(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert __version__ in result.output
