"""Pipeline configuration parsing and validation."""

import yaml
import os
from typing import Dict, Any, List, Optional
from pathlib import Path

from reconcile_framework.core.exceptions import (
    ConfigError,
    YAMLSizeError,
    ConfigValidationError,
    SchemaValidationError,
)
from reconcile_framework.core.constants import (
    MAX_YAML_FILE_SIZE,
    MAX_YAML_NESTING_DEPTH,
    MAX_YAML_KEY_COUNT,
    MAX_STRING_LENGTH,
    DEFAULT_SAMPLE_SIZE,
    MAX_SAMPLE_VALUES,
    DEFAULT_BATCH_SIZE,
    MAX_BATCH_SIZE,
)
from reconcile_framework.core.schema import Schema


def load_yaml_file(path: str) -> Any:
    """
    Load a YAML document with security validations.

    Security protections:
    - File size limit: 10 MB
    - Nesting depth limit: 20 levels
    - Total keys limit: 10,000 keys

    Raises:
        ConfigError: If file not found or invalid
        YAMLSizeError: If file exceeds size limit
        ConfigValidationError: If YAML structure is too complex
    """
    yaml_file = Path(path)
    if not yaml_file.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    # Check file size to prevent DoS attacks
    file_size = os.path.getsize(yaml_file)
    if file_size > MAX_YAML_FILE_SIZE:
        raise YAMLSizeError(
            f"Configuration file too large: {file_size:,} bytes. "
            f"Maximum allowed: {MAX_YAML_FILE_SIZE:,} bytes ({MAX_YAML_FILE_SIZE // (1024*1024)} MB)",
            file_size=file_size,
            max_size=MAX_YAML_FILE_SIZE,
        )

    try:
        with open(yaml_file, "r", encoding="utf-8") as f:
            # Use safe_load to prevent code execution
            document = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML file: {str(e)}")
    except UnicodeDecodeError as e:
        raise ConfigError(f"Invalid file encoding (expected UTF-8): {str(e)}")

    if document is not None:
        validate_yaml_structure(document)

    return document


def validate_yaml_structure(obj: Any, current_depth: int = 0, total_keys: List[int] = None) -> None:
    """
    Validate YAML structure to prevent resource exhaustion.

    Args:
        obj: Object to validate (dict, list, or primitive)
        current_depth: Current nesting depth
        total_keys: Mutable list with single element tracking total key count

    Raises:
        ConfigValidationError: If structure is too complex
    """
    if total_keys is None:
        total_keys = [0]

    if current_depth > MAX_YAML_NESTING_DEPTH:
        raise ConfigValidationError(
            f"YAML nesting depth exceeds maximum of {MAX_YAML_NESTING_DEPTH} levels. "
            f"This may indicate a malformed or malicious configuration file."
        )

    if isinstance(obj, dict):
        total_keys[0] += len(obj)
        if total_keys[0] > MAX_YAML_KEY_COUNT:
            raise ConfigValidationError(
                f"YAML structure contains more than {MAX_YAML_KEY_COUNT:,} keys/items."
            )

        for key, value in obj.items():
            if isinstance(key, str) and len(key) > 1000:
                raise ConfigValidationError(
                    f"YAML key exceeds maximum length of 1000 characters: '{key[:50]}...'"
                )
            validate_yaml_structure(value, current_depth + 1, total_keys)

    elif isinstance(obj, list):
        total_keys[0] += len(obj)
        if total_keys[0] > MAX_YAML_KEY_COUNT:
            raise ConfigValidationError(
                f"YAML structure contains more than {MAX_YAML_KEY_COUNT:,} keys/items."
            )

        for item in obj:
            validate_yaml_structure(item, current_depth + 1, total_keys)

    elif isinstance(obj, str):
        if len(obj) > MAX_STRING_LENGTH:
            raise ConfigValidationError(
                f"YAML contains string exceeding maximum length ({MAX_STRING_LENGTH:,} bytes): '{obj[:50]}...'"
            )


def load_schema(path: str) -> Schema:
    """
    Load a target schema from YAML.

    The document may either be the schema itself (``fields: [...]``) or wrap
    it under a top-level ``schema`` key.
    """
    document = load_yaml_file(path)
    if not isinstance(document, dict):
        raise ConfigError(f"Schema file must contain a mapping: {path}")
    if "schema" in document and isinstance(document["schema"], dict):
        document = document["schema"]
    if "fields" not in document:
        raise ConfigError(f"Schema file must define 'fields': {path}", field="fields")
    return Schema.from_dict(document)


class PipelineConfig:
    """
    Configuration for a reconciliation job.

    Example YAML:
        reconcile_job:
          name: "Customer import"
          sample_size: 20
          auto_fix: true
          schema:
            fields:
              - name: email
                type: email
                required: true
          sink:
            provider: jsonl
            collection: customers
            path: out/customers.jsonl
    """

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None):
        self.raw_config = config_dict if config_dict is not None else {"reconcile_job": {}}
        self._parse_config()

    @classmethod
    def from_yaml(cls, config_path: str) -> "PipelineConfig":
        document = load_yaml_file(config_path)
        if document is None:
            raise ConfigError(f"Configuration file is empty: {config_path}")
        if not isinstance(document, dict):
            raise ConfigError("Configuration must be a mapping")
        return cls(document)

    def _parse_config(self) -> None:
        if "reconcile_job" not in self.raw_config:
            raise ConfigError("Configuration must have 'reconcile_job' key")

        job_config = self.raw_config["reconcile_job"] or {}
        if not isinstance(job_config, dict):
            raise ConfigValidationError(
                "'reconcile_job' must be a mapping",
                field="reconcile_job",
                expected="mapping",
                actual=type(job_config).__name__,
            )

        self.job_name: str = job_config.get("name", "Unnamed Reconciliation Job")
        self.sample_size: int = self._positive_int(job_config, "sample_size", DEFAULT_SAMPLE_SIZE)
        self.max_sample_values: int = self._positive_int(job_config, "max_sample_values", MAX_SAMPLE_VALUES)
        self.batch_size: int = self._positive_int(job_config, "batch_size", DEFAULT_BATCH_SIZE)
        if self.batch_size > MAX_BATCH_SIZE:
            raise ConfigValidationError(
                f"batch_size cannot exceed {MAX_BATCH_SIZE}",
                field="reconcile_job.batch_size",
                expected=f"<= {MAX_BATCH_SIZE}",
                actual=str(self.batch_size),
            )

        self.auto_fix: bool = self._flag(job_config, "auto_fix", True)
        self.infer_schema: bool = self._flag(job_config, "infer_schema", True)
        self.merge_inferred_schema: bool = self._flag(job_config, "merge_inferred_schema", False)

        schema_config = job_config.get("schema")
        if schema_config is None:
            self.schema: Optional[Schema] = None
        elif isinstance(schema_config, dict):
            try:
                self.schema = Schema.from_dict(schema_config)
            except SchemaValidationError as e:
                raise ConfigValidationError(
                    e.message,
                    field="reconcile_job.schema",
                    expected="schema mapping with a 'fields' list",
                )
        else:
            raise ConfigValidationError(
                "schema must be a mapping",
                field="reconcile_job.schema",
                expected="mapping",
                actual=type(schema_config).__name__,
            )

        sink_config = job_config.get("sink")
        if sink_config is not None and not isinstance(sink_config, dict):
            raise ConfigValidationError(
                "sink must be a mapping",
                field="reconcile_job.sink",
                expected="mapping",
                actual=type(sink_config).__name__,
            )
        self.sink: Optional[Dict[str, Any]] = dict(sink_config) if sink_config else None

    @staticmethod
    def _positive_int(job_config: Dict[str, Any], key: str, default: int) -> int:
        value = job_config.get(key, default)
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ConfigValidationError(
                f"{key} must be a positive integer",
                field=f"reconcile_job.{key}",
                expected="positive integer",
                actual=repr(value),
            )
        return value

    @staticmethod
    def _flag(job_config: Dict[str, Any], key: str, default: bool) -> bool:
        value = job_config.get(key, default)
        if not isinstance(value, bool):
            raise ConfigValidationError(
                f"{key} must be true or false",
                field=f"reconcile_job.{key}",
                expected="boolean",
                actual=repr(value),
            )
        return value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "job_name": self.job_name,
            "sample_size": self.sample_size,
            "max_sample_values": self.max_sample_values,
            "batch_size": self.batch_size,
            "auto_fix": self.auto_fix,
            "infer_schema": self.infer_schema,
            "merge_inferred_schema": self.merge_inferred_schema,
            "schema": self.schema.to_dict() if self.schema else None,
            "sink": dict(self.sink) if self.sink else None,
        }
