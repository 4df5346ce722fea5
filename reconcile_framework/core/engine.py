"""
Reconciliation engine - orchestrates the six pipeline stages.

The engine:
1. Rejects structurally unusable input (no headers, no rows, an invalid
   supplied schema) before any row is read
2. Profiles columns over a sample (Analyzer)
3. Resolves the schema: uses the supplied one or infers one
4. Maps headers onto schema fields (FieldMatcher)
5. Projects rows into records (Transformer)
6. Validates records (Validator)
7. Applies safe fixes (Fixer) and aggregates one PipelineResult

Control flows strictly forward. Fatal errors are re-raised to the caller after
observers are notified; row-level problems end up in the result.
"""

import time
from typing import Dict, Any, List, Optional, Tuple

from reconcile_framework.core.config import PipelineConfig
from reconcile_framework.core.constants import OPERATION_REMOVE_DUPLICATE
from reconcile_framework.core.exceptions import (
    ReconcileException,
    EmptyInputError,
    MissingHeadersError,
)
from reconcile_framework.core.logging_config import get_logger
from reconcile_framework.core.results import PipelineResult, PipelineStats, Transformation
from reconcile_framework.core.schema import Schema
from reconcile_framework.core.table import RawTable
from reconcile_framework.fixing.fixer import DataFixer
from reconcile_framework.fixing.operations import remove_duplicates
from reconcile_framework.mapping.field_matcher import FieldMatcher
from reconcile_framework.mapping.transformer import Transformer
from reconcile_framework.profiler.analyzer import ColumnAnalyzer, AnalysisResult, QualityReport, analyze_quality
from reconcile_framework.profiler.schema_inferencer import SchemaInferencer, ensure_valid, merge_schemas
from reconcile_framework.validations.validator import RecordValidator

logger = get_logger(__name__)


class ReconciliationEngine:
    """
    Run the reconciliation pipeline over one raw table at a time.

    The engine holds configuration only; every run builds fresh stage
    objects, so one engine may be used for many files.

    Example usage:
        engine = ReconciliationEngine(PipelineConfig.from_yaml('job.yaml'))
        result = engine.run(load_csv('customers.csv'))
        if result.has_errors:
            ...
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        observers: Optional[List['EngineObserver']] = None
    ) -> None:
        """
        Initialize the reconciliation engine.

        Args:
            config: Pipeline configuration; defaults apply when None
            observers: Optional list of observers to receive engine events
        """
        self.config: PipelineConfig = config or PipelineConfig()
        self.observers: List['EngineObserver'] = observers if observers is not None else []

    @classmethod
    def from_config(cls, config_path: str) -> "ReconciliationEngine":
        """
        Create engine from YAML configuration file.

        Raises:
            ConfigError: If configuration is invalid
        """
        return cls(PipelineConfig.from_yaml(config_path))

    # Observer notification methods
    def _notify_run_start(self, job_name: str, row_count: int, column_count: int) -> None:
        for observer in self.observers:
            try:
                observer.on_run_start(job_name, row_count, column_count)
            except Exception as e:
                logger.warning(f"Observer {observer.__class__.__name__} failed on_run_start: {e}")

    def _notify_stage_start(self, stage: str) -> None:
        for observer in self.observers:
            try:
                observer.on_stage_start(stage)
            except Exception as e:
                logger.warning(f"Observer {observer.__class__.__name__} failed on_stage_start: {e}")

    def _notify_stage_complete(self, stage: str, summary: Dict[str, Any]) -> None:
        for observer in self.observers:
            try:
                observer.on_stage_complete(stage, summary)
            except Exception as e:
                logger.warning(f"Observer {observer.__class__.__name__} failed on_stage_complete: {e}")

    def _notify_run_complete(self, result: PipelineResult) -> None:
        for observer in self.observers:
            try:
                observer.on_run_complete(result)
            except Exception as e:
                logger.warning(f"Observer {observer.__class__.__name__} failed on_run_complete: {e}")

    def _notify_error(self, error: Exception, context: Dict[str, Any]) -> None:
        for observer in self.observers:
            try:
                observer.on_error(error, context)
            except Exception as e:
                logger.warning(f"Observer {observer.__class__.__name__} failed on_error: {e}")

    @staticmethod
    def check_structure(table: RawTable) -> None:
        """Raise the fatal input errors that abort a run before any stage."""
        if table.column_count == 0:
            raise MissingHeadersError()
        if table.row_count == 0:
            raise EmptyInputError()

    def profile(self, table: RawTable) -> Tuple[AnalysisResult, QualityReport]:
        """Run only the Analyzer, plus the whole-table completeness check."""
        self.check_structure(table)
        analyzer = ColumnAnalyzer(
            sample_size=self.config.sample_size,
            max_sample_values=self.config.max_sample_values,
        )
        analysis = analyzer.analyze(table.headers, table.rows)
        return analysis, analyze_quality(table.headers, table.rows)

    def infer_schema(self, table: RawTable) -> Schema:
        """Schema the pipeline would synthesize for this table."""
        analysis, _ = self.profile(table)
        return SchemaInferencer().infer_schema(analysis)

    def run(
        self,
        table: RawTable,
        schema: Optional[Schema] = None,
        overrides: Optional[Dict[str, Optional[str]]] = None,
        dedupe: bool = False,
    ) -> PipelineResult:
        """
        Reconcile one raw table.

        Args:
            table: Headers and raw rows
            schema: Target schema; falls back to the configured schema, then
                to inference
            overrides: Manual header -> field mapping choices
            dedupe: Also remove exact duplicate records after fixing

        Returns:
            PipelineResult

        Raises:
            MissingHeadersError: The table has no headers
            EmptyInputError: The table has no rows
            SchemaValidationError: The supplied schema is structurally invalid
        """
        config = self.config
        stage = "input"
        self._notify_run_start(config.job_name, table.row_count, table.column_count)
        start_time = time.time()

        try:
            self.check_structure(table)

            # A supplied schema is rejected before any row is read
            user_schema = schema if schema is not None else config.schema
            if user_schema is not None:
                stage = "schema"
                ensure_valid(user_schema)

            stage = "analyze"
            self._notify_stage_start(stage)
            analyzer = ColumnAnalyzer(
                sample_size=config.sample_size,
                max_sample_values=config.max_sample_values,
            )
            analysis = analyzer.analyze(table.headers, table.rows)
            self._notify_stage_complete(stage, {
                "columns": len(analysis.profiles),
                "recommendations": len(analysis.recommendations),
            })

            stage = "schema"
            self._notify_stage_start(stage)
            resolved_schema, match_schema = self._resolve_schema(analysis, user_schema)
            self._notify_stage_complete(stage, {
                "fields": len(resolved_schema.fields) if resolved_schema else 0,
                "source": "supplied" if user_schema is not None else ("inferred" if resolved_schema else "none"),
            })

            stage = "map"
            self._notify_stage_start(stage)
            mapping = FieldMatcher().create_mapping(table.headers, match_schema, overrides)
            self._notify_stage_complete(stage, {
                "mapped": len(mapping.mapping),
                "unmapped": len(mapping.unmapped_headers),
                "synonyms": mapping.table_version,
            })

            stage = "transform"
            self._notify_stage_start(stage)
            transformed = Transformer().transform(table.headers, table.rows, mapping.mapping)
            self._notify_stage_complete(stage, {
                "records": len(transformed.records),
                "rejected": len(transformed.rejected_rows),
            })

            stage = "validate"
            self._notify_stage_start(stage)
            outcome = RecordValidator().validate(
                transformed.records, resolved_schema, transformed.row_numbers
            )
            self._notify_stage_complete(stage, {
                "valid": outcome.valid_row_count,
                "invalid": outcome.invalid_row_count,
            })

            stage = "fix"
            self._notify_stage_start(stage)
            records = transformed.records
            row_numbers = transformed.row_numbers
            transformations: List[Transformation] = []
            if config.auto_fix:
                fixed = DataFixer(resolved_schema).fix(records, outcome.errors, row_numbers)
                records = fixed.fixed_data
                transformations.extend(fixed.transformations)
                unresolved = fixed.unfixable_errors
            else:
                logger.info("Auto-fix disabled: every diagnostic is reported as unresolved")
                records = [dict(record) for record in records]
                unresolved = list(outcome.errors)

            if dedupe:
                deduped = remove_duplicates(records, row_numbers)
                records = deduped.records
                row_numbers = deduped.row_numbers
                transformations.extend(deduped.transformations)
            self._notify_stage_complete(stage, {
                "transformations": len(transformations),
                "unresolved": len(unresolved),
            })

        except ReconcileException as e:
            logger.error(f"Reconciliation aborted during {stage}: {e.message}")
            self._notify_error(e, {"stage": stage, "job_name": config.job_name})
            raise

        stats = PipelineStats(
            total_rows=table.row_count,
            valid_rows=outcome.valid_row_count,
            invalid_rows=outcome.invalid_row_count,
            fields_processed=table.column_count,
            transformations_applied=len(transformations),
            duplicates_removed=sum(
                1 for t in transformations if t.operation == OPERATION_REMOVE_DUPLICATE
            ),
        )

        result = PipelineResult(
            mapping=dict(mapping.mapping),
            cleaned_data=records,
            errors=list(unresolved),
            warnings=list(outcome.warnings),
            stats=stats,
            suggestions=analysis.recommendations + mapping.suggestions + outcome.warnings,
            row_numbers=list(row_numbers),
            transformations=transformations,
            confidence=dict(mapping.confidence),
            schema=resolved_schema,
        )

        logger.info(
            f"Reconciliation finished in {time.time() - start_time:.2f}s: "
            f"{len(records)} records, {len(unresolved)} unresolved diagnostics"
        )
        self._notify_run_complete(result)
        return result

    def _resolve_schema(
        self,
        analysis: AnalysisResult,
        user_schema: Optional[Schema],
    ) -> Tuple[Optional[Schema], Optional[Schema]]:
        """
        Decide the validation schema and the schema headers are matched against.

        Returns:
            (schema to validate against, schema to match headers against).
            A supplied schema has already passed ensure_valid.
            Inferred schemas are built from the headers themselves, so headers
            are matched in no-schema mode (1:1 normalized names) in that case.
        """
        if user_schema is not None:
            if self.config.merge_inferred_schema:
                merged = merge_schemas(SchemaInferencer().infer_schema(analysis), user_schema)
                return merged, merged
            return user_schema, user_schema

        if not self.config.infer_schema:
            return None, None

        return SchemaInferencer().infer_schema(analysis), None
