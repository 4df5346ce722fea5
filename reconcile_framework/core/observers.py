"""
Observer Pattern for Engine Event Notifications.

The reconciliation engine reports its progress through observers so that it
never formats terminal output itself. The CLI attaches a CLIProgressObserver;
library callers usually attach nothing, or a LoggingObserver.

Design Pattern: Observer (Behavioral)
Purpose: Decouple engine from presentation layer
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Any

from reconcile_framework.core.results import PipelineResult


class EngineObserver(ABC):
    """
    Abstract base class for engine event observers.

    All methods are called synchronously by the engine. An observer that
    raises is logged and skipped; it never aborts a run.

    Example:
        >>> class StageTimer(EngineObserver):
        ...     def on_stage_start(self, stage):
        ...         self.started = time.perf_counter()
        ...
        >>> engine = ReconciliationEngine(config, observers=[StageTimer()])
    """

    @abstractmethod
    def on_run_start(self, job_name: str, row_count: int, column_count: int) -> None:
        """
        Called before the first stage runs.

        Args:
            job_name: Name of the reconciliation job
            row_count: Rows in the raw table
            column_count: Headers in the raw table
        """
        pass

    @abstractmethod
    def on_stage_start(self, stage: str) -> None:
        """
        Called when a pipeline stage starts.

        Args:
            stage: Stage name ("analyze", "schema", "map", "transform",
                "validate", "fix")
        """
        pass

    @abstractmethod
    def on_stage_complete(self, stage: str, summary: Dict[str, Any]) -> None:
        """
        Called when a pipeline stage completes.

        Args:
            stage: Stage name
            summary: Counts describing what the stage produced
        """
        pass

    @abstractmethod
    def on_run_complete(self, result: PipelineResult) -> None:
        """Called once with the final result."""
        pass

    @abstractmethod
    def on_error(self, error: Exception, context: Dict[str, Any]) -> None:
        """
        Called when a fatal error aborts the run.

        Args:
            error: Exception that occurred
            context: Context dict with details (stage, job_name)
        """
        pass


class CLIProgressObserver(EngineObserver):
    """
    Observer for CLI pretty output.

    Attributes:
        verbose (bool): Whether to show per-stage progress
        po (PrettyOutput): Pretty output utility class
    """

    STAGE_LABELS = {
        "analyze": "Analyze columns",
        "schema": "Resolve schema",
        "map": "Map headers",
        "transform": "Transform rows",
        "validate": "Validate records",
        "fix": "Apply fixes",
    }

    def __init__(self, verbose: bool = True):
        self.verbose = verbose

        # Import here to avoid circular dependency
        from reconcile_framework.core.pretty_output import PrettyOutput
        self.po = PrettyOutput

    def on_run_start(self, job_name: str, row_count: int, column_count: int) -> None:
        if self.verbose:
            self.po.banner()
            self.po.header("RECONCILIATION JOB")
            self.po.key_value("Job Name", job_name, indent=2)
            self.po.key_value("Rows", row_count, indent=2)
            self.po.key_value("Columns", column_count, indent=2)
            self.po.blank_line()

    def on_stage_start(self, stage: str) -> None:
        pass

    def on_stage_complete(self, stage: str, summary: Dict[str, Any]) -> None:
        if self.verbose:
            label = self.STAGE_LABELS.get(stage, stage)
            details = ", ".join(f"{key}={value}" for key, value in summary.items())
            print(f"  {self.po.SUCCESS}{self.po.CHECK} {label}{self.po.RESET} {self.po.DIM}{details}{self.po.RESET}")

    def on_run_complete(self, result: PipelineResult) -> None:
        if self.verbose:
            stats = result.stats
            unresolved = sum(1 for d in result.errors if d.is_error)
            summary_items = [
                ("Total Rows", stats.total_rows, self.po.INFO),
                ("Cleaned Records", len(result.cleaned_data), self.po.INFO),
                ("Valid Rows", stats.valid_rows, self.po.SUCCESS),
                ("Invalid Rows", stats.invalid_rows, self.po.ERROR if stats.invalid_rows else self.po.SUCCESS),
                ("Transformations", stats.transformations_applied, self.po.INFO),
                ("Unresolved Errors", unresolved, self.po.ERROR if unresolved else self.po.SUCCESS),
                ("Duplicates Removed", stats.duplicates_removed, self.po.DIM),
            ]
            self.po.summary_box("Results", summary_items)

    def on_error(self, error: Exception, context: Dict[str, Any]) -> None:
        if self.verbose:
            stage = context.get('stage', 'unknown')
            self.po.error(f"Run aborted during {stage}: {str(error)}")


class LoggingObserver(EngineObserver):
    """Observer for structured logging of engine events."""

    def __init__(self):
        self.logger = logging.getLogger('reconcile_framework.engine.events')

    def on_run_start(self, job_name: str, row_count: int, column_count: int) -> None:
        self.logger.info(
            "Reconciliation run started",
            extra={'job_name': job_name, 'row_count': row_count, 'column_count': column_count}
        )

    def on_stage_start(self, stage: str) -> None:
        self.logger.debug(f"Stage started: {stage}", extra={'stage': stage})

    def on_stage_complete(self, stage: str, summary: Dict[str, Any]) -> None:
        self.logger.info(f"Stage completed: {stage}", extra={'stage': stage, 'summary': summary})

    def on_run_complete(self, result: PipelineResult) -> None:
        level = logging.WARNING if result.has_errors else logging.INFO
        self.logger.log(
            level,
            f"Reconciliation run completed - {len(result.errors)} unresolved diagnostics",
            extra={'stats': result.stats.to_dict()}
        )

    def on_error(self, error: Exception, context: Dict[str, Any]) -> None:
        self.logger.error(
            f"Reconciliation run failed: {str(error)}",
            extra=context,
            exc_info=True
        )


class QuietObserver(EngineObserver):
    """Minimal observer that produces no output."""

    def on_run_start(self, job_name: str, row_count: int, column_count: int) -> None:
        pass

    def on_stage_start(self, stage: str) -> None:
        pass

    def on_stage_complete(self, stage: str, summary: Dict[str, Any]) -> None:
        pass

    def on_run_complete(self, result: PipelineResult) -> None:
        pass

    def on_error(self, error: Exception, context: Dict[str, Any]) -> None:
        pass
