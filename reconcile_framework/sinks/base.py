"""
Sink capability interface.

A sink is a persistence backend for cleaned records. The pipeline never
talks to a sink itself; callers hand ``PipelineResult.import_ready()`` (or
``cleaned_data``) to ``deliver`` which batches the records through a sink.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from reconcile_framework.core.exceptions import SinkError

ProgressCallback = Callable[[int], None]


@dataclass
class ImportResult:
    """
    Outcome of writing records to a sink.

    Attributes:
        success: Records written
        failure: Records in batches the sink rejected
        errors: One ``{"batch": index, "error": message}`` entry per failed batch
    """
    success: int = 0
    failure: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failure == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "failure": self.failure,
            "errors": [dict(error) for error in self.errors],
        }


class Sink(ABC):
    """
    Base class for persistence backends.

    ``config`` is the sink mapping from the job configuration: ``provider``,
    ``collection`` and any provider-specific options.
    """

    provider: str = "base"

    @abstractmethod
    def test_connection(self, config: Dict[str, Any]) -> bool:
        """Return True when the backend is reachable with this config."""
        pass

    @abstractmethod
    def import_data(
        self,
        records: List[Dict[str, Any]],
        config: Dict[str, Any],
        on_progress: Optional[ProgressCallback] = None,
    ) -> ImportResult:
        """
        Write records to the configured collection.

        Raises:
            SinkError: The records could not be written
        """
        pass

    @abstractmethod
    def fetch_data(self, config: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Return up to FETCH_LIMIT stored records, oldest first."""
        pass

    def purge_data(self, config: Dict[str, Any]) -> None:
        """Delete every record in the configured collection."""
        raise SinkError(
            f"Purge is not supported by the {self.provider} sink",
            provider=self.provider,
            collection=config.get("collection"),
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(provider={self.provider!r})"
