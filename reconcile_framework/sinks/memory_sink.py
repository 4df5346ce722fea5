"""In-process sink, mainly for tests and dry runs."""

import copy
import logging
from typing import Any, Dict, List, Optional

from reconcile_framework.core.constants import FETCH_LIMIT
from reconcile_framework.sinks.base import ImportResult, ProgressCallback, Sink

logger = logging.getLogger(__name__)


class MemorySink(Sink):
    """
    Keep records in a dict of collection name -> list of records.

    Storage belongs to the instance; two MemorySink objects never share data.
    """

    provider = "memory"

    def __init__(self):
        self.collections: Dict[str, List[Dict[str, Any]]] = {}

    def test_connection(self, config: Dict[str, Any]) -> bool:
        return bool(config.get("collection"))

    def import_data(
        self,
        records: List[Dict[str, Any]],
        config: Dict[str, Any],
        on_progress: Optional[ProgressCallback] = None,
    ) -> ImportResult:
        stored = self.collections.setdefault(config["collection"], [])
        stored.extend(copy.deepcopy(records))
        logger.debug(f"Stored {len(records)} records in memory collection {config['collection']}")
        if on_progress:
            on_progress(len(records))
        return ImportResult(success=len(records))

    def fetch_data(self, config: Dict[str, Any]) -> List[Dict[str, Any]]:
        stored = self.collections.get(config.get("collection"), [])
        return copy.deepcopy(stored[:FETCH_LIMIT])

    def purge_data(self, config: Dict[str, Any]) -> None:
        self.collections.pop(config.get("collection"), None)
