"""JSON Lines file sink: one record per line, appended."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from reconcile_framework.core.constants import FETCH_LIMIT
from reconcile_framework.core.exceptions import SinkError
from reconcile_framework.sinks.base import ImportResult, ProgressCallback, Sink
from reconcile_framework.utils.json_utils import safe_json_dumps

logger = logging.getLogger(__name__)


class JsonlSink(Sink):
    """
    Append records to the file named by ``config["path"]``.

    The collection name only labels errors, so use one file per collection.
    """

    provider = "jsonl"

    def test_connection(self, config: Dict[str, Any]) -> bool:
        path = config.get("path")
        if not path:
            return False
        parent = Path(path).parent
        return parent.exists() and parent.is_dir()

    def import_data(
        self,
        records: List[Dict[str, Any]],
        config: Dict[str, Any],
        on_progress: Optional[ProgressCallback] = None,
    ) -> ImportResult:
        path = Path(config["path"])
        lines = [safe_json_dumps(record, indent=None, sort_keys=False) for record in records]
        try:
            with open(path, "a", encoding="utf-8") as f:
                for line in lines:
                    f.write(line)
                    f.write("\n")
        except OSError as e:
            raise SinkError(
                f"Failed to write {path}: {e}",
                provider=self.provider,
                collection=config.get("collection"),
                original_exception=e,
            )

        logger.debug(f"Appended {len(records)} records to {path}")
        if on_progress:
            on_progress(len(records))
        return ImportResult(success=len(records))

    def fetch_data(self, config: Dict[str, Any]) -> List[Dict[str, Any]]:
        path = Path(config["path"])
        if not path.exists():
            return []

        records: List[Dict[str, Any]] = []
        try:
            with open(path, "r", encoding="utf-8") as f:
                for line in f:
                    if not line.strip():
                        continue
                    records.append(json.loads(line))
                    if len(records) >= FETCH_LIMIT:
                        break
        except (OSError, json.JSONDecodeError) as e:
            raise SinkError(
                f"Failed to read {path}: {e}",
                provider=self.provider,
                collection=config.get("collection"),
                original_exception=e,
            )
        return records

    def purge_data(self, config: Dict[str, Any]) -> None:
        path = Path(config["path"])
        try:
            path.write_text("", encoding="utf-8")
        except OSError as e:
            raise SinkError(
                f"Failed to purge {path}: {e}",
                provider=self.provider,
                collection=config.get("collection"),
                original_exception=e,
            )
        logger.info(f"Purged {path}")
