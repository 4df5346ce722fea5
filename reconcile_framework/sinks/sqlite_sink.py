"""
SQLite sink.

Each collection is a table with an autoincrement id and a JSON ``data``
column, so records of any shape can be stored without a DDL step per schema.
"""

import json
import logging
import re
import sqlite3
from typing import Any, Dict, List, Optional

from reconcile_framework.core.constants import FETCH_LIMIT
from reconcile_framework.core.exceptions import SinkError
from reconcile_framework.sinks.base import ImportResult, ProgressCallback, Sink
from reconcile_framework.utils.json_utils import safe_json_dumps

logger = logging.getLogger(__name__)

# Table names are interpolated into SQL, so only plain identifiers are allowed
_IDENTIFIER = re.compile(r'^[A-Za-z_][A-Za-z0-9_]{0,127}$')


def _table_name(config: Dict[str, Any]) -> str:
    collection = config.get("collection")
    if not isinstance(collection, str) or not _IDENTIFIER.match(collection):
        raise SinkError(
            f"Invalid SQLite table name: {collection!r}",
            provider=SqliteSink.provider,
            collection=collection,
        )
    return collection


class SqliteSink(Sink):
    """
    Store records in ``config["database"]``, table ``config["collection"]``.

    Every call opens and closes its own connection; a batch is one
    transaction, so a failed batch leaves nothing behind.
    """

    provider = "sqlite"

    def _connect(self, config: Dict[str, Any]) -> sqlite3.Connection:
        try:
            return sqlite3.connect(str(config["database"]))
        except sqlite3.Error as e:
            raise SinkError(
                f"Cannot open SQLite database {config['database']}: {e}",
                provider=self.provider,
                collection=config.get("collection"),
                original_exception=e,
            )

    def test_connection(self, config: Dict[str, Any]) -> bool:
        if not config.get("database"):
            return False
        try:
            conn = self._connect(config)
        except SinkError as e:
            logger.warning(e.message)
            return False
        try:
            conn.execute("SELECT 1")
            return True
        except sqlite3.Error as e:
            logger.warning(f"SQLite connection test failed: {e}")
            return False
        finally:
            conn.close()

    def import_data(
        self,
        records: List[Dict[str, Any]],
        config: Dict[str, Any],
        on_progress: Optional[ProgressCallback] = None,
    ) -> ImportResult:
        table = _table_name(config)
        rows = [(safe_json_dumps(record, indent=None),) for record in records]

        conn = self._connect(config)
        try:
            with conn:
                conn.execute(
                    f'CREATE TABLE IF NOT EXISTS "{table}" '
                    f'(id INTEGER PRIMARY KEY AUTOINCREMENT, data TEXT NOT NULL)'
                )
                conn.executemany(f'INSERT INTO "{table}" (data) VALUES (?)', rows)
        except sqlite3.Error as e:
            raise SinkError(
                f"Failed to write to {table}: {e}",
                provider=self.provider,
                collection=table,
                original_exception=e,
            )
        finally:
            conn.close()

        logger.debug(f"Inserted {len(rows)} rows into {table}")
        if on_progress:
            on_progress(len(rows))
        return ImportResult(success=len(rows))

    def fetch_data(self, config: Dict[str, Any]) -> List[Dict[str, Any]]:
        table = _table_name(config)
        conn = self._connect(config)
        try:
            cursor = conn.execute(
                f'SELECT data FROM "{table}" ORDER BY id LIMIT ?', (FETCH_LIMIT,)
            )
            return [json.loads(row[0]) for row in cursor.fetchall()]
        except sqlite3.OperationalError as e:
            # Table not created yet
            if "no such table" in str(e):
                return []
            raise SinkError(
                f"Failed to read {table}: {e}",
                provider=self.provider,
                collection=table,
                original_exception=e,
            )
        finally:
            conn.close()

    def purge_data(self, config: Dict[str, Any]) -> None:
        table = _table_name(config)
        conn = self._connect(config)
        try:
            with conn:
                conn.execute(f'DROP TABLE IF EXISTS "{table}"')
        except sqlite3.Error as e:
            raise SinkError(
                f"Failed to purge {table}: {e}",
                provider=self.provider,
                collection=table,
                original_exception=e,
            )
        finally:
            conn.close()
        logger.info(f"Purged table {table}")
