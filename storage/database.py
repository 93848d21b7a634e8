"""
Database history store (DuckDB)
"""
import json
import logging
from pathlib import Path
from typing import Dict, List

import duckdb

from config import settings
from models.errors import StorageError
from storage.history_store import HistoryStore
from utils.helpers import parse_date

logger = logging.getLogger(__name__)


class DuckDBHistoryStore(HistoryStore):
    """
    History persistence using DuckDB. Each record is kept as a JSON payload
    alongside its collection, id and timestamp.
    """

    def __init__(self, db_path: str = None):
        self.db_path = db_path or settings.DATABASE_PATH
        self.conn = None
        self._init_database()

    def _init_database(self):
        """Initialize database and create tables"""
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        try:
            self.conn = duckdb.connect(self.db_path)
            self._create_tables()
        except duckdb.Error as e:
            raise StorageError(f"Could not open history database {self.db_path}: {e}") from e

    def _create_tables(self):
        """Create database tables"""
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS bill_history (
                collection VARCHAR NOT NULL,
                record_id VARCHAR NOT NULL,
                created_at TIMESTAMP,
                payload VARCHAR NOT NULL,
                PRIMARY KEY (collection, record_id)
            )
        """)

    def _execute(self, query: str, params: tuple = ()):
        if not self.conn:
            raise StorageError("History database is closed")
        try:
            return self.conn.execute(query, params)
        except duckdb.Error as e:
            raise StorageError(f"History database query failed: {e}") from e

    def is_available(self) -> bool:
        if not self.conn:
            return False
        try:
            self.conn.execute("SELECT 1").fetchone()
            return True
        except duckdb.Error:
            return False

    def list(self, collection: str) -> List[dict]:
        self._check_collection(collection)
        rows = self._execute("""
            SELECT payload FROM bill_history
            WHERE collection = ?
            ORDER BY created_at DESC
        """, (collection,)).fetchall()
        return [json.loads(row[0]) for row in rows]

    def insert(self, collection: str, record: dict) -> dict:
        self._check_collection(collection)
        stored = self._prepare_record(record)
        self._execute("""
            INSERT OR REPLACE INTO bill_history
            (collection, record_id, created_at, payload)
            VALUES (?, ?, ?, ?)
        """, (
            collection,
            stored["id"],
            parse_date(stored["date"]),
            json.dumps(stored, ensure_ascii=False),
        ))
        return stored

    def delete_by_id(self, collection: str, record_id: str) -> bool:
        self._check_collection(collection)
        count = self._execute("""
            SELECT COUNT(*) FROM bill_history WHERE collection = ? AND record_id = ?
        """, (collection, record_id)).fetchone()[0]
        if count == 0:
            return False
        self._execute("""
            DELETE FROM bill_history WHERE collection = ? AND record_id = ?
        """, (collection, record_id))
        return True

    def clear_all(self) -> Dict[str, int]:
        deleted = {}
        for collection in self.collections:
            deleted[collection] = self._execute("""
                SELECT COUNT(*) FROM bill_history WHERE collection = ?
            """, (collection,)).fetchone()[0]
        self._execute("DELETE FROM bill_history")
        logger.info("Cleared history database: %s", deleted)
        return deleted

    def close(self):
        """Close database connection"""
        if self.conn:
            self.conn.close()
            self.conn = None
