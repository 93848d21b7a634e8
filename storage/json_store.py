"""
Local JSON-lines history store
"""
import json
import logging
from pathlib import Path
from typing import Dict, List

from config import settings
from storage.history_store import HistoryStore

logger = logging.getLogger(__name__)


class JsonFileHistoryStore(HistoryStore):
    """
    Keeps each collection in its own JSON-lines file under history_dir.
    Used on its own or as the fallback when another backend is unavailable.
    """

    def __init__(self, history_dir: str = None):
        self.history_dir = Path(history_dir or settings.HISTORY_PATH)
        self.history_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, collection: str) -> Path:
        self._check_collection(collection)
        return self.history_dir / f"{collection}_bill_history.jsonl"

    def _read(self, collection: str) -> List[dict]:
        path = self._path(collection)
        if not path.exists():
            return []

        records = []
        with open(path, 'r', encoding='utf-8') as f:
            for line_number, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    record = json.loads(line)
                except json.JSONDecodeError:
                    logger.warning("Skipping unreadable line %d in %s", line_number, path)
                    continue
                if isinstance(record, dict) and "quarterRange" in record:
                    records.append(record)
                else:
                    logger.warning("Skipping invalid record on line %d in %s", line_number, path)
        return records

    def _write(self, collection: str, records: List[dict]):
        path = self._path(collection)
        with open(path, 'w', encoding='utf-8') as f:
            for record in records:
                f.write(json.dumps(record, ensure_ascii=False) + '\n')

    def list(self, collection: str) -> List[dict]:
        return self._newest_first(self._read(collection))

    def insert(self, collection: str, record: dict) -> dict:
        stored = self._prepare_record(record)
        with open(self._path(collection), 'a', encoding='utf-8') as f:
            f.write(json.dumps(stored, ensure_ascii=False) + '\n')
        return stored

    def delete_by_id(self, collection: str, record_id: str) -> bool:
        records = self._read(collection)
        remaining = [r for r in records if r.get("id") != record_id]
        if len(remaining) == len(records):
            return False
        self._write(collection, remaining)
        return True

    def clear_all(self) -> Dict[str, int]:
        deleted = {}
        for collection in self.collections:
            deleted[collection] = len(self._read(collection))
            self._write(collection, [])
        return deleted
