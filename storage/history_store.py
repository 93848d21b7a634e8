"""
History storage contract shared by every backend
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List

from config import settings
from utils.helpers import generate_id, parse_date
from utils.validations import validate_collection


class HistoryStore(ABC):
    """
    Persists calculation results as plain records, one collection per bill
    type ('water', 'electricity'). Records are the dicts produced by the
    result objects' to_dict().
    """

    collections = settings.COLLECTIONS

    @abstractmethod
    def list(self, collection: str) -> List[dict]:
        """All records of a collection, newest first"""

    @abstractmethod
    def insert(self, collection: str, record: dict) -> dict:
        """Store a record and return it as stored (with id and date assigned)"""

    @abstractmethod
    def delete_by_id(self, collection: str, record_id: str) -> bool:
        """Delete one record; False when no record has that id"""

    @abstractmethod
    def clear_all(self) -> Dict[str, int]:
        """Delete every record; returns the number deleted per collection"""

    def is_available(self) -> bool:
        """Whether the backend can currently serve requests"""
        return True

    def close(self):
        """Release any held resources"""

    def _check_collection(self, collection: str):
        if not validate_collection(collection, self.collections):
            raise ValueError(
                f"Unknown history collection {collection!r}; expected one of {self.collections}"
            )

    @staticmethod
    def _prepare_record(record: dict) -> dict:
        """Copy a record, filling in a missing id or timestamp"""
        prepared = dict(record)
        if not prepared.get("id"):
            prepared["id"] = generate_id()
        if not prepared.get("date"):
            prepared["date"] = datetime.now().isoformat()
        return prepared

    @staticmethod
    def _newest_first(records: List[dict]) -> List[dict]:
        return sorted(
            records,
            key=lambda r: parse_date(r.get("date")) or datetime.min,
            reverse=True,
        )
