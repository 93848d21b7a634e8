"""
Bill history - stores and reloads calculation results through a HistoryStore
"""
import logging
from typing import Dict, List, Optional

from config import settings
from models.errors import StorageError
from models.results import ElectricityBillResult, WaterBillResult
from storage.api_store import ApiHistoryStore
from storage.database import DuckDBHistoryStore
from storage.history_store import HistoryStore
from storage.json_store import JsonFileHistoryStore

logger = logging.getLogger(__name__)


def create_history_store(backend: Optional[str] = None) -> HistoryStore:
    """
    Select the history backend once at startup.

    'api' and 'duckdb' fall back to the local JSON store when the backend
    cannot be reached or opened.
    """
    backend = (backend or settings.HISTORY_BACKEND).strip().lower()

    if backend == "json":
        return JsonFileHistoryStore()

    if backend == "api":
        store = ApiHistoryStore()
        if store.is_available():
            logger.info("Using history API at %s", store.api_url)
            return store
        store.close()
    elif backend == "duckdb":
        try:
            store = DuckDBHistoryStore()
            logger.info("Using history database at %s", store.db_path)
            return store
        except StorageError as e:
            logger.warning("History database unavailable: %s", e)
    else:
        raise ValueError(f"Unknown history backend {backend!r}; expected json, duckdb or api")

    logger.warning("Falling back to local history files in %s", settings.HISTORY_PATH)
    return JsonFileHistoryStore()


class BillHistory:
    """
    Saves water and electricity results and loads them back as result
    objects, newest first.
    """

    def __init__(self, store: HistoryStore):
        self.store = store

    def _load(self, collection: str, result_type) -> list:
        results = []
        for record in self.store.list(collection):
            try:
                results.append(result_type.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(
                    "Skipping unreadable %s history record %s: %s",
                    collection, record.get("id", "<no id>"), e,
                )
        return results

    def water_history(self) -> List[WaterBillResult]:
        return self._load(settings.WATER_COLLECTION, WaterBillResult)

    def electricity_history(self) -> List[ElectricityBillResult]:
        return self._load(settings.ELECTRICITY_COLLECTION, ElectricityBillResult)

    def add_water_result(self, result: WaterBillResult) -> dict:
        """Persist a water result; returns the stored record"""
        return self.store.insert(settings.WATER_COLLECTION, result.to_dict())

    def add_electricity_result(self, result: ElectricityBillResult) -> dict:
        """Persist an electricity result; returns the stored record"""
        return self.store.insert(settings.ELECTRICITY_COLLECTION, result.to_dict())

    def add_result(self, result) -> dict:
        if isinstance(result, WaterBillResult):
            return self.add_water_result(result)
        if isinstance(result, ElectricityBillResult):
            return self.add_electricity_result(result)
        raise TypeError(f"Unsupported result type: {type(result).__name__}")

    def delete_water_result(self, result_id: str) -> bool:
        return self.store.delete_by_id(settings.WATER_COLLECTION, result_id)

    def delete_electricity_result(self, result_id: str) -> bool:
        return self.store.delete_by_id(settings.ELECTRICITY_COLLECTION, result_id)

    def clear_all(self) -> Dict[str, int]:
        deleted = self.store.clear_all()
        logger.info("Cleared bill history: %s", deleted)
        return deleted
