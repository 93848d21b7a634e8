"""
Remote history store backed by the bill history REST API
"""
import logging
from typing import Dict, List

import requests

from config import settings
from models.errors import StorageError
from storage.history_store import HistoryStore

logger = logging.getLogger(__name__)

# Collection -> API route
ROUTES = {
    settings.WATER_COLLECTION: "water-bills",
    settings.ELECTRICITY_COLLECTION: "electricity-bills",
}

# Keys used by the API's clear-all response
CLEAR_ALL_KEYS = {
    settings.WATER_COLLECTION: "waterBills",
    settings.ELECTRICITY_COLLECTION: "electricityBills",
}


class ApiHistoryStore(HistoryStore):
    """
    Client for the history API:

        GET    /health
        GET    /water-bills            POST /water-bills
        DELETE /water-bills/{id}
        (same for /electricity-bills)
        DELETE /clear-all

    Responses are JSON envelopes of the form {"success": bool, "data": ...}.
    """

    def __init__(self, api_url: str = None, timeout: float = None, session: requests.Session = None):
        self.api_url = (api_url or settings.HISTORY_API_URL).rstrip("/")
        self.timeout = timeout or settings.HISTORY_API_TIMEOUT
        self.session = session or requests.Session()

    def _url(self, *parts: str) -> str:
        return "/".join([self.api_url, *parts])

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise StorageError(f"History API request {method} {url} failed: {e}") from e

    @staticmethod
    def _payload(response: requests.Response, action: str) -> dict:
        try:
            body = response.json()
        except ValueError as e:
            raise StorageError(f"History API returned invalid JSON while trying to {action}") from e

        if not response.ok or not body.get("success", False):
            message = body.get("message") or response.reason
            raise StorageError(f"History API failed to {action}: {message}")
        return body

    def is_available(self) -> bool:
        """Check the API health endpoint"""
        try:
            response = self.session.get(self._url("health"), timeout=self.timeout)
            return response.ok and response.json().get("status") == "ok"
        except (requests.RequestException, ValueError):
            logger.warning("History API at %s is not reachable", self.api_url)
            return False

    def list(self, collection: str) -> List[dict]:
        self._check_collection(collection)
        response = self._request("GET", self._url(ROUTES[collection]))
        records = self._payload(response, f"fetch {collection} bills").get("data") or []
        return self._newest_first(records)

    def insert(self, collection: str, record: dict) -> dict:
        self._check_collection(collection)
        stored = self._prepare_record(record)
        response = self._request("POST", self._url(ROUTES[collection]), json=stored)
        data = self._payload(response, f"add {collection} bill").get("data") or {}
        return {**stored, **data}

    def delete_by_id(self, collection: str, record_id: str) -> bool:
        self._check_collection(collection)
        response = self._request("DELETE", self._url(ROUTES[collection], record_id))
        if response.status_code == 404:
            return False
        self._payload(response, f"delete {collection} bill {record_id}")
        return True

    def clear_all(self) -> Dict[str, int]:
        response = self._request("DELETE", self._url("clear-all"))
        deleted = self._payload(response, "clear history").get("deleted") or {}
        return {
            collection: int(deleted.get(key, 0))
            for collection, key in CLEAR_ALL_KEYS.items()
        }

    def close(self):
        self.session.close()
