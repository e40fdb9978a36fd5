"""Firestore REST client for fetching whole collections"""

import logging
import time
import httpx
from typing import Any, Dict, List
from chronos_analytics.domain.exceptions import DataStoreError
from chronos_analytics.config import settings
from chronos_analytics.infrastructure.observability.logging import log_store_fetch
from chronos_analytics.infrastructure.observability.metrics import store_fetch_failures_counter
from chronos_analytics.utils.date_utils import normalize_timestamp

logger = logging.getLogger(__name__)


def decode_value(value: Dict[str, Any]) -> Any:
    """
    Decode a Firestore typed value into a plain Python value.

    Timestamps are normalized to aware UTC datetimes here so analyzers only
    ever see one date type.
    """
    if "nullValue" in value:
        return None
    if "stringValue" in value:
        return value["stringValue"]
    if "booleanValue" in value:
        return value["booleanValue"]
    if "integerValue" in value:
        return int(value["integerValue"])  # int64 travels as a string
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "timestampValue" in value:
        return normalize_timestamp(value["timestampValue"])
    if "arrayValue" in value:
        return [decode_value(v) for v in value["arrayValue"].get("values", [])]
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields", {}))
    if "referenceValue" in value:
        return value["referenceValue"]
    if "geoPointValue" in value:
        point = value["geoPointValue"]
        return {"latitude": point.get("latitude", 0.0), "longitude": point.get("longitude", 0.0)}
    if "bytesValue" in value:
        return value["bytesValue"]
    raise ValueError(f"Unsupported Firestore value: {sorted(value)}")


def decode_fields(fields: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    return {name: decode_value(v) for name, v in fields.items()}


def decode_document(document: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten a Firestore document into a field dict carrying its `id`"""
    record = decode_fields(document.get("fields", {}))
    record["id"] = document["name"].rsplit("/", 1)[-1]
    return record


class FirestoreClient:
    """Client for the Firestore REST documents API"""

    def __init__(
        self,
        base_url: str | None = None,
        project_id: str | None = None,
        database_id: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        page_size: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.firestore_api_base).rstrip("/")
        self.project_id = project_id or settings.firestore_project_id
        self.database_id = database_id or settings.firestore_database_id
        self.token = token if token is not None else settings.firestore_api_token
        self.timeout = timeout or settings.http_timeout_seconds
        self.page_size = page_size or settings.firestore_page_size
        self.transport = transport

    @property
    def documents_url(self) -> str:
        return f"{self.base_url}/projects/{self.project_id}/databases/{self.database_id}/documents"

    def _headers(self) -> Dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    async def fetch_all(self, collection: str) -> List[Dict[str, Any]]:
        """
        Fetch every document of a collection, following page tokens.

        A collection that does not exist yields an empty list.

        Raises:
            DataStoreError: On timeout, HTTP errors, or undecodable documents
        """
        start_time = time.time()
        records: List[Dict[str, Any]] = []
        params: Dict[str, Any] = {"pageSize": self.page_size}

        async with httpx.AsyncClient(
            timeout=self.timeout, headers=self._headers(), transport=self.transport
        ) as client:
            try:
                while True:
                    response = await client.get(f"{self.documents_url}/{collection}", params=params)
                    if response.status_code == 404:
                        break
                    response.raise_for_status()
                    data = response.json()

                    records.extend(decode_document(doc) for doc in data.get("documents", []))

                    next_token = data.get("nextPageToken")
                    if not next_token:
                        break
                    params["pageToken"] = next_token

            except httpx.TimeoutException as e:
                store_fetch_failures_counter.labels(collection=collection).inc()
                raise DataStoreError(f"Document store timeout after {self.timeout}s fetching {collection}") from e
            except httpx.HTTPStatusError as e:
                store_fetch_failures_counter.labels(collection=collection).inc()
                raise DataStoreError(
                    f"Document store error fetching {collection}: {e.response.status_code}"
                ) from e
            except httpx.RequestError as e:
                store_fetch_failures_counter.labels(collection=collection).inc()
                raise DataStoreError(f"Document store unreachable fetching {collection}: {e}") from e
            except (KeyError, ValueError, TypeError) as e:
                store_fetch_failures_counter.labels(collection=collection).inc()
                raise DataStoreError(f"Invalid document data in {collection}: {e}") from e

        log_store_fetch(collection, len(records), (time.time() - start_time) * 1000)
        return records
