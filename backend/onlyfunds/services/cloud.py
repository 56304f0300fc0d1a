"""
Client for the optional cloud backend (Appwrite-compatible REST API).

Documents keep the record's own id in an "id" attribute; the backend's
document id is separate, so lookups by record id go through a query.
"""

import json
from typing import Any, Dict, List, Optional

import httpx

from onlyfunds.config import settings, Settings


class CloudSyncError(Exception):
    """The cloud backend rejected a request or could not be reached."""


def equal_query(attribute: str, value: Any) -> str:
    return json.dumps({"method": "equal", "attribute": attribute, "values": [value]})


def order_desc_query(attribute: str) -> str:
    return json.dumps({"method": "orderDesc", "attribute": attribute})


class CloudClient:

    def __init__(self, config: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config or settings
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return self.config.cloud_configured

    @property
    def transactions_collection(self) -> str:
        return self.config.cloud_transactions_collection_id

    @property
    def budgets_collection(self) -> str:
        return self.config.cloud_budgets_collection_id

    def _client(self) -> httpx.AsyncClient:
        headers = {
            "X-Appwrite-Project": self.config.cloud_project_id or "",
            "Content-Type": "application/json",
        }
        if self.config.cloud_api_key:
            headers["X-Appwrite-Key"] = self.config.cloud_api_key
        return httpx.AsyncClient(
            base_url=self.config.cloud_endpoint.rstrip("/"),
            headers=headers,
            timeout=self.config.cloud_timeout,
            transport=self._transport,
        )

    def _documents_path(self, collection: str) -> str:
        return f"/databases/{self.config.cloud_database_id}/collections/{collection}/documents"

    async def _request(self, method: str, path: str, **kwargs) -> Optional[Dict[str, Any]]:
        try:
            async with self._client() as client:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise CloudSyncError(
                f"{method} {path} failed with status {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise CloudSyncError(f"{method} {path} failed: {e}") from e

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def create_document(self, collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request(
            "POST",
            self._documents_path(collection),
            json={"documentId": "unique()", "data": data},
        )

    async def list_documents(self, collection: str, queries: List[str]) -> List[Dict[str, Any]]:
        result = await self._request(
            "GET",
            self._documents_path(collection),
            params=[("queries[]", q) for q in queries],
        )
        return (result or {}).get("documents", [])

    async def find_document(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        documents = await self.list_documents(collection, [equal_query("id", record_id)])
        return documents[0] if documents else None

    async def update_document(self, collection: str, document_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request(
            "PATCH",
            f"{self._documents_path(collection)}/{document_id}",
            json={"data": data},
        )

    async def delete_document(self, collection: str, document_id: str) -> None:
        await self._request("DELETE", f"{self._documents_path(collection)}/{document_id}")

    async def list_user_documents(self, collection: str, user_id: str) -> List[Dict[str, Any]]:
        return await self.list_documents(
            collection,
            [equal_query("userId", user_id), order_desc_query("createdAt")],
        )


_cloud_client: Optional[CloudClient] = None


def get_cloud_client() -> CloudClient:
    global _cloud_client
    if _cloud_client is None:
        _cloud_client = CloudClient()
    return _cloud_client
