"""
HTTP adapters for the profile editor.

HttpCollectionGateway saves one collection with a single full-replace PUT.
HttpProfileClient loads the signed-in user's profile and hands out gateways.
Both take an httpx.Client already configured with base URL and credentials.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from src.components.editor.models import GatewayResult
from src.domain.collections import COLLECTION_TYPES, CollectionType, parse_items

logger = logging.getLogger(__name__)

# Status codes meaning the server refused the content, not the transport.
REJECTED_STATUSES = frozenset({400, 409, 422})


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"Server returned {response.status_code}"

    if isinstance(body, dict):
        message = body.get("message") or body.get("detail")
        if isinstance(message, str):
            return message
        if isinstance(message, list) and message:
            first = message[0]
            if isinstance(first, dict) and "msg" in first:
                return str(first["msg"])
            return str(first)
    return f"Server returned {response.status_code}"


class HttpCollectionGateway:
    """PersistenceGateway over `PUT {base_path}/{collection}`."""

    def __init__(
        self,
        client: httpx.Client,
        collection: CollectionType,
        base_path: str = "/api/profile",
    ) -> None:
        self._client = client
        self.collection = collection
        self._url = f"{base_path.rstrip('/')}/{collection}"

    def replace_all(self, items: Sequence[BaseModel]) -> GatewayResult:
        payload = {self.collection: [item.model_dump(mode="json") for item in items]}

        try:
            response = self._client.put(self._url, json=payload)
        except httpx.HTTPError as e:
            logger.warning("PUT %s failed: %s", self._url, e)
            return GatewayResult.failure(f"Network error: {e}")

        if response.status_code in REJECTED_STATUSES:
            return GatewayResult.failure(_error_message(response), rejected=True)
        if response.is_error:
            return GatewayResult.failure(_error_message(response))

        try:
            body = response.json()
        except ValueError:
            return GatewayResult.failure("Server returned an invalid response")
        if not isinstance(body, dict):
            return GatewayResult.failure("Server returned an invalid response")

        if not body.get("success", False):
            return GatewayResult.failure(body.get("message") or "Save failed", rejected=True)

        data = body.get("data") or {}
        if not isinstance(data, dict):
            return GatewayResult.failure("Server returned an invalid response")

        raw = data.get(self.collection)
        if raw is None:
            return GatewayResult.ok(message=body.get("message"))
        if not isinstance(raw, list):
            return GatewayResult.failure("Server returned an invalid response")

        try:
            saved = parse_items(self.collection, raw)
        except ValidationError as e:
            logger.warning("Unreadable %s echo from server: %s", self.collection, e)
            return GatewayResult.ok(message=body.get("message"))
        return GatewayResult.ok(items=saved, message=body.get("message"))


class HttpProfileClient:
    """Reads the signed-in user's profile and builds per-collection gateways."""

    def __init__(self, client: httpx.Client, base_path: str = "/api/profile") -> None:
        self._client = client
        self._base_path = base_path.rstrip("/")

    def fetch_profile(self) -> dict[str, Any]:
        response = self._client.get(f"{self._base_path}/me")
        response.raise_for_status()
        return response.json()["data"]

    def fetch_collections(self) -> dict[CollectionType, list[BaseModel]]:
        data = self.fetch_profile()
        return {
            collection: parse_items(collection, data.get(collection) or [])
            for collection in COLLECTION_TYPES
        }

    def gateway(self, collection: CollectionType) -> HttpCollectionGateway:
        return HttpCollectionGateway(self._client, collection, base_path=self._base_path)
