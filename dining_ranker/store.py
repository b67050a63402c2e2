import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from .errors import AttributeStoreError
from .schemas import BusinessAttributes

logger = logging.getLogger(__name__)


class AttributeStore(ABC):
    """Persistent storage for business attributes."""

    @abstractmethod
    async def get(self, business_id: str) -> Optional[BusinessAttributes]:
        """Return stored attributes, or None if nothing is stored."""
        pass

    @abstractmethod
    async def put(self, business_id: str, attributes: BusinessAttributes) -> None:
        pass

    async def batch_get(self, business_ids: list[str]) -> dict[str, BusinessAttributes]:
        """Fetch several businesses. Missing ids are left out of the result."""
        found = {}
        for business_id in business_ids:
            attributes = await self.get(business_id)
            if attributes is not None:
                found[business_id] = attributes
        return found

    async def batch_put(self, attributes_by_id: dict[str, BusinessAttributes]) -> None:
        for business_id, attributes in attributes_by_id.items():
            await self.put(business_id, attributes)

    async def aclose(self) -> None:
        pass


class InMemoryAttributeStore(AttributeStore):
    """Dict-backed store for tests and the CLI."""

    def __init__(self, initial: Optional[dict[str, BusinessAttributes]] = None):
        self._data: dict[str, BusinessAttributes] = dict(initial or {})

    async def get(self, business_id: str) -> Optional[BusinessAttributes]:
        return self._data.get(business_id)

    async def put(self, business_id: str, attributes: BusinessAttributes) -> None:
        self._data[business_id] = attributes

    def __contains__(self, business_id: str) -> bool:
        return business_id in self._data

    def __len__(self) -> int:
        return len(self._data)


class HttpAttributeStore(AttributeStore):
    """Attribute store served over HTTP.

    Endpoints (relative to base_url):
        GET  /attributes/{id}         -> attributes JSON, 404 if absent
        PUT  /attributes/{id}         <- attributes JSON
        POST /attributes/batch-get    <- {"ids": [...]} -> {"attributes": {id: {...}}}
        POST /attributes/batch-put    <- {"attributes": {id: {...}}}
    """

    def __init__(self, base_url: str, timeout: float = 10.0, client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def get(self, business_id: str) -> Optional[BusinessAttributes]:
        try:
            response = await self._client.get(f"{self.base_url}/attributes/{business_id}")
            if response.status_code == 404:
                return None
            response.raise_for_status()
            return BusinessAttributes.model_validate(response.json())
        except (httpx.HTTPError, ValueError) as e:
            raise AttributeStoreError(f"Failed to load attributes for {business_id}: {e}") from e

    async def batch_get(self, business_ids: list[str]) -> dict[str, BusinessAttributes]:
        if not business_ids:
            return {}
        try:
            response = await self._client.post(
                f"{self.base_url}/attributes/batch-get",
                json={"ids": business_ids},
            )
            response.raise_for_status()
            payload = response.json().get("attributes", {})
            return {
                business_id: BusinessAttributes.model_validate(data)
                for business_id, data in payload.items()
            }
        except (httpx.HTTPError, ValueError) as e:
            raise AttributeStoreError(f"Batch load of {len(business_ids)} businesses failed: {e}") from e

    async def put(self, business_id: str, attributes: BusinessAttributes) -> None:
        try:
            response = await self._client.put(
                f"{self.base_url}/attributes/{business_id}",
                json=attributes.model_dump(mode="json", by_alias=True),
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise AttributeStoreError(f"Failed to save attributes for {business_id}: {e}") from e

    async def batch_put(self, attributes_by_id: dict[str, BusinessAttributes]) -> None:
        if not attributes_by_id:
            return
        body = {
            business_id: attributes.model_dump(mode="json", by_alias=True)
            for business_id, attributes in attributes_by_id.items()
        }
        try:
            response = await self._client.post(
                f"{self.base_url}/attributes/batch-put",
                json={"attributes": body},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise AttributeStoreError(f"Batch save of {len(body)} businesses failed: {e}") from e

    async def aclose(self) -> None:
        await self._client.aclose()
