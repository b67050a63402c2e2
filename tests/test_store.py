from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from dining_ranker.errors import AttributeStoreError
from dining_ranker.schemas import BusinessAttributes
from dining_ranker.store import HttpAttributeStore, InMemoryAttributeStore


BASE_URL = "http://store.test"


def make_store(handler) -> HttpAttributeStore:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpAttributeStore(BASE_URL, client=client)


def test_in_memory_round_trip():
    async def scenario():
        store = InMemoryAttributeStore()
        attributes = BusinessAttributes(cuisine_types=["thai"])
        await store.batch_put({"a": attributes})
        assert await store.get("a") == attributes
        assert await store.get("missing") is None
        assert await store.batch_get(["a", "missing"]) == {"a": attributes}

    asyncio.run(scenario())


def test_http_get_parses_camel_case_payload():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/attributes/p1"
        return httpx.Response(200, json={"cuisineTypes": ["sushi"], "priceLevel": 3, "source": "manual"})

    attributes = asyncio.run(make_store(handler).get("p1"))
    assert attributes.cuisine_types == ["sushi"]
    assert attributes.price_level == 3
    assert attributes.source == "manual"


def test_http_get_missing_returns_none():
    store = make_store(lambda request: httpx.Response(404))
    assert asyncio.run(store.get("nope")) is None


def test_http_batch_get():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/attributes/batch-get"
        assert json.loads(request.content) == {"ids": ["a", "b"]}
        return httpx.Response(200, json={"attributes": {"a": {"cuisineTypes": ["thai"]}}})

    found = asyncio.run(make_store(handler).batch_get(["a", "b"]))
    assert list(found) == ["a"]
    assert found["a"].cuisine_types == ["thai"]


def test_http_batch_put_sends_camel_case():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(204)

    asyncio.run(make_store(handler).batch_put({"a": BusinessAttributes(cuisine_types=["thai"], price_level=1)}))

    assert seen["path"] == "/attributes/batch-put"
    body = seen["body"]["attributes"]["a"]
    assert body["cuisineTypes"] == ["thai"]
    assert body["priceLevel"] == 1


def test_http_errors_become_store_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    with pytest.raises(AttributeStoreError):
        asyncio.run(make_store(handler).batch_get(["a"]))
    with pytest.raises(AttributeStoreError):
        asyncio.run(make_store(handler).put("a", BusinessAttributes()))


def test_http_transport_failure_becomes_store_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(AttributeStoreError):
        asyncio.run(make_store(handler).get("a"))


def test_http_malformed_payload_becomes_store_error():
    store = make_store(lambda request: httpx.Response(200, json={"priceLevel": 9}))
    with pytest.raises(AttributeStoreError):
        asyncio.run(store.get("a"))
