"""
User service client tests using httpx.MockTransport.
"""

from __future__ import annotations

import json
import uuid

import httpx
import pytest

from projectservice.core.errors import UserServiceError
from projectservice.services.users import UserServiceClient


def _client(handler) -> UserServiceClient:
    return UserServiceClient("http://users.test/", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_get_users():
    alice = uuid.uuid4()
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path, json.loads(request.content)))
        return httpx.Response(
            200,
            json={"users": [{"id": str(alice), "first_name": "Alice", "last_name": "A", "email": "alice@example.com"}]},
        )

    client = _client(handler)
    users = await client.get_users([alice, alice, uuid.uuid4()])
    await client.close()

    assert [(u.id, u.first_name) for u in users] == [(alice, "Alice")]
    method, path, body = seen[0]
    assert (method, path) == ("POST", "/users/batch")
    assert len(body["ids"]) == 2


@pytest.mark.asyncio
async def test_get_users_by_email():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/users/by-email"
        assert json.loads(request.content) == {"emails": ["bob@example.com"]}
        return httpx.Response(200, json={"users": []})

    client = _client(handler)
    assert await client.get_users_by_email(["bob@example.com"]) == []
    await client.close()


@pytest.mark.asyncio
async def test_empty_input_makes_no_request():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    client = _client(handler)
    assert await client.get_users([]) == []
    assert await client.get_users_by_email([]) == []
    await client.close()


@pytest.mark.asyncio
async def test_error_status_raises():
    client = _client(lambda request: httpx.Response(503))
    with pytest.raises(UserServiceError) as exc_info:
        await client.get_users([uuid.uuid4()])
    await client.close()
    assert exc_info.value.status_code == 502
    assert exc_info.value.error_code.code == "0804"


@pytest.mark.asyncio
async def test_transport_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client = _client(handler)
    with pytest.raises(UserServiceError):
        await client.get_users_by_email(["bob@example.com"])
    await client.close()


@pytest.mark.asyncio
async def test_malformed_body_raises():
    client = _client(lambda request: httpx.Response(200, json={"unexpected": True}))
    with pytest.raises(UserServiceError):
        await client.get_users([uuid.uuid4()])
    await client.close()
