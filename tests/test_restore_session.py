"""Wiring test: host traffic feeds the credential, then a restore runs."""

from __future__ import annotations

import json

import httpx
import pytest
from fakes import ID_A, ID_B, VALID_TOKEN

from archive_recovery import RestoreStatus, restore_session
from archive_recovery.config import load_config

BASE_URL = "https://example.test/backend-api"


class _Backend:
    def __init__(self, archived: list[str]) -> None:
        self.archived = list(archived)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "GET" and request.url.path.endswith("/conversations"):
            offset = int(request.url.params["offset"])
            limit = int(request.url.params["limit"])
            page = self.archived[offset : offset + limit]
            return httpx.Response(200, json={"items": [{"id": item} for item in page]})
        if request.method == "PATCH":
            conversation_id = request.url.path.rsplit("/", 1)[-1]
            assert json.loads(request.content) == {"is_archived": False}
            return httpx.Response(200, json={"success": True, "id": conversation_id})
        return httpx.Response(200, json={})


@pytest.mark.asyncio
async def test_restore_all_after_host_request(monkeypatch):
    monkeypatch.chdir("/")
    cfg = load_config(
        restore={"api_base_url": BASE_URL, "list_delay_ms": 0, "mutate_delay_ms": 0}
    )
    backend = _Backend([ID_A, ID_B])
    transport = httpx.MockTransport(backend)
    ready_events: list[str] = []

    async with (
        httpx.AsyncClient(base_url=BASE_URL, transport=transport) as host_client,
        httpx.AsyncClient(base_url=BASE_URL, transport=transport) as api_client,
        restore_session(
            cfg, host_client=host_client, api_client=api_client, confirm=lambda prompt: True
        ) as session,
    ):
        session.credentials.add_listener(lambda credential: ready_events.append(credential.value))

        not_ready = await session.orchestrator.restore_all()
        assert not_ready.status == RestoreStatus.NOT_READY
        assert backend.requests == []

        await host_client.get("/me", headers={"Authorization": VALID_TOKEN})
        outcome = await session.orchestrator.restore_all()

    assert ready_events == [VALID_TOKEN]
    assert outcome.status == RestoreStatus.COMPLETED
    assert (outcome.succeeded, outcome.total) == (2, 2)
    patched = [r.url.path.rsplit("/", 1)[-1] for r in backend.requests if r.method == "PATCH"]
    assert patched == [ID_A, ID_B]
    api_calls = [r for r in backend.requests if r.url.path != "/backend-api/me"]
    assert all(r.headers["authorization"] == VALID_TOKEN for r in api_calls)
