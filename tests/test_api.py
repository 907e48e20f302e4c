# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Health, reconfigure and rate-limit tests."""

import logging

import pytest
from httpx import AsyncClient

from hub_redirector import main, rate_limit
from hub_redirector.routers import token as token_router


async def test_health(client: AsyncClient):
    r = await client.get("/api/v1/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


async def test_api_info(client: AsyncClient):
    r = await client.get("/api/v1")
    assert r.status_code == 200
    assert r.json()["name"] == "Hub Redirector"


async def test_reconfigure_not_implemented(client: AsyncClient):
    r = await client.post(
        "/api/v1/reconfigure",
        json={"key": "1234567890", "signature": "sig", "payload": "{}"},
    )
    assert r.status_code == 501
    assert r.text == "Not Implemented"

    # The server keeps answering afterwards
    r = await client.post("/api/v1/reconfigure")
    assert r.status_code == 501


async def test_token_rate_limit(client: AsyncClient, monkeypatch):
    monkeypatch.setattr(rate_limit, "LIMITS", {"/api/v1/token": 2})
    assert (await client.get("/api/v1/token")).status_code == 200
    assert (await client.get("/api/v1/token")).status_code == 200
    r = await client.get("/api/v1/token")
    assert r.status_code == 429


async def test_rate_limit_is_per_client(make_client, monkeypatch):
    monkeypatch.setattr(rate_limit, "LIMITS", {"/api/v1/token": 1})
    assert (await make_client("192.0.2.1").get("/api/v1/token")).status_code == 200
    assert (await make_client("192.0.2.1").get("/api/v1/token")).status_code == 429
    assert (await make_client("192.0.2.2").get("/api/v1/token")).status_code == 200


def test_stale_rate_limit_buckets_are_dropped():
    rate_limit._buckets[("192.0.2.1", "/api/v1/token")] = [10.0]
    rate_limit._buckets[("192.0.2.2", "/api/v1/token")] = [10.0, 990.0]
    rate_limit._prune_stale(1000.0)
    assert ("192.0.2.1", "/api/v1/token") not in rate_limit._buckets
    assert rate_limit._buckets[("192.0.2.2", "/api/v1/token")] == [990.0]


async def test_request_logged_when_handler_raises(client: AsyncClient, monkeypatch, caplog):
    async def broken(db):
        raise RuntimeError("boom")

    monkeypatch.setattr(token_router, "issue_token", broken)
    caplog.set_level(logging.INFO, logger=main.__name__)
    with pytest.raises(Exception):
        await client.get("/api/v1/token")
    assert any(
        r.name == main.__name__ and "GET /api/v1/token failed" in r.getMessage()
        for r in caplog.records
    )
