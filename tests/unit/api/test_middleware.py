"""Tests for middleware: correlation ID echo, request audit line."""

import logging

from httpx import AsyncClient


async def test_correlation_id_generated_when_absent(async_client: AsyncClient):
    r = await async_client.get("/cases/")
    assert r.status_code == 200
    assert len(r.headers["X-Correlation-ID"]) > 0


async def test_request_audit_tags_case_id(async_client: AsyncClient, caplog):
    caplog.set_level(logging.INFO, logger="prr_engine.api.middleware")
    await async_client.get("/cases/PRR-2026-ZZZZ", headers={"X-Actor": "clerk"})
    audit = [r for r in caplog.records if r.getMessage() == "request_audit"]
    assert audit
    assert audit[-1].case_id == "PRR-2026-ZZZZ"
    assert audit[-1].status_code == 404
    assert audit[-1].method == "GET"


async def test_request_audit_without_case(async_client: AsyncClient, caplog):
    caplog.set_level(logging.INFO, logger="prr_engine.api.middleware")
    await async_client.get("/health")
    audit = [r for r in caplog.records if r.getMessage() == "request_audit"]
    assert audit[-1].case_id is None
