"""Tests for cases API: intake, actions, conflicts, listing, packet, error mapping."""

from httpx import AsyncClient


RESIDENT_BODY = {
    "name": "Jane Resident",
    "email": "jane@phillipston.org",
    "requestText": "Conservation commission minutes, 2025",
    "legalNoticeAccepted": True,
}


async def _create(async_client: AsyncClient, body=None, headers=None) -> dict:
    r = await async_client.post("/cases/", json=body or RESIDENT_BODY, headers=headers or {})
    assert r.status_code == 201, r.text
    return r.json()


async def test_resident_submission_returns_created_case(async_client: AsyncClient):
    data = await _create(async_client)
    assert data["caseId"].startswith("PRR-2026-")
    assert data["status"] == "S100_INTAKE"
    assert data["environment"] == "PHILLIPSTON"
    assert data["module"] == "PRR"
    assert data["deadlines"]["t10"].startswith("2026-02-16T14:30:00")
    assert data["auditLog"][0]["action"] == "submitted"
    assert data["auditLog"][0]["actor"] == "resident"
    assert data["businessDaysRemaining"] == 10
    assert data["isOverdue"] is False
    assert data["version"] == 1


async def test_staff_intake_uses_actor_header(async_client: AsyncClient, staff_headers):
    body = {
        "name": "Sam Walk-in",
        "requestText": "Zoning board decisions",
        "channel": "IN_PERSON",
        "receivedOn": "2026-02-06",
    }
    data = await _create(async_client, body, headers=staff_headers)
    assert data["intake"]["receivedAt"].startswith("2026-02-06T12:00:00")
    assert data["deadlines"]["t10"].startswith("2026-02-20")
    assert data["auditLog"][0] == {
        "at": "2026-02-02T14:30:00Z",
        "actor": "clerk@phillipston.org",
        "action": "intake_created",
        "detail": None,
    }


async def test_domain_validation_error_returns_422(async_client: AsyncClient):
    r = await async_client.post("/cases/", json={**RESIDENT_BODY, "name": "J"})
    assert r.status_code == 422
    assert "name" in r.json()["detail"]


async def test_schema_error_returns_422(async_client: AsyncClient):
    r = await async_client.post("/cases/", json={"name": "Jane Resident"})
    assert r.status_code == 422


async def test_get_case(async_client: AsyncClient):
    created = await _create(async_client)
    r = await async_client.get(f"/cases/{created['caseId']}")
    assert r.status_code == 200
    assert r.json()["caseId"] == created["caseId"]


async def test_get_unknown_case_returns_404(async_client: AsyncClient):
    r = await async_client.get("/cases/PRR-2026-ZZZZ")
    assert r.status_code == 404
    assert "detail" in r.json()


async def test_record_action_advances_status(async_client: AsyncClient):
    created = await _create(async_client)
    r = await async_client.post(
        f"/cases/{created['caseId']}/actions",
        json={"action": "assessment_started", "status": "S300_ASSESSMENT", "expectedVersion": 1},
        headers={"X-Actor": "clerk"},
    )
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "S300_ASSESSMENT"
    assert data["version"] == 2
    assert [e["action"] for e in data["auditLog"]] == ["submitted", "assessment_started"]
    assert data["auditLog"][1]["actor"] == "clerk"
    assert data["deadlines"] == created["deadlines"]


async def test_illegal_transition_returns_409(async_client: AsyncClient):
    created = await _create(async_client)
    r = await async_client.post(
        f"/cases/{created['caseId']}/actions",
        json={"action": "reopen", "status": "S000_CREATED"},
    )
    assert r.status_code == 409


async def test_stale_version_returns_409(async_client: AsyncClient):
    created = await _create(async_client)
    url = f"/cases/{created['caseId']}/actions"
    assert (await async_client.post(url, json={"action": "note", "expectedVersion": 1})).status_code == 200
    r = await async_client.post(url, json={"action": "note", "expectedVersion": 1})
    assert r.status_code == 409


async def test_action_on_unknown_case_returns_404(async_client: AsyncClient):
    r = await async_client.post("/cases/PRR-2026-ZZZZ/actions", json={"action": "note"})
    assert r.status_code == 404


async def test_correct_requester(async_client: AsyncClient):
    created = await _create(async_client)
    r = await async_client.patch(
        f"/cases/{created['caseId']}/requester",
        json={"requester": {"name": "Janet Resident", "phone": "978-555-0101"}},
    )
    assert r.status_code == 200
    data = r.json()
    assert data["requester"]["name"] == "Janet Resident"
    assert data["auditLog"][-1]["action"] == "requester_corrected"
    assert data["auditLog"][-1]["actor"] == "staff"


async def test_add_attachments(async_client: AsyncClient):
    created = await _create(async_client)
    r = await async_client.post(
        f"/cases/{created['caseId']}/attachments",
        json={"attachments": [{"name": "responsive-records.zip", "size": 4096}]},
    )
    assert r.status_code == 200
    assert r.json()["attachments"][0]["name"] == "responsive-records.zip"


async def test_list_cases_with_status_filter(async_client: AsyncClient):
    first = await _create(async_client)
    second = await _create(async_client, {**RESIDENT_BODY, "requestText": "Town meeting warrant 2025"})
    await async_client.post(
        f"/cases/{second['caseId']}/actions",
        json={"action": "closed", "status": "S900_CLOSED"},
    )

    r = await async_client.get("/cases/")
    assert r.status_code == 200
    assert {c["caseId"] for c in r.json()} == {first["caseId"], second["caseId"]}

    r = await async_client.get("/cases/", params={"status": "S900_CLOSED"})
    assert [c["caseId"] for c in r.json()] == [second["caseId"]]

    r = await async_client.get("/cases/", params={"overdue": "true"})
    assert r.json() == []


async def test_packet_is_markdown(async_client: AsyncClient):
    created = await _create(async_client)
    r = await async_client.get(f"/cases/{created['caseId']}/packet")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/markdown")
    assert r.text.startswith("---\n")
    assert f"**Case ID:** {created['caseId']}" in r.text
    assert r.headers["X-Archive-Path"].endswith(f"/PRR/{created['caseId']}/{created['caseId']}.md")
    assert f'filename="{created["caseId"]}.md"' in r.headers["Content-Disposition"]
