"""Tests for status hierarchy endpoints and the default seed."""

from datetime import timedelta

import pytest

from app.core.seed import seed_status_hierarchy
from app.services.status_hierarchy import DEFAULT_STATUS_HIERARCHY, get_status_hierarchy


@pytest.mark.asyncio
async def test_seed_inserts_defaults_once(session_factory):
    await seed_status_hierarchy(session_factory)
    await seed_status_hierarchy(session_factory)

    async with session_factory() as db:
        rows = await get_status_hierarchy(db)
    assert len(rows) == len(DEFAULT_STATUS_HIERARCHY)

    rnr = next(row for row in rows if row.status_name == "RNR")
    assert rnr.next_statuses == "Interested;Reject - RNR"
    assert rnr.days_limit == 6
    assert rnr.auto_move_to == "Reject - RNR"


@pytest.mark.asyncio
async def test_list_statuses(client, status_hierarchy, make_user):
    _, headers = await make_user("Analyst")

    resp = await client.get("/api/v1/status-hierarchy/", headers=headers)

    assert resp.status_code == 200
    by_name = {row["statusName"]: row for row in resp.json()}
    assert by_name["Call Back"]["nextStatuses"] == ["Interested", "Reject - Not Attend"]
    assert by_name["Call Back"]["daysLimit"] == 6
    assert by_name["Approved"]["nextStatuses"] == []
    assert by_name["Approved"]["autoMoveTo"] is None


@pytest.mark.asyncio
async def test_create_status_and_use_it(client, status_hierarchy, make_user, make_lead):
    _, headers = await make_user("Admin")

    resp = await client.post("/api/v1/status-hierarchy/", headers=headers, json={
        "statusName": "On Hold",
        "nextStatuses": "Interested; Final Reject",
        "daysLimit": 14,
        "autoMoveTo": "Final Reject",
    })

    assert resp.status_code == 201
    assert resp.json()["nextStatuses"] == ["Interested", "Final Reject"]

    lead = await make_lead("On Hold")
    resp = await client.get(f"/api/v1/leads/{lead.id}/available-transitions", headers=headers)
    assert resp.json() == {"availableTransitions": ["Interested", "Final Reject"]}


@pytest.mark.asyncio
async def test_create_status_rejects_unknown_auto_move_target(client, status_hierarchy, make_user):
    _, headers = await make_user("Admin")

    resp = await client.post("/api/v1/status-hierarchy/", headers=headers, json={
        "statusName": "On Hold",
        "nextStatuses": ["Interested"],
        "daysLimit": 14,
        "autoMoveTo": "Nowhere",
    })

    assert resp.status_code == 400
    assert "Nowhere" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_create_duplicate_status(client, status_hierarchy, make_user):
    _, headers = await make_user("Admin")
    resp = await client.post("/api/v1/status-hierarchy/", headers=headers, json={"statusName": "RNR"})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_update_and_delete_status(client, status_hierarchy, make_user):
    _, headers = await make_user("Admin")
    statuses = (await client.get("/api/v1/status-hierarchy/", headers=headers)).json()
    rnr = next(row for row in statuses if row["statusName"] == "RNR")

    resp = await client.put(f"/api/v1/status-hierarchy/{rnr['id']}", headers=headers, json={"daysLimit": 3})
    assert resp.status_code == 200
    assert resp.json()["daysLimit"] == 3
    assert resp.json()["autoMoveTo"] == "Reject - RNR"

    resp = await client.put(
        f"/api/v1/status-hierarchy/{rnr['id']}", headers=headers, json={"autoMoveTo": None}
    )
    assert resp.status_code == 400

    resp = await client.delete(f"/api/v1/status-hierarchy/{rnr['id']}", headers=headers)
    assert resp.status_code == 200

    resp = await client.delete(f"/api/v1/status-hierarchy/{rnr['id']}", headers=headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_status_edits_are_admin_only(client, status_hierarchy, make_user):
    _, headers = await make_user("Manager")
    resp = await client.post("/api/v1/status-hierarchy/", headers=headers, json={"statusName": "X"})
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_reinitialize_restores_defaults(client, status_hierarchy, make_user):
    _, headers = await make_user("Admin")
    statuses = (await client.get("/api/v1/status-hierarchy/", headers=headers)).json()
    for row in statuses[:5]:
        await client.delete(f"/api/v1/status-hierarchy/{row['id']}", headers=headers)

    resp = await client.post("/api/v1/status-hierarchy/reinitialize", headers=headers)

    assert resp.status_code == 200
    assert len(resp.json()["statusHierarchy"]) == len(DEFAULT_STATUS_HIERARCHY)


@pytest.mark.asyncio
async def test_delete_auto_move_target_is_rejected(client, status_hierarchy, make_user, make_lead):
    _, headers = await make_user("Admin")
    statuses = (await client.get("/api/v1/status-hierarchy/", headers=headers)).json()
    target = next(row for row in statuses if row["statusName"] == "Reject - RNR")

    resp = await client.delete(f"/api/v1/status-hierarchy/{target['id']}", headers=headers)

    assert resp.status_code == 400
    assert "RNR" in resp.json()["detail"]

    lead = await make_lead("RNR", idle=timedelta(days=30))
    resp = await client.post("/api/v1/status-engine/process-automatic", headers=headers)
    assert resp.json()["moved"] == 1
    resp = await client.get(f"/api/v1/leads/{lead.id}/available-transitions", headers=headers)
    assert resp.json() == {"availableTransitions": []}


@pytest.mark.asyncio
async def test_rename_auto_move_target_is_rejected(client, status_hierarchy, make_user):
    _, headers = await make_user("Admin")
    statuses = (await client.get("/api/v1/status-hierarchy/", headers=headers)).json()
    target = next(row for row in statuses if row["statusName"] == "Reject - Not Attend")

    resp = await client.put(
        f"/api/v1/status-hierarchy/{target['id']}", headers=headers, json={"statusName": "Reject - No Show"}
    )
    assert resp.status_code == 400
    assert "Call Back" in resp.json()["detail"]

    resp = await client.put(
        f"/api/v1/status-hierarchy/{target['id']}", headers=headers, json={"nextStatuses": []}
    )
    assert resp.status_code == 200
