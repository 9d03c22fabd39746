"""Tests for sleep logs API: create, update, paginated list, routine ownership."""

import pytest
from httpx import AsyncClient


async def _routine(client: AsyncClient, headers: dict, name: str = "Weekday") -> str:
    resp = await client.post("/api/v1/routines", json={"name": name}, headers=headers)
    assert resp.status_code == 201
    return resp.json()["data"]["id"]


async def _log(client: AsyncClient, headers: dict, **body) -> str:
    resp = await client.post("/api/v1/sleep-logs", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]["id"]


async def _list(client: AsyncClient, headers: dict, query: str = "") -> dict:
    resp = await client.get(f"/api/v1/sleep-logs{query}", headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


@pytest.mark.asyncio
async def test_create_sleep_log_without_routine(client: AsyncClient, auth_headers: dict):
    resp = await client.post("/api/v1/sleep-logs", json={}, headers=auth_headers)
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    log_id = body["data"]["id"]

    data = await _list(client, auth_headers)
    assert [item["id"] for item in data["items"]] == [log_id]
    # sleep_date defaults to creation time
    assert data["items"][0]["sleep_date"] is not None
    assert data["items"][0]["routine_id"] is None


@pytest.mark.asyncio
async def test_create_sleep_log_with_own_routine(client: AsyncClient, auth_headers: dict):
    rid = await _routine(client, auth_headers)
    await _log(
        client,
        auth_headers,
        routine_id=rid,
        sleep_date="2026-03-01T00:00:00Z",
        bed_time="2026-03-01T23:10:00Z",
        wake_time="2026-03-02T06:05:00Z",
        sleep_quality_score=8,
        notes="Woke once",
    )
    item = (await _list(client, auth_headers))["items"][0]
    assert item["routine_id"] == rid
    assert item["sleep_quality_score"] == 8
    assert item["notes"] == "Woke once"
    assert item["sleep_date"].startswith("2026-03-01T00:00:00")
    assert item["bed_time"].startswith("2026-03-01T23:10:00")
    assert item["wake_time"].startswith("2026-03-02T06:05:00")


@pytest.mark.asyncio
async def test_create_sleep_log_with_offset_datetime_stored_as_utc(client: AsyncClient, auth_headers: dict):
    await _log(client, auth_headers, bed_time="2026-03-01T23:00:00+04:00")
    item = (await _list(client, auth_headers))["items"][0]
    assert item["bed_time"] == "2026-03-01T19:00:00+00:00"


@pytest.mark.asyncio
async def test_create_sleep_log_with_foreign_routine_forbidden(
    client: AsyncClient, auth_headers: dict, other_headers: dict
):
    foreign = await _routine(client, other_headers, name="Theirs")
    resp = await client.post("/api/v1/sleep-logs", json={"routine_id": foreign}, headers=auth_headers)
    assert resp.status_code == 403
    assert resp.json()["error"] == {"code": "FORBIDDEN", "message": "You cannot log sleep for this routine."}
    assert (await _list(client, auth_headers))["items"] == []


@pytest.mark.asyncio
async def test_create_sleep_log_with_unknown_routine_forbidden(client: AsyncClient, auth_headers: dict):
    resp = await client.post("/api/v1/sleep-logs", json={"routine_id": "no-such-routine"}, headers=auth_headers)
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_create_sleep_log_with_archived_own_routine(client: AsyncClient, auth_headers: dict):
    rid = await _routine(client, auth_headers)
    await client.post(f"/api/v1/routines/{rid}/archive", headers=auth_headers)
    await _log(client, auth_headers, routine_id=rid)


@pytest.mark.asyncio
@pytest.mark.parametrize("score", [0, 11, 5.5, "great", "7", True])
async def test_quality_score_out_of_range_rejected(client: AsyncClient, auth_headers: dict, score):
    resp = await client.post("/api/v1/sleep-logs", json={"sleep_quality_score": score}, headers=auth_headers)
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"
    assert (await _list(client, auth_headers))["items"] == []


@pytest.mark.asyncio
async def test_quality_score_bounds_accepted(client: AsyncClient, auth_headers: dict):
    await _log(client, auth_headers, sleep_quality_score=1)
    await _log(client, auth_headers, sleep_quality_score=10)
    assert (await _list(client, auth_headers))["total"] == 2


@pytest.mark.asyncio
async def test_create_sleep_log_requires_auth(client: AsyncClient, clean_db):
    resp = await client.post("/api/v1/sleep-logs", json={})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_update_sleep_log_sparse(client: AsyncClient, auth_headers: dict):
    log_id = await _log(
        client, auth_headers, sleep_date="2026-03-01T00:00:00Z", sleep_quality_score=4, notes="Restless"
    )
    before = (await _list(client, auth_headers))["items"][0]

    resp = await client.patch(f"/api/v1/sleep-logs/{log_id}", json={"sleep_quality_score": 7}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "data": {}}

    after = (await _list(client, auth_headers))["items"][0]
    assert after["sleep_quality_score"] == 7
    assert after["notes"] == "Restless"
    assert after["sleep_date"] == before["sleep_date"]
    assert after["created_at"] == before["created_at"]


@pytest.mark.asyncio
async def test_update_sleep_log_routine_ownership(client: AsyncClient, auth_headers: dict, other_headers: dict):
    mine = await _routine(client, auth_headers, name="Mine")
    theirs = await _routine(client, other_headers, name="Theirs")
    log_id = await _log(client, auth_headers)

    resp = await client.patch(f"/api/v1/sleep-logs/{log_id}", json={"routine_id": theirs}, headers=auth_headers)
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "FORBIDDEN"

    resp = await client.patch(f"/api/v1/sleep-logs/{log_id}", json={"routine_id": mine}, headers=auth_headers)
    assert resp.status_code == 200
    assert (await _list(client, auth_headers))["items"][0]["routine_id"] == mine


@pytest.mark.asyncio
async def test_update_foreign_sleep_log_not_found(client: AsyncClient, auth_headers: dict, other_headers: dict):
    log_id = await _log(client, auth_headers, notes="private")
    resp = await client.patch(f"/api/v1/sleep-logs/{log_id}", json={"notes": "edited"}, headers=other_headers)
    assert resp.status_code == 404
    assert resp.json()["error"] == {"code": "NOT_FOUND", "message": "Sleep log not found."}
    assert (await _list(client, auth_headers))["items"][0]["notes"] == "private"


@pytest.mark.asyncio
async def test_update_sleep_log_invalid_score_rejected(client: AsyncClient, auth_headers: dict):
    log_id = await _log(client, auth_headers)
    resp = await client.patch(f"/api/v1/sleep-logs/{log_id}", json={"sleep_quality_score": 11}, headers=auth_headers)
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_list_orders_by_sleep_date_then_created_at(client: AsyncClient, auth_headers: dict):
    older_night = await _log(client, auth_headers, sleep_date="2026-03-01T00:00:00Z")
    newer_night = await _log(client, auth_headers, sleep_date="2026-03-05T00:00:00Z")
    same_first = await _log(client, auth_headers, sleep_date="2026-03-03T00:00:00Z")
    same_second = await _log(client, auth_headers, sleep_date="2026-03-03T00:00:00Z")

    ids = [item["id"] for item in (await _list(client, auth_headers))["items"]]
    assert ids == [newer_night, same_second, same_first, older_night]


@pytest.mark.asyncio
async def test_list_pagination(client: AsyncClient, auth_headers: dict):
    for day in range(1, 6):
        await _log(client, auth_headers, sleep_date=f"2026-03-0{day}T00:00:00Z")

    first = await _list(client, auth_headers, "?page=1&page_size=2")
    assert first["page"] == 1
    assert first["page_size"] == 2
    assert first["total"] == 2
    assert [i["sleep_date"][:10] for i in first["items"]] == ["2026-03-05", "2026-03-04"]

    last = await _list(client, auth_headers, "?page=3&page_size=2")
    assert last["total"] == 1
    assert [i["sleep_date"][:10] for i in last["items"]] == ["2026-03-01"]

    beyond = await _list(client, auth_headers, "?page=4&page_size=2")
    assert beyond["items"] == []
    assert beyond["total"] == 0


@pytest.mark.asyncio
async def test_list_defaults(client: AsyncClient, auth_headers: dict):
    data = await _list(client, auth_headers)
    assert data["page"] == 1
    assert data["page_size"] == 20
    assert data["items"] == []
    assert data["total"] == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "query", ["?page=0", "?page_size=0", "?page_size=101", "?page=1000001", "?page=100000000000000000&page_size=100"]
)
async def test_list_invalid_paging_rejected(client: AsyncClient, auth_headers: dict, query: str):
    resp = await client.get(f"/api/v1/sleep-logs{query}", headers=auth_headers)
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_list_filter_by_routine(client: AsyncClient, auth_headers: dict):
    rid = await _routine(client, auth_headers)
    with_routine = await _log(client, auth_headers, routine_id=rid)
    await _log(client, auth_headers)

    data = await _list(client, auth_headers, f"?routine_id={rid}")
    assert [i["id"] for i in data["items"]] == [with_routine]
    assert (await _list(client, auth_headers))["total"] == 2


@pytest.mark.asyncio
async def test_list_only_own_logs(client: AsyncClient, auth_headers: dict, other_headers: dict):
    await _log(client, auth_headers, notes="mine")
    await _log(client, other_headers, notes="theirs")
    data = await _list(client, other_headers)
    assert [i["notes"] for i in data["items"]] == ["theirs"]


@pytest.mark.asyncio
async def test_list_last_allowed_page_is_empty(client: AsyncClient, auth_headers: dict):
    await _log(client, auth_headers)
    data = await _list(client, auth_headers, "?page=1000000&page_size=100")
    assert data["page"] == 1000000
    assert data["items"] == []
    assert data["total"] == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["sleep_date", "bed_time", "wake_time"])
async def test_create_datetime_outside_utc_range_rejected(client: AsyncClient, auth_headers: dict, field: str):
    resp = await client.post(
        "/api/v1/sleep-logs", json={field: "9999-12-31T23:00:00-05:00"}, headers=auth_headers
    )
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"
    assert (await _list(client, auth_headers))["items"] == []


@pytest.mark.asyncio
async def test_update_datetime_outside_utc_range_rejected(client: AsyncClient, auth_headers: dict):
    log_id = await _log(client, auth_headers, bed_time="2026-03-01T23:00:00Z")
    resp = await client.patch(
        f"/api/v1/sleep-logs/{log_id}", json={"bed_time": "0001-01-01T00:30:00+05:00"}, headers=auth_headers
    )
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"
    assert (await _list(client, auth_headers))["items"][0]["bed_time"] == "2026-03-01T23:00:00+00:00"


@pytest.mark.asyncio
async def test_create_sleep_log_with_long_unknown_routine_forbidden(client: AsyncClient, auth_headers: dict):
    resp = await client.post("/api/v1/sleep-logs", json={"routine_id": "r" * 200}, headers=auth_headers)
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "FORBIDDEN"
