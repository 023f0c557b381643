"""API endpoint tests.

To run:
    pytest tests/test_api.py -v

The app's lifespan is not started here; the `db` fixture provides an
in-memory database on the same event loop as the client.
"""

import httpx
import pytest
import pytest_asyncio

from dayscore.core.errors import ConflictError, PersistenceError
from dayscore.interfaces.api.main import app
from dayscore.storage import points_repo

BUCKET = "2024-03-15"
MORNING = "2024-03-15T09:00:00+00:00"


@pytest_asyncio.fixture
async def client(db):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.mark.asyncio
async def test_health_endpoint(client):
    response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "dayscore-api"}


# ============ Content ============


@pytest.mark.asyncio
async def test_submit_and_read_content(client):
    first = await client.post(
        "/api/users/u1/content",
        json={"photos": ["p1"], "captions": ["c1"], "habit_tags": ["gym"], "timestamp": MORNING},
    )
    second = await client.post(
        "/api/users/u1/content",
        json={"photos": ["p2"], "captions": ["c2"], "timestamp": MORNING},
    )

    assert first.status_code == 200
    assert first.json()["created"] is True
    assert second.json()["created"] is False

    response = await client.get(f"/api/users/u1/content/{BUCKET}")
    data = response.json()
    assert data["bucket"] == BUCKET
    assert data["photos"] == ["p2", "p1"]
    assert data["captions"] == ["c2", "c1"]
    assert data["total_photos"] == 2
    assert data["submission_count"] == 2


@pytest.mark.asyncio
async def test_missing_content_is_null(client):
    response = await client.get(f"/api/users/u1/content/{BUCKET}")

    assert response.status_code == 200
    assert response.json() is None


@pytest.mark.asyncio
async def test_empty_submission_is_422(client):
    response = await client.post("/api/users/u1/content", json={"photos": []})

    assert response.status_code == 422
    assert response.json()["error"] == "ValidationError"


@pytest.mark.asyncio
async def test_delete_day(client):
    await client.post("/api/users/u1/content", json={"photos": ["p1"], "timestamp": MORNING})

    first = await client.delete(f"/api/users/u1/content/{BUCKET}")
    second = await client.delete(f"/api/users/u1/content/{BUCKET}")

    assert first.json() == {"applied": True, "bucket": BUCKET}
    assert second.json() == {"applied": False, "bucket": BUCKET}


@pytest.mark.asyncio
async def test_days_and_stats(client):
    for day in ("2024-03-10T12:00:00+00:00", "2024-03-11T12:00:00+00:00"):
        await client.post(
            "/api/users/u1/content", json={"photos": ["a", "b"], "timestamp": day}
        )

    recent = (await client.get("/api/users/u1/days", params={"limit": 1})).json()
    everything = (await client.get("/api/users/u1/days")).json()
    stats = (await client.get("/api/users/u1/days/stats")).json()

    assert recent["total"] == 1
    assert recent["days"][0]["bucket"] == "2024-03-11"
    assert everything["total"] == 2
    assert stats["total_photos"] == 4
    assert stats["average_photos_per_day"] == 2.0


@pytest.mark.asyncio
async def test_days_rejects_negative_limit(client):
    response = await client.get("/api/users/u1/days", params={"limit": -1})

    assert response.status_code == 422


# ============ Habits ============


@pytest.mark.asyncio
async def test_one_shot_action_twice(client):
    payload = {"habit": "share", "timestamp": MORNING}

    first = await client.post("/api/users/u1/habits/core/action", json=payload)
    second = await client.post("/api/users/u1/habits/core/action", json=payload)

    assert first.json()["applied"] is True
    assert first.json()["breakdown"]["core"] == 15
    assert second.status_code == 200
    assert second.json()["applied"] is False
    assert second.json()["reason"] == "already_completed"
    assert second.json()["breakdown"]["core"] == 15


@pytest.mark.asyncio
async def test_daily_habits_from_raw_entry(client):
    response = await client.post(
        "/api/users/u1/habits/daily",
        json={
            "entry": {"sleep_hours": 7.5, "water_intake": 2.0, "cold_shower_completed": False},
            "timestamp": MORNING,
        },
    )

    data = response.json()
    assert data["applied"] is True
    assert data["bucket"] == BUCKET
    assert data["breakdown"]["daily"] == 30


@pytest.mark.asyncio
async def test_daily_habits_from_snapshot(client):
    response = await client.post(
        "/api/users/u1/habits/daily",
        json={"snapshot": {"gym": "legs"}, "timestamp": MORNING},
    )

    assert response.json()["breakdown"]["daily"] == 15


@pytest.mark.asyncio
async def test_unknown_habit_is_422(client):
    response = await client.post(
        "/api/users/u1/habits/explicit", json={"habit": "yoga", "timestamp": MORNING}
    )

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "ValidationError"
    assert body["details"] == {"habit": "yoga"}


@pytest.mark.asyncio
async def test_core_refresh(client):
    on = await client.post(
        "/api/users/u1/habits/core/refresh",
        json={"habit": "comment", "is_active": True, "timestamp": MORNING},
    )
    off = await client.post(
        "/api/users/u1/habits/core/refresh",
        json={"habit": "comment", "is_active": False, "timestamp": MORNING},
    )

    assert on.json()["breakdown"]["core"] == 10
    assert off.json()["breakdown"]["core"] == 0

    status = (await client.get(f"/api/users/u1/points/{BUCKET}/core-status")).json()
    assert status["commented"] is False


@pytest.mark.asyncio
async def test_storage_failure_is_503(client, monkeypatch):
    async def broken_get(owner_id, bucket):
        raise PersistenceError("db down")

    monkeypatch.setattr(points_repo, "get_points", broken_get)

    response = await client.post(
        "/api/users/u1/habits/core/action", json={"habit": "share", "timestamp": MORNING}
    )

    assert response.status_code == 503
    assert response.json()["error"] == "PersistenceError"


@pytest.mark.asyncio
async def test_unresolved_conflict_is_409(client, monkeypatch):
    payload = {"habit": "share", "timestamp": MORNING}
    await client.post("/api/users/u1/habits/core/action", json=payload)

    async def always_conflicts(points, values):
        raise ConflictError("lost race")

    monkeypatch.setattr(points_repo, "update_points", always_conflicts)

    response = await client.post(
        "/api/users/u1/habits/core/action", json={"habit": "goal_update", "timestamp": MORNING}
    )

    assert response.status_code == 409
    assert response.json()["error"] == "ConflictError"


# ============ Points ============


@pytest.mark.asyncio
async def test_points_breakdown_and_level(client):
    await client.post(
        "/api/users/u1/habits/core/action", json={"habit": "goal_update", "timestamp": MORNING}
    )

    breakdown = (await client.get(f"/api/users/u1/points/{BUCKET}")).json()
    total = (await client.get("/api/users/u1/points/total")).json()
    level = (await client.get("/api/users/u1/level")).json()

    assert breakdown == {"daily": 0, "core": 25, "bonus": 0, "total": 25}
    assert total == {"total_points": 25}
    assert level["level"] == 1
    assert level["next_level"] == 2
    assert level["points_to_next"] == 3975
    assert level["max_segments"] == 20


@pytest.mark.asyncio
async def test_total_ignores_cache(client):
    await points_repo.set_cached_total("u1", 5000)

    total = (await client.get("/api/users/u1/points/total")).json()

    assert total == {"total_points": 0}


@pytest.mark.asyncio
async def test_failed_total_reads_as_zero(client, monkeypatch):
    await points_repo.set_cached_total("u1", 5000)

    async def broken_totals(owner_id):
        raise PersistenceError("db down")

    monkeypatch.setattr(points_repo, "get_daily_totals", broken_totals)

    level = (await client.get("/api/users/u1/level")).json()

    assert level["total_points"] == 0
    assert level["level"] == 1


@pytest.mark.asyncio
async def test_bad_bucket_in_path_is_422(client):
    response = await client.get("/api/users/u1/points/not-a-date")

    assert response.status_code == 422
