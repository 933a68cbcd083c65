"""
API tests for schedule endpoints.
"""
from dataclasses import replace
from datetime import time

import pytest
from fastapi import HTTPException

from luma.api.routes.schedule import build_schedule
from luma.logic.profile import ProfileSnapshot


def preview_body(**overrides) -> dict:
    body = {
        "profile": {
            "timezone": "UTC",
            "sleep_start": "22:00:00",
            "sleep_end": "06:00:00",
            "min_color_temp": 2000,
            "max_color_temp": 6500,
        },
        "points": 4,
        "spacing_seconds": 1800,
        "start": "2026-10-17T06:00:00Z",
    }
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_health(preview_client):
    response = await preview_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["service"] == "luma"


@pytest.mark.asyncio
async def test_preview_schedule(preview_client):
    response = await preview_client.post("/api/schedule/preview", json=preview_body())

    assert response.status_code == 200
    data = response.json()

    assert data["profile_id"] == 0
    assert data["sleep_start_utc_seconds"] == 22 * 3600
    assert data["sleep_end_utc_seconds"] == 6 * 3600
    assert data["night_mode_enabled"] is True
    assert data["motion_timeout_seconds"] == 300
    assert data["generated_at"].startswith("2026-10-17T06:00:00")
    assert data["valid_until"].startswith("2026-10-17T08:00:00")

    assert [point["temp"] for point in data["schedule"]] == [2000, 5375, 6500, 6500]
    assert data["schedule"][1]["utc"].startswith("2026-10-17T06:30:00")


@pytest.mark.asyncio
async def test_preview_uses_default_table_size(preview_client, test_settings):
    body = preview_body()
    del body["points"]
    del body["spacing_seconds"]

    response = await preview_client.post("/api/schedule/preview", json=body)

    assert response.status_code == 200
    assert len(response.json()["schedule"]) == test_settings.schedule_default_points


@pytest.mark.asyncio
async def test_preview_rejects_unknown_timezone(preview_client):
    body = preview_body()
    body["profile"]["timezone"] = "Mars/Olympus_Mons"

    response = await preview_client.post("/api/schedule/preview", json=body)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_preview_rejects_inverted_color_temps(preview_client):
    body = preview_body()
    body["profile"]["min_color_temp"] = 6500
    body["profile"]["max_color_temp"] = 2000

    response = await preview_client.post("/api/schedule/preview", json=body)

    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"points": 0},
        {"points": 501},
        {"spacing_seconds": 0},
        {"spacing_seconds": -900},
        {"spacing_seconds": 86401},
        {"spacing_seconds": 10**12},
        {"spacing_seconds": -10**15},
        {"start": "9999-12-31T23:00:00Z"},
    ],
)
async def test_preview_rejects_bad_table_size(preview_client, overrides):
    response = await preview_client.post("/api/schedule/preview", json=preview_body(**overrides))

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "InvalidScheduleRequest"


def test_build_schedule_maps_configuration_errors(test_settings):
    """Engine configuration errors become 422 with a stable code"""
    profile = ProfileSnapshot(
        id=7,
        timezone="Nowhere/Special",
        sleep_start=time(22, 0),
        sleep_end=time(6, 0),
        min_color_temp=2000,
        max_color_temp=6500,
    )

    with pytest.raises(HTTPException) as exc_info:
        build_schedule(profile, test_settings, points=1)
    assert exc_info.value.status_code == 422
    assert exc_info.value.detail["code"] == "InvalidTimezone"

    with pytest.raises(HTTPException) as exc_info:
        build_schedule(
            replace(profile, timezone="UTC", latitude=120.0, longitude=0.0),
            test_settings,
            points=1,
        )
    assert exc_info.value.status_code == 422
    assert exc_info.value.detail["code"] == "InvalidCoordinates"


@pytest.mark.asyncio
async def test_stored_profile_schedule(async_client, sample_profile_data):
    created = await async_client.post("/api/profiles/", json=sample_profile_data)
    assert created.status_code == 201
    profile_id = created.json()["id"]

    response = await async_client.get(
        f"/api/profiles/{profile_id}/schedule",
        params={"points": 12, "spacing_seconds": 600},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["profile_id"] == profile_id
    assert len(data["schedule"]) == 12
    assert data["motion_timeout_seconds"] == 120
    assert all(2000 <= point["temp"] <= 6500 for point in data["schedule"])


@pytest.mark.asyncio
async def test_stored_profile_schedule_not_found(async_client):
    response = await async_client.get("/api/profiles/999999/schedule")
    assert response.status_code == 404


@pytest.mark.parametrize("spacing_seconds", [10**12, 10**15])
def test_build_schedule_rejects_huge_spacing(test_settings, spacing_seconds):
    """Spacing too large for a timedelta is a bad request, not a server error"""
    profile = ProfileSnapshot(
        id=7,
        timezone="UTC",
        sleep_start=time(22, 0),
        sleep_end=time(6, 0),
        min_color_temp=2000,
        max_color_temp=6500,
    )

    with pytest.raises(HTTPException) as exc_info:
        build_schedule(profile, test_settings, points=2, spacing_seconds=spacing_seconds)
    assert exc_info.value.status_code == 400
    assert exc_info.value.detail["code"] == "InvalidScheduleRequest"


@pytest.mark.asyncio
async def test_stored_profile_schedule_rejects_huge_spacing(async_client, sample_profile_data):
    created = await async_client.post("/api/profiles/", json=sample_profile_data)
    profile_id = created.json()["id"]

    response = await async_client.get(
        f"/api/profiles/{profile_id}/schedule",
        params={"points": 2, "spacing_seconds": 10**12},
    )

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "InvalidScheduleRequest"
