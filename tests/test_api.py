"""Tests for the HTTP glue around ingestion and queries."""
import pytest
from httpx import AsyncClient

SUBMISSION = {
    "entries": [
        {
            "controller": "C1",
            "timestamp": "100",
            "S1": {"_type": "DHT22", "temp": "21"},
        },
        {"controller": "C1", "timestamp": 200, "S1": {"temp": 21.5}},
        {"controller": "C1", "timestamp": 300, "S1": {"temp": "hot"}, "S0": {"state": "ON"}},
    ]
}


async def _submit(client: AsyncClient, payload=SUBMISSION) -> dict:
    response = await client.post("/api/v1/submit", json=payload)
    assert response.status_code == 200
    return response.json()


@pytest.mark.asyncio
async def test_submit_accepts_entries(client: AsyncClient):
    body = await _submit(client)

    assert body == {"success": True, "message": "Sensor data processed successfully", "accepted": 4}


@pytest.mark.asyncio
async def test_submit_rejects_non_scalar_values(client: AsyncClient):
    response = await client.post(
        "/api/v1/submit",
        json={"entries": [{"controller": "C1", "timestamp": 1, "S1": {"temp": {"nested": 1}}}]},
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_submit_rejects_missing_timestamp(client: AsyncClient):
    response = await client.post("/api/v1/submit", json={"entries": [{"controller": "C1", "S1": {"t": 1}}]})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_submit_rejects_timestamp_outside_column(client: AsyncClient):
    response = await client.post(
        "/api/v1/submit", json={"entries": [{"controller": "C1", "timestamp": 2**63, "S1": {"t": 1}}]}
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_millisecond_timestamp_is_served_without_datetime(client: AsyncClient):
    await _submit(client, {"entries": [{"controller": "C1", "timestamp": 1700000000000, "S1": {"temp": 21.0}}]})

    response = await client.get("/controllers/C1/sensors/S1/readings")

    assert response.status_code == 200
    reading = response.json()["data"]["temp"][0]
    assert reading["time_unix"] == 1700000000000
    assert reading["timestamp"] is None
    assert reading["value_int"] == 21


@pytest.mark.asyncio
async def test_list_controllers_and_sensors(client: AsyncClient):
    await _submit(client)

    controllers = (await client.get("/controllers")).json()
    sensors = (await client.get("/controllers/C1/sensors")).json()

    assert [c["name"] for c in controllers] == ["C1"]
    assert [s["name"] for s in sensors] == ["S0", "S1"]


@pytest.mark.asyncio
async def test_readings_endpoint_paginates(client: AsyncClient):
    await _submit(client)

    response = await client.get("/controllers/C1/sensors/S1/readings", params={"page": 1, "page_size": 2})

    assert response.status_code == 200
    body = response.json()
    assert [(r["time_unix"], r["value"]) for r in body["data"]["temp"]] == [(300, "hot"), (200, 21.5)]
    assert body["pagination"] == {
        "page": 1,
        "page_size": 2,
        "total": 3,
        "total_pages": 2,
        "has_next": True,
        "has_prev": False,
    }


@pytest.mark.asyncio
async def test_readings_endpoint_uses_default_page_size(client: AsyncClient):
    await _submit(client)

    body = (await client.get("/controllers/C1/sensors/S1/readings")).json()

    assert body["pagination"]["page_size"] == 50
    assert len(body["data"]["temp"]) == 3


@pytest.mark.asyncio
async def test_readings_endpoint_filters_by_range(client: AsyncClient):
    await _submit(client)

    by_unix = await client.get("/controllers/C1/sensors/S1/readings", params={"start": "100", "end": "200"})
    by_iso = await client.get(
        "/controllers/C1/sensors/S1/readings",
        params={"start": "1970-01-01T00:03:20Z", "end": "1970-01-01T00:05:00Z"},
    )

    assert [r["time_unix"] for r in by_unix.json()["data"]["temp"]] == [200, 100]
    assert [r["time_unix"] for r in by_iso.json()["data"]["temp"]] == [300, 200]


@pytest.mark.asyncio
async def test_readings_endpoint_requires_both_bounds(client: AsyncClient):
    response = await client.get("/controllers/C1/sensors/S1/readings", params={"start": "100"})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_readings_endpoint_rejects_bad_timestamps(client: AsyncClient):
    response = await client.get(
        "/controllers/C1/sensors/S1/readings", params={"start": "soon", "end": "later"}
    )

    assert response.status_code == 400
    assert "Invalid timestamp" in response.json()["detail"]


@pytest.mark.asyncio
async def test_readings_endpoint_validates_page(client: AsyncClient):
    response = await client.get("/controllers/C1/sensors/S1/readings", params={"page": 0})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_controller_overview(client: AsyncClient):
    await _submit(client)

    response = await client.get("/controllers/C1")

    assert response.status_code == 200
    body = response.json()
    assert body["controller"] == "C1"
    assert body["first_reading"] == 100
    assert body["last_reading"] == 300
    assert [sensor["name"] for sensor in body["sensors"]] == ["S0", "S1"]
    assert [r["value"] for r in body["sensors"][1]["readings"]["temp"]] == ["hot", 21.5, 21]


@pytest.mark.asyncio
async def test_controller_overview_unknown_controller(client: AsyncClient):
    response = await client.get("/controllers/missing")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_controller_overview_without_readings(client: AsyncClient):
    await _submit(client, {"entries": [{"controller": "quiet", "timestamp": 1}]})

    body = (await client.get("/controllers/quiet")).json()

    assert body == {"controller": "quiet", "first_reading": None, "last_reading": None, "sensors": []}


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.json() == {"status": "ok"}
