from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy import BigInteger, Float, String, insert, literal, select
from sqlalchemy.ext.asyncio import AsyncSession

from sensorlog.models.entities import Controller, Sensor, SensorReading
from sensorlog.schemas.submit import SubmissionEntry
from sensorlog.services.coercion import INT64_MAX, INT64_MIN, Scalar, coerce
from sensorlog.services.identity import ensure_controller, ensure_sensor

log = logging.getLogger("sensorlog.ingest")


class UnknownSensorError(LookupError):
    def __init__(self, controller: str, sensor: str) -> None:
        super().__init__(f"Sensor {sensor!r} of controller {controller!r} not found")
        self.controller = controller
        self.sensor = sensor


async def append_reading(
    session: AsyncSession,
    controller: str,
    sensor: str,
    time_unix: int,
    channel_name: str,
    raw_value: Scalar,
) -> None:
    """Append one reading under an existing (controller, sensor) pair."""
    time_unix = int(time_unix)
    if not INT64_MIN <= time_unix <= INT64_MAX:
        raise ValueError(f"Timestamp {time_unix} does not fit a 64-bit column")
    value = coerce(raw_value)
    row = (
        select(
            Sensor.id,
            literal(channel_name, String),
            literal(time_unix, BigInteger),
            literal(value.value_str, String),
            literal(value.value_int, BigInteger),
            literal(value.value_real, Float),
        )
        .join(Controller, Sensor.controller_id == Controller.id)
        .where(Controller.name == controller, Sensor.name == sensor)
    )
    result = await session.execute(
        insert(SensorReading).from_select(
            ["sensor_id", "name", "time_unix", "value_str", "value_int", "value_real"], row
        )
    )
    if result.rowcount == 0:
        log.warning("Dropping reading %s for unknown sensor %s/%s", channel_name, controller, sensor)
        raise UnknownSensorError(controller, sensor)


async def add_reading(
    session: AsyncSession,
    controller: str,
    sensor: str,
    time_unix: int,
    channel_name: str,
    raw_value: Scalar,
) -> None:
    """Ensure the controller and sensor exist, then append the reading.

    Nothing is committed here; the caller owns the transaction.
    """
    await ensure_controller(session, controller)
    await ensure_sensor(session, controller, sensor)
    await append_reading(session, controller, sensor, time_unix, channel_name, raw_value)


async def ingest_submission(session: AsyncSession, entries: Iterable[SubmissionEntry]) -> int:
    accepted = 0
    controllers: set[str] = set()
    for entry in entries:
        await ensure_controller(session, entry.controller)
        controllers.add(entry.controller)
        for sensor, readings in entry.sensor_readings().items():
            await ensure_sensor(session, entry.controller, sensor)
            for channel, raw_value in readings.items():
                await append_reading(session, entry.controller, sensor, entry.timestamp, channel, raw_value)
                accepted += 1
    log.info("Ingested %d readings from %d controllers", accepted, len(controllers))
    return accepted
