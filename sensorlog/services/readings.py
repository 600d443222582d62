"""Read-side queries over controllers, sensors and their readings."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy import Select, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from sensorlog.models.entities import Controller, Sensor, SensorReading
from sensorlog.schemas.readings import (
    ControllerOverview,
    GroupedReadingsPage,
    Pagination,
    ReadingOut,
    SensorReadingsOut,
)
from sensorlog.services.coercion import derive_value
from sensorlog.services.timeutil import TimeInput, to_unix_timestamp

DEFAULT_PAGE_SIZE = 50
OVERVIEW_ROWS_PER_CHANNEL = 20


async def list_controllers(session: AsyncSession) -> Sequence[Controller]:
    result = await session.execute(select(Controller).order_by(Controller.name))
    return result.scalars().all()


async def get_controller(session: AsyncSession, controller_name: str) -> Controller | None:
    result = await session.execute(select(Controller).where(Controller.name == controller_name))
    return result.scalar_one_or_none()


async def list_sensors(session: AsyncSession, controller_name: str) -> Sequence[Sensor]:
    result = await session.execute(
        select(Sensor)
        .join(Controller, Sensor.controller_id == Controller.id)
        .where(Controller.name == controller_name)
        .order_by(Sensor.name)
    )
    return result.scalars().all()


def _controller_readings(stmt: Select, controller_name: str) -> Select:
    return (
        stmt.select_from(SensorReading)
        .join(Sensor, SensorReading.sensor_id == Sensor.id)
        .join(Controller, Sensor.controller_id == Controller.id)
        .where(Controller.name == controller_name)
    )


async def first_reading_time(session: AsyncSession, controller_name: str) -> int | None:
    """Earliest ``time_unix`` across all sensors, or None without readings."""
    result = await session.execute(_controller_readings(select(func.min(SensorReading.time_unix)), controller_name))
    return result.scalar_one()


async def last_reading_time(session: AsyncSession, controller_name: str) -> int | None:
    result = await session.execute(_controller_readings(select(func.max(SensorReading.time_unix)), controller_name))
    return result.scalar_one()


def _sensor_readings(
    stmt: Select,
    controller_name: str,
    sensor_name: str,
    time_range: tuple[int, int] | None = None,
) -> Select:
    stmt = _controller_readings(stmt, controller_name).where(Sensor.name == sensor_name)
    if time_range is not None:
        start_unix, end_unix = time_range
        stmt = stmt.where(SensorReading.time_unix >= start_unix, SensorReading.time_unix <= end_unix)
    return stmt


async def count_distinct_channels(session: AsyncSession, controller_name: str, sensor_name: str) -> int:
    result = await session.execute(
        _sensor_readings(select(func.count(distinct(SensorReading.name))), controller_name, sensor_name)
    )
    return result.scalar_one()


def _to_datetime(time_unix: int) -> datetime | None:
    # Stored seconds may lie outside the range datetime can represent.
    try:
        return datetime.fromtimestamp(time_unix, tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        return None


def _to_reading_out(row) -> ReadingOut:
    return ReadingOut(
        id=row.id,
        sensor_id=row.sensor_id,
        reading_name=row.reading_name,
        value_str=row.value_str,
        value_int=row.value_int,
        value_real=row.value_real,
        time_unix=row.time_unix,
        sensor_name=row.sensor_name,
        controller_name=row.controller_name,
        value=derive_value(row.value_int, row.value_real, row.value_str),
        timestamp=_to_datetime(row.time_unix),
    )


async def _paginate(
    session: AsyncSession,
    controller_name: str,
    sensor_name: str,
    page: int,
    page_size: int,
    time_range: tuple[int, int] | None = None,
) -> GroupedReadingsPage:
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    page = max(page, 1)
    offset = (page - 1) * page_size

    count_result = await session.execute(
        _sensor_readings(select(func.count(SensorReading.id)), controller_name, sensor_name, time_range)
    )
    total = count_result.scalar_one()

    rows_result = await session.execute(
        _sensor_readings(
            select(
                SensorReading.id,
                SensorReading.sensor_id,
                SensorReading.name.label("reading_name"),
                SensorReading.value_str,
                SensorReading.value_int,
                SensorReading.value_real,
                SensorReading.time_unix,
                Sensor.name.label("sensor_name"),
                Controller.name.label("controller_name"),
            ),
            controller_name,
            sensor_name,
            time_range,
        )
        .order_by(SensorReading.time_unix.desc(), SensorReading.id.desc())
        .limit(page_size)
        .offset(offset)
    )

    # Grouped after LIMIT/OFFSET: a channel may continue on the next page.
    grouped: dict[str, list[ReadingOut]] = {}
    for row in rows_result:
        reading = _to_reading_out(row)
        grouped.setdefault(reading.reading_name, []).append(reading)

    total_pages = math.ceil(total / page_size)
    return GroupedReadingsPage(
        data=grouped,
        pagination=Pagination(
            page=page,
            page_size=page_size,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        ),
    )


async def get_readings(
    session: AsyncSession,
    controller_name: str,
    sensor_name: str,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> GroupedReadingsPage:
    """Most recent readings first, grouped by channel name."""
    return await _paginate(session, controller_name, sensor_name, page, page_size)


async def get_readings_in_range(
    session: AsyncSession,
    controller_name: str,
    sensor_name: str,
    start_time: TimeInput,
    end_time: TimeInput,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> GroupedReadingsPage:
    """Like :func:`get_readings`, limited to ``start <= time_unix <= end``.

    Time bounds may be Unix seconds, ``datetime``/``date`` objects or ISO-8601
    strings; an unparseable bound raises ``ValueError``.
    """
    time_range = (to_unix_timestamp(start_time), to_unix_timestamp(end_time))
    return await _paginate(session, controller_name, sensor_name, page, page_size, time_range)


async def load_controller_overview(
    session: AsyncSession,
    controller_name: str,
    rows_per_channel: int = OVERVIEW_ROWS_PER_CHANNEL,
) -> ControllerOverview:
    sensors: list[SensorReadingsOut] = []
    for sensor in await list_sensors(session, controller_name):
        channels = await count_distinct_channels(session, controller_name, sensor.name)
        latest = await get_readings(session, controller_name, sensor.name, 1, rows_per_channel * max(channels, 1))
        sensors.append(SensorReadingsOut(name=sensor.name, readings=latest.data))

    return ControllerOverview(
        controller=controller_name,
        first_reading=await first_reading_time(session, controller_name),
        last_reading=await last_reading_time(session, controller_name),
        sensors=sensors,
    )
