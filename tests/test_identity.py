"""Tests for controller and sensor identity resolution."""
from types import SimpleNamespace

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from sensorlog.models.entities import Controller, Sensor
from sensorlog.services.identity import ensure_controller, ensure_sensor, insert_ignoring_conflicts


async def _count(session: AsyncSession, model) -> int:
    return (await session.execute(select(func.count()).select_from(model))).scalar_one()


@pytest.mark.asyncio
async def test_ensure_controller_is_idempotent(db_session: AsyncSession):
    await ensure_controller(db_session, "A")
    await ensure_controller(db_session, "A")
    await db_session.commit()

    result = await db_session.execute(select(Controller.name))
    assert result.scalars().all() == ["A"]


@pytest.mark.asyncio
async def test_ensure_controller_across_commits(db_session: AsyncSession):
    await ensure_controller(db_session, "A")
    await db_session.commit()
    await ensure_controller(db_session, "A")
    await db_session.commit()

    assert await _count(db_session, Controller) == 1


@pytest.mark.asyncio
async def test_sensor_names_are_scoped_per_controller(db_session: AsyncSession):
    for controller in ("A", "B"):
        await ensure_controller(db_session, controller)
    await ensure_sensor(db_session, "A", "temp")
    await ensure_sensor(db_session, "B", "temp")
    await db_session.commit()

    result = await db_session.execute(
        select(Controller.name, Sensor.name)
        .select_from(Sensor)
        .join(Controller, Sensor.controller_id == Controller.id)
    )
    assert sorted(result.all()) == [("A", "temp"), ("B", "temp")]


@pytest.mark.asyncio
async def test_ensure_sensor_is_idempotent(db_session: AsyncSession):
    await ensure_controller(db_session, "A")
    await ensure_sensor(db_session, "A", "temp")
    await ensure_sensor(db_session, "A", "temp")
    await db_session.commit()

    assert await _count(db_session, Sensor) == 1


@pytest.mark.asyncio
async def test_ensure_sensor_under_unknown_controller_writes_nothing(db_session: AsyncSession):
    await ensure_sensor(db_session, "ghost", "temp")
    await db_session.commit()

    assert await _count(db_session, Sensor) == 0
    assert await _count(db_session, Controller) == 0


def test_insert_ignoring_conflicts_rejects_unsupported_dialects():
    session = SimpleNamespace(get_bind=lambda: SimpleNamespace(dialect=SimpleNamespace(name="mssql")))

    with pytest.raises(ValueError, match="mssql"):
        insert_ignoring_conflicts(session, Controller)
