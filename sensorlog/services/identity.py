from __future__ import annotations

from sqlalchemy import String, literal, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from sensorlog.models.entities import Controller, Sensor

_UPSERT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def insert_ignoring_conflicts(session: AsyncSession, model):
    """Build an ``INSERT ... ON CONFLICT DO NOTHING`` for the bound dialect."""
    dialect = session.get_bind().dialect.name
    try:
        insert = _UPSERT_INSERTS[dialect]
    except KeyError:
        raise ValueError(f"Unsupported database dialect for conflict-ignoring inserts: {dialect!r}") from None
    return insert(model)


async def ensure_controller(session: AsyncSession, name: str) -> None:
    stmt = insert_ignoring_conflicts(session, Controller).values(name=name).on_conflict_do_nothing()
    await session.execute(stmt)


async def ensure_sensor(session: AsyncSession, controller_name: str, sensor_name: str) -> None:
    """Insert the sensor under ``controller_name`` unless it already exists.

    The controller id is resolved by name inside the statement, so an unknown
    controller selects no rows and nothing is written.
    """
    owner = select(Controller.id, literal(sensor_name, String)).where(Controller.name == controller_name)
    stmt = (
        insert_ignoring_conflicts(session, Sensor)
        .from_select(["controller_id", "name"], owner)
        .on_conflict_do_nothing()
    )
    await session.execute(stmt)

