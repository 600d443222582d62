from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from sensorlog.db.base import Base
from sensorlog.db.session import ensure_database_directory

# Registers the tables on Base.metadata.
from sensorlog.models import entities  # noqa: F401

log = logging.getLogger("sensorlog.schema")


async def ensure_schema(engine: AsyncEngine) -> None:
    """Create the controller, sensor and sensor_reading tables if absent."""
    ensure_database_directory(engine.url.render_as_string(hide_password=False))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info("Schema ready on %s", engine.url.render_as_string(hide_password=True))
