"""Create the database schema and optionally seed demo readings.

Usage: ``python -m sensorlog.bootstrap [--seed-demo]``
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import time

from sensorlog.core.config import Settings, get_settings
from sensorlog.core.logging_config import configure_logging
from sensorlog.db.schema import ensure_schema
from sensorlog.db.session import build_engine, build_session_factory
from sensorlog.services.ingestion import add_reading

log = logging.getLogger("sensorlog.bootstrap")

DEMO_CONTROLLER = "demo-controller"
DEMO_CHANNELS: dict[str, dict[str, str]] = {
    "bme280": {"temperature": "21.5", "humidity": "40", "pressure": "1013.25"},
    "relay": {"state": "ON"},
}


async def bootstrap(settings: Settings, seed_demo: bool, samples: int = 10) -> int:
    engine = build_engine(settings)
    try:
        await ensure_schema(engine)
        if not seed_demo:
            log.info("Database ready. No demo readings created.")
            return 0

        session_factory = build_session_factory(engine)
        now = int(time.time())
        written = 0
        async with session_factory() as session:
            for step in range(samples):
                ts = now - step * 60
                for sensor, channels in DEMO_CHANNELS.items():
                    for channel, value in channels.items():
                        await add_reading(session, DEMO_CONTROLLER, sensor, ts, channel, value)
                        written += 1
            await session.commit()
        log.info("Seeded %d demo readings for %s", written, DEMO_CONTROLLER)
        return written
    finally:
        await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Initialize database and optional demo readings.")
    parser.add_argument("--seed-demo", action="store_true", help="Seed demo controller readings")
    parser.add_argument("--samples", type=int, default=10, help="Demo samples per channel")
    args = parser.parse_args()
    settings = get_settings()
    configure_logging(settings.log_level)
    asyncio.run(bootstrap(settings, args.seed_demo, args.samples))


if __name__ == "__main__":
    main()
