from contextlib import asynccontextmanager

from fastapi import FastAPI

from sensorlog.core.config import Settings, get_settings
from sensorlog.core.logging_config import configure_logging
from sensorlog.db.schema import ensure_schema
from sensorlog.db.session import build_engine, build_session_factory


@asynccontextmanager
async def _lifespan(app: FastAPI):
    await ensure_schema(app.state.engine)
    try:
        yield
    finally:
        await app.state.engine.dispose()


def create_base_app(settings: Settings | None = None) -> FastAPI:
    """
    Build a FastAPI application that owns the database engine.
    The engine is created here, the schema is ensured on startup and the
    engine is disposed on shutdown. Routers are included by the caller.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(title=settings.app_name, lifespan=_lifespan)
    app.state.settings = settings
    app.state.engine = build_engine(settings)
    app.state.session_factory = build_session_factory(app.state.engine)
    return app
