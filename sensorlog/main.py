from fastapi import FastAPI

from sensorlog.app_factory import create_base_app
from sensorlog.core.config import Settings
from sensorlog.routers.groups import API_ROUTERS


def create_app(settings: Settings | None = None) -> FastAPI:
    app = create_base_app(settings)
    for router in API_ROUTERS:
        app.include_router(router)
    return app


app = create_app()
