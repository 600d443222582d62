from fastapi import APIRouter

from . import controllers, health, submit

API_ROUTERS: tuple[APIRouter, ...] = (
    submit.router,
    controllers.router,
    health.router,
)

__all__ = ["API_ROUTERS"]
