from fastapi import APIRouter

from . import readings, tanks

API_ROUTERS: tuple[APIRouter, ...] = (
    tanks.router,
    readings.router,
)

__all__ = ["API_ROUTERS"]
