from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from app.core.config import get_settings
from app.db.session import engine


@asynccontextmanager
async def _lifespan(app: FastAPI):
    try:
        yield
    finally:
        await engine.dispose()


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Rejected inputs are not echoed back: an overflowing number such as 1e309
    # decodes to inf, which cannot be rendered as JSON.
    errors = [{key: value for key, value in error.items() if key != "input"} for error in exc.errors()]
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_encoder(errors)},
    )


def create_base_app() -> FastAPI:
    """
    Build a FastAPI application with shared middleware, settings, and lifespan hooks.
    Routers are included on top of this base instance by the entry point.
    """
    settings = get_settings()
    app = FastAPI(title=settings.app_name, lifespan=_lifespan)
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    return app
