"""FastAPI application factory.

Domain errors are mapped to HTTP status codes here; services never deal
with HTTP concerns.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from recordstore import __version__
from recordstore.config import get_logger, settings
from recordstore.domain.exceptions import (
    ConflictError,
    InsufficientStockError,
    NotFoundError,
    RecordStoreError,
    ValidationError,
)
from recordstore.infrastructure.api.routes import orders_router, records_router
from recordstore.infrastructure.container import ServiceContainer, build_container

logger = get_logger(__name__)

_STATUS_BY_ERROR: list[tuple[type[RecordStoreError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (InsufficientStockError, status.HTTP_400_BAD_REQUEST),
]


def status_for(error: RecordStoreError) -> int:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def handle_record_store_error(_request: Request, exc: RecordStoreError) -> JSONResponse:
    code = status_for(exc)
    if code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"Request failed: {exc}", error_type=type(exc).__name__)
        message = "Internal Server Error"
    else:
        message = str(exc)
    return JSONResponse(status_code=code, content={"statusCode": code, "message": message})


async def handle_request_validation_error(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = [
        f"{'.'.join(str(part) for part in error['loc'][1:])}: {error['msg']}"
        for error in exc.errors()
    ]
    code = status.HTTP_400_BAD_REQUEST
    return JSONResponse(status_code=code, content={"statusCode": code, "message": messages})


def create_app(
    container: ServiceContainer | None = None, seed: bool | None = None
) -> FastAPI:
    """Build the API.

    Args:
        container: Prebuilt services (a default container is built from
            settings at startup when omitted)
        seed: Override ``settings.seed.enabled`` for the startup seed
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        services = container or build_container()
        await services.startup(seed=seed)
        app.state.container = services
        logger.info("Record store API ready", prefix=settings.api.prefix)
        try:
            yield
        finally:
            await services.close()

    app = FastAPI(
        title="Record Store API",
        description="Record store inventory and ordering with MusicBrainz enrichment",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_exception_handler(RecordStoreError, handle_record_store_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.include_router(records_router, prefix=settings.api.prefix)
    app.include_router(orders_router, prefix=settings.api.prefix)
    return app
