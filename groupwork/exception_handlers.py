"""Map service errors and unexpected failures onto JSON responses."""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from groupwork.errors import ServiceError

logger = logging.getLogger(__name__)


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"kind": exc.kind, "detail": exc.detail},
        )

    # Catch all unhandled exceptions, storage errors included
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"kind": "internal", "detail": "Internal server error"},
        )
