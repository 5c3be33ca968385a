"""
Exception handlers mapping domain errors to JSON responses
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from netcafe.core.exceptions import NetCafeError

logger = structlog.get_logger(__name__)


def error_body(exc: NetCafeError) -> dict:
    return {
        "code": exc.code.value,
        "message": exc.message,
        "details": exc.details,
    }


async def netcafe_error_handler(request: Request, exc: NetCafeError) -> JSONResponse:
    """Convert a domain error to {code, message, details} with its status code"""
    if exc.status_code >= 500:
        logger.error(
            "Request failed",
            path=request.url.path,
            code=exc.code.value,
            error=exc.message,
        )
    return JSONResponse(status_code=exc.status_code, content=error_body(exc))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NetCafeError, netcafe_error_handler)
