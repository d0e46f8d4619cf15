"""Error taxonomy shared by the guards, the handlers and the app."""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500
    message = "internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class Unauthenticated(ApiError):
    """Missing, malformed, expired or forged bearer token."""

    status_code = 401
    message = "unauthorized access"


class Forbidden(ApiError):
    """Role or ownership mismatch for an authenticated caller."""

    status_code = 403
    message = "forbidden access"


class UpstreamFailure(ApiError):
    """The payment processor rejected or could not serve a call."""

    status_code = 502
    message = "payment processor unavailable"


def error_body(message: str) -> dict:
    return {"error": True, "message": message}


async def api_error_handler(_request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database call failed on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content=error_body("database unavailable"))


async def conflict_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.info("Write conflict on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=409, content=error_body("document conflict"))
