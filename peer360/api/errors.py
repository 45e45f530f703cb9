"""Callable error envelope and its mapping from domain errors."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from peer360.domain.errors import NotFoundError

logger = logging.getLogger(__name__)

HTTP_STATUS_BY_CODE = {
    "invalid-argument": status.HTTP_400_BAD_REQUEST,
    "not-found": status.HTTP_404_NOT_FOUND,
    "resource-exhausted": status.HTTP_429_TOO_MANY_REQUESTS,
    "internal": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class CallableError(Exception):
    """Transport-level error with a callable status code."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    @property
    def http_status(self) -> int:
        return HTTP_STATUS_BY_CODE.get(self.code, status.HTTP_500_INTERNAL_SERVER_ERROR)


def to_callable_error(function_name: str, exc: Exception, fallback: str) -> CallableError:
    """
    Map an exception raised below a handler to a CallableError.

    Anything that is not already a transport error or a not-found is logged
    and reported as ``internal`` with its own message.
    """
    if isinstance(exc, CallableError):
        return exc
    if isinstance(exc, NotFoundError):
        return CallableError("not-found", str(exc) or fallback)
    logger.exception("Error in %s", function_name)
    return CallableError("internal", str(exc) or fallback)


def _envelope(code: str, message: str) -> dict:
    return {"error": {"status": code, "message": message}}


async def callable_error_handler(request: Request, exc: CallableError) -> JSONResponse:
    return JSONResponse(status_code=exc.http_status, content=_envelope(exc.code, exc.message))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # A missing or non-object body has no field path beyond "body"
    fields = sorted({".".join(str(p) for p in err["loc"][1:]) or "body" for err in exc.errors()})
    message = "Missing or invalid fields: " + ", ".join(fields)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope("invalid-argument", message),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CallableError, callable_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
