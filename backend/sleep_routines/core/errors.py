"""
Typed failures raised by services and the auth dependency.
Rendered by the handlers in main.py as {"success": false, "error": {"code", "message"}}.
"""

from __future__ import annotations

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

VALIDATION_ERROR = "VALIDATION_ERROR"
UNAUTHORIZED = "UNAUTHORIZED"
NOT_FOUND = "NOT_FOUND"
FORBIDDEN = "FORBIDDEN"
RATE_LIMITED = "RATE_LIMITED"


class ServiceError(Exception):
    code: str = "INTERNAL_ERROR"
    status_code: int = 500
    default_message: str = "Request failed."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class UnauthorizedError(ServiceError):
    code = UNAUTHORIZED
    status_code = 401
    default_message = "You must be signed in to perform this action."


class NotFoundError(ServiceError):
    """Row missing or owned by someone else; callers cannot tell the two apart."""

    code = NOT_FOUND
    status_code = 404
    default_message = "Not found."


class ForbiddenError(ServiceError):
    code = FORBIDDEN
    status_code = 403
    default_message = "Forbidden."


def error_body(code: str, message: str, details: list | None = None) -> dict:
    error: dict = {"code": code, "message": message}
    if details:
        error["details"] = details
    return {"success": False, "error": error}


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.code, exc.message),
        headers=headers,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content=error_body(VALIDATION_ERROR, "Invalid input.", details),
    )


# Sync: SlowAPIMiddleware calls it directly.
def rate_limit_error_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content=error_body(RATE_LIMITED, f"Rate limit exceeded: {exc.detail}"),
    )


_HTTP_CODES = {
    400: "BAD_REQUEST",
    401: UNAUTHORIZED,
    403: FORBIDDEN,
    404: NOT_FOUND,
    405: "METHOD_NOT_ALLOWED",
    429: RATE_LIMITED,
}


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Plain HTTPExceptions (unknown routes, auth register conflicts) get the same envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(_HTTP_CODES.get(exc.status_code, "HTTP_ERROR"), str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )
