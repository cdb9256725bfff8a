# coachhub/errors.py
"""
Domain errors raised by repositories and services.

They subclass ValueError so callers that only care about "bad input" can keep
catching ValueError; the app-level handler in main.py maps them to HTTP.
"""
from __future__ import annotations

from fastapi import Request, status
from fastapi.responses import JSONResponse


class ServiceError(ValueError):
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_code: str = "invalid_request"

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class ValidationFailed(ServiceError):
    default_code = "validation_failed"


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_code = "not_found"


class ForbiddenError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_code = "forbidden"


class ConflictError(ServiceError):
    default_code = "conflict"


class CapacityError(ServiceError):
    default_code = "capacity_reached"


class InvalidStateError(ServiceError):
    default_code = "invalid_state"


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )
