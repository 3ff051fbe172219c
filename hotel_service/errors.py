"""
Domain error taxonomy and its HTTP rendering.

Services raise these at the violated precondition; the handlers below turn
them into the ``{"success": false, "message": ...}`` envelope every client
response uses.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class HotelError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "HOTEL_ERROR"
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(HotelError):
    code = "INVALID_INPUT"
    default_message = "Invalid input"


class Unauthorized(HotelError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"
    default_message = "Invalid credentials"


class Forbidden(HotelError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"
    default_message = "Insufficient permissions"


class NotFound(HotelError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    default_message = "Not found"


class Conflict(HotelError):
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"
    default_message = "Already exists"


class RoomUnavailable(HotelError):
    code = "ROOM_UNAVAILABLE"
    default_message = "Room is not available"


class InvalidDateRange(HotelError):
    code = "INVALID_DATE_RANGE"
    default_message = "Check-out date must be after check-in date"


class OccupancyExceeded(HotelError):
    code = "OCCUPANCY_EXCEEDED"
    default_message = "Number of guests exceeds room capacity"


def success_response(data: Any = None, message: str | None = None, **extra) -> dict:
    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(extra)
    return body


def error_response(message: str, code: str) -> dict:
    return {"success": False, "message": message, "error": code}


async def _hotel_error_handler(request: Request, exc: HotelError):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.message, exc.code),
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        problems.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    message = "; ".join(problems) or InvalidInput.default_message
    logger.info("rejected request %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(
        status_code=InvalidInput.status_code,
        content=error_response(message, InvalidInput.code),
    )


HTTP_ERROR_CODES = {
    status.HTTP_401_UNAUTHORIZED: Unauthorized.code,
    status.HTTP_403_FORBIDDEN: Forbidden.code,
    status.HTTP_404_NOT_FOUND: NotFound.code,
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


async def _http_error_handler(request: Request, exc: StarletteHTTPException):
    # routing failures (unknown path, wrong method) raised by the framework itself
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(str(exc.detail), HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")),
        headers=getattr(exc, "headers", None),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HotelError, _hotel_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
