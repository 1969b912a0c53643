"""
Error responses shared by the API routers.

Every failure body carries an ``errorMessage``; validation failures add
one ``validationErrors`` entry per offending field.
"""
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

log = structlog.get_logger(__name__)

GENERIC_ERROR_MESSAGE = "Internal Server Error. Please try again later. "
VALIDATION_ERROR_MESSAGE = "validation failure"


def error_response(
    status_code: int,
    message: str,
    validation_errors: Optional[list[dict]] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    """Build a JSON error body in the shape both endpoints share."""
    content = {"errorMessage": message}
    if validation_errors is not None:
        content["validationErrors"] = validation_errors
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _field_path(error: dict) -> str:
    loc = list(error.get("loc") or ())
    if loc and loc[0] == "body":
        loc = loc[1:]
    if error.get("type") == "json_invalid" or not loc:
        return "body"
    return ".".join(str(part) for part in loc)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Map pydantic request validation errors to a 400 with per-field entries."""
    errors = [
        {"path": _field_path(error), "message": error.get("msg", "")}
        for error in exc.errors()
    ]
    log.info("request.validation_failed", path=request.url.path, errors=len(errors))
    return error_response(400, VALIDATION_ERROR_MESSAGE, validation_errors=errors)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    log.exception("request.unhandled_error", path=request.url.path)
    return error_response(500, GENERIC_ERROR_MESSAGE)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
