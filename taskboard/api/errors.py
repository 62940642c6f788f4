import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..errors import AppError, AuthenticationError, ValidationError

logger = logging.getLogger("taskboard.errors")

_LOCATION_PREFIXES = ("body", "query", "path", "header")


def _field_name(loc) -> str:
    parts = [str(p) for p in loc if p not in _LOCATION_PREFIXES]
    return ".".join(parts) or (str(loc[-1]) if loc else "body")


def validation_errors_from_pydantic(errors) -> list[dict]:
    """Flatten Pydantic error dicts into [{field, message}], one entry per violation."""
    flattened = []
    for err in errors:
        field = _field_name(err.get("loc", ()))
        if err.get("type") == "missing":
            message = f"{field[:1].upper()}{field[1:]} is required"
        else:
            message = err.get("msg", "Invalid value")
        flattened.append({"field": field, "message": message})
    return flattened


def _envelope(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message, **extra})


def register_exception_handlers(app: FastAPI) -> None:
    """Attach JSON error handlers producing the {success: false, message} envelope."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        extra = {}
        if isinstance(exc, ValidationError):
            extra["errors"] = exc.errors
        response = _envelope(exc.status_code, exc.message, **extra)
        if isinstance(exc, AuthenticationError):
            response.headers["WWW-Authenticate"] = "Bearer"
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            message = "Route not found"
        else:
            message = exc.detail if isinstance(exc.detail, str) else "HTTPError"
        return _envelope(exc.status_code, message)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return _envelope(
            400,
            "Validation failed",
            errors=validation_errors_from_pydantic(exc.errors()),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "unhandled error method=%s path=%s request_id=%s",
            request.method,
            request.url.path,
            getattr(request.state, "request_id", "-"),
        )
        return _envelope(500, "Server Error")
