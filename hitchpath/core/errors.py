"""Error taxonomy and the handlers that turn it into JSON error bodies."""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class HitchPathError(Exception):
    """Base for errors surfaced to the caller as ``{"error": ...}``."""

    status_code = 500

    def __init__(self, message: str, *, status_code: int | None = None, errors: list[dict] | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors or []

    @property
    def public_message(self) -> str:
        return self.message


class ValidationError(HitchPathError):
    """Malformed input; ``errors`` carries ``{field, message}`` items."""

    status_code = 400


class AuthError(HitchPathError):
    """Missing (401), invalid or expired (403) credentials."""

    status_code = 403


class NotFoundError(HitchPathError):
    status_code = 404


class GenerationError(HitchPathError):
    """The oracle reply could not be turned into a learning path.

    Never retried; the caller is expected to offer a manual retry.
    """

    status_code = 500

    @property
    def public_message(self) -> str:
        return "Failed to generate learning path."


def _error_body(message: str, errors: list[dict] | None = None) -> dict:
    body = {"error": message}
    if errors:
        body["errors"] = errors
    return body


async def hitchpath_error_handler(request: Request, exc: HitchPathError) -> JSONResponse:
    if isinstance(exc, GenerationError):
        logger.error("Generation failed for %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.public_message, exc.errors))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        errors.append({"field": ".".join(loc), "message": err.get("msg", "Invalid value")})
    return JSONResponse(status_code=400, content=_error_body("Invalid request.", errors))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=_error_body("Internal server error."))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HitchPathError, hitchpath_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
