"""Error Handlers — global exception handlers for the marketplace API.

Invariants:
    - MarketplaceError -> its own http_status with {error, message, category, details?}
    - RequestValidationError -> 400 with field-level details [{field, message, type}]
    - Exception (catch-all) -> 500, never leaks internal details
    - Status codes come from the error type; message text is never inspected

Design Decisions:
    - Three-layer handler: domain (MarketplaceError), validation (Pydantic),
      catch-all (Exception)
    - Field paths drop the request-part prefix (body/query/path) so clients see
      "minimum_investment", not "body.minimum_investment"
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core import messages
from app.core.errors import ErrorSeverity, MarketplaceError

logger = logging.getLogger(__name__)

_REQUEST_PARTS = ("body", "query", "path", "header", "cookie")


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_marketplace_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_marketplace_error_handler(app: FastAPI) -> None:

    @app.exception_handler(MarketplaceError)
    async def marketplace_error_handler(request: Request, exc: MarketplaceError):
        """Handle all marketplace domain/infrastructure errors."""
        log = logger.error if exc.severity == ErrorSeverity.CRITICAL else logger.warning
        log(
            f"{type(exc).__name__}: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                **exc.context.log_fields(),
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=jsonable_encoder(build_validation_error_response(exc)),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "INTERNAL_ERROR",
                "message": messages.UNEXPECTED_ERROR,
                "category": "internal",
            },
        )


def field_path(loc: tuple | list) -> str:
    parts = list(loc)
    if parts and parts[0] in _REQUEST_PARTS:
        parts = parts[1:]
    return ".".join(str(p) for p in parts)


def _clean_message(msg: str) -> str:
    # Pydantic prefixes messages raised from validators
    return msg.removeprefix("Value error, ")


def build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": "VALIDATION_ERROR",
        "message": messages.VALIDATION_FAILED,
        "category": "validation",
        "details": [
            {
                "field": field_path(e["loc"]),
                "message": _clean_message(e["msg"]),
                "type": e["type"],
            }
            for e in exc.errors()
        ],
    }
