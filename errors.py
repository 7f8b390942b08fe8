"""Application-wide exception hierarchy and the FastAPI handlers that render it."""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class MarketplaceError(Exception):
    """Base error; carries the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        result = {"message": self.message}
        if self.details is not None:
            result["details"] = self.details
        return result


class ValidationError(MarketplaceError):
    """Missing or invalid request fields, rejected uploads."""

    status_code = 400

    def __init__(self, message: str, details: Optional[Any] = None, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message, details)
        self.errors = errors

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        if self.errors is not None:
            result["errors"] = self.errors
        return result


class AuthError(MarketplaceError):
    """Credential mismatch."""

    status_code = 401


class ForbiddenError(AuthError):
    """Download token missing, expired or issued for another file."""

    status_code = 403


class NotFoundError(MarketplaceError):
    status_code = 404


class ConflictError(MarketplaceError):
    status_code = 409


class DependencyError(MarketplaceError):
    """The database or the payment gateway failed."""

    status_code = 500


def field_errors(raw_errors) -> List[Dict[str, str]]:
    """Flatten pydantic error entries into {field, error} pairs."""
    errors = []
    for err in raw_errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path", "form")]
        errors.append({"field": ".".join(loc), "error": err.get("msg", "invalid")})
    return errors


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(MarketplaceError)
    async def marketplace_error_handler(request: Request, exc: MarketplaceError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"message": "Missing or invalid fields", "errors": field_errors(exc.errors())},
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("Unhandled database error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"message": "Database error"})
