import logging
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("cart-api")

JSONAPI_MEDIA_TYPE = "application/vnd.api+json"
VALIDATION_FAILED_MESSAGE = "Unprocessable Entity: validation failed."


@dataclass
class Violation:
    property_path: str
    message: str
    pointer: Optional[str] = None


class CartApiError(Exception):
    status_code = 500

    def __init__(self, message: str, *, pointer: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.pointer = pointer

    def error_objects(self) -> List[Dict[str, Any]]:
        return [_error_object(self.status_code, self.message, self.pointer)]


class BadRequestError(CartApiError):
    status_code = 400


class AccessDeniedError(CartApiError):
    status_code = 403


class NotFoundError(CartApiError):
    status_code = 404


class ConflictError(CartApiError):
    status_code = 409


class UnprocessableEntityError(CartApiError):
    status_code = 422

    def __init__(
        self,
        message: str = VALIDATION_FAILED_MESSAGE,
        *,
        pointer: Optional[str] = None,
        violations: Optional[List[Violation]] = None,
    ) -> None:
        super().__init__(message, pointer=pointer)
        self.violations = violations or []

    def error_objects(self) -> List[Dict[str, Any]]:
        if not self.violations:
            return super().error_objects()
        return [
            _error_object(
                self.status_code,
                f"{violation.property_path}: {violation.message}",
                violation.pointer,
            )
            for violation in self.violations
        ]


def _error_object(status_code: int, detail: str, pointer: Optional[str] = None) -> Dict[str, Any]:
    error: Dict[str, Any] = {
        "status": str(status_code),
        "title": HTTPStatus(status_code).phrase,
        "detail": detail,
    }
    if pointer:
        error["source"] = {"pointer": pointer}
    return error


def error_document(errors: List[Dict[str, Any]], message: Optional[str] = None) -> Dict[str, Any]:
    document: Dict[str, Any] = {"jsonapi": {"version": "1.0"}, "errors": errors}
    if message:
        document["meta"] = {"message": message}
    return document


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(CartApiError)
    async def _cart_api_error(req: Request, exc: CartApiError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", req.method, req.url.path, exc.message)
        else:
            logger.warning(
                "%s %s rejected with %s: %s",
                req.method,
                req.url.path,
                exc.status_code,
                exc.message,
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_document(exc.error_objects(), exc.message),
            media_type=JSONAPI_MEDIA_TYPE,
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc(req: Request, exc: StarletteHTTPException):
        content = error_document([_error_object(exc.status_code, str(exc.detail))])
        return JSONResponse(
            status_code=exc.status_code,
            content=content,
            media_type=JSONAPI_MEDIA_TYPE,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def _unhandled_exc(req: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s: %s", req.method, req.url.path, exc)
        content = error_document([_error_object(500, "An unexpected error occurred.")])
        return JSONResponse(status_code=500, content=content, media_type=JSONAPI_MEDIA_TYPE)
