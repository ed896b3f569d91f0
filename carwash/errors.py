# carwash/errors.py
"""
Domain exceptions and the FastAPI handlers that turn them into responses.

Services raise these; routers let them propagate.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


class CarWashError(Exception):
    status_code = 400
    code = "BAD_REQUEST"
    default_detail = "Bad request."

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFoundError(CarWashError):
    status_code = 404
    code = "NOT_FOUND"
    default_detail = "Resource not found."


class ConflictError(CarWashError):
    status_code = 409
    code = "CONFLICT"
    default_detail = "Operation conflicts with the current state."


class DuplicateError(ConflictError):
    code = "DUPLICATE"
    default_detail = "Resource already exists."


class InvalidTransitionError(ConflictError):
    code = "INVALID_TRANSITION"
    default_detail = "Status transition not allowed."


class InsufficientStockError(ConflictError):
    code = "INSUFFICIENT_STOCK"
    default_detail = "Not enough items in inventory."


class InvalidLinkError(NotFoundError):
    code = "INVALID_LINK"
    default_detail = "Rating link is invalid."


class ExpiredLinkError(CarWashError):
    status_code = 410
    code = "EXPIRED_LINK"
    default_detail = "Rating link has expired or was already used."


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(CarWashError)
    async def carwash_error_handler(request: Request, exc: CarWashError):
        logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail, "code": exc.code})

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
        return JSONResponse(
            status_code=409,
            content={"detail": "Operation violates a data constraint", "code": "INTEGRITY_ERROR"},
        )
