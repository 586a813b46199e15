# ecommerce/errors.py
import logging
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

GENERIC_ERROR = "An unexpected error occurred. Please try again later."


class AppError(Exception):
    status_code = 400

    def __init__(self, message: str, errors: Optional[List[str]] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []
        if status_code is not None:
            self.status_code = status_code


class BadRequestError(AppError):
    status_code = 400


class NotFoundError(AppError):
    status_code = 404


class UnprocessableError(AppError):
    status_code = 422


class InsufficientStockError(BadRequestError):
    def __init__(self, available: int):
        super().__init__(f"Not enough stock available. Available: {available}")
        self.available = available


def error_body(status_code: int, message: str, errors: Optional[List[str]] = None) -> dict:
    return {"statusCode": status_code, "message": message, "errors": errors or []}


def _field_error(err: dict) -> str:
    loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc)
    return f"{field}: {err.get('msg')}" if field else err.get("msg", "Invalid value")


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.status_code, exc.message, exc.errors))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [_field_error(e) for e in exc.errors()]
    return JSONResponse(status_code=400, content=error_body(400, "Validation Failed", errors))


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def catch_all_middleware(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content=error_body(500, "Internal Server Error", [GENERIC_ERROR]))


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.middleware("http")(catch_all_middleware)
