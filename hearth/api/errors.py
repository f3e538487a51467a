"""Map exceptions to the JSON error envelope."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from hearth.core.errors import DependencyError, HearthError, ValidationError
from hearth.schemas.common import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


def error_response(
    status_code: int,
    message: str,
    errors: list[ErrorDetail] | None = None,
) -> JSONResponse:
    body = ErrorResponse(message=message, errors=errors)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


def _field_name(loc: tuple) -> str:
    # Drop the "body"/"query"/"path" prefix
    parts = [str(part) for part in loc[1:]] if len(loc) > 1 else [str(part) for part in loc]
    return ".".join(parts)


async def hearth_error_handler(request: Request, exc: HearthError) -> JSONResponse:
    if isinstance(exc, ValidationError):
        return error_response(
            exc.status_code,
            exc.detail,
            [ErrorDetail(field=exc.field, message=exc.detail)],
        )
    if isinstance(exc, DependencyError):
        logger.error("Dependency failure", exc_info=exc, extra={"path": request.url.path})
        return error_response(exc.status_code, exc.public_message)
    return error_response(exc.status_code, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [ErrorDetail(field=_field_name(tuple(e["loc"])), message=e["msg"]) for e in exc.errors()]
    message = ", ".join(f"{e.field}: {e.message}" for e in errors) or "Validation failed"
    return error_response(status.HTTP_400_BAD_REQUEST, message, errors)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error", exc_info=exc, extra={"path": request.url.path})
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, DependencyError.public_message)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error", exc_info=exc, extra={"path": request.url.path})
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HearthError, hearth_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
