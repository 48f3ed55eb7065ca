from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from framework.logging.logger import get_logger
from framework.response import ResponseModel
from typing import Any
from framework.config import settings
from framework.exceptions.errors import NotFoundError, PersistenceError, ValidationError

logger = get_logger("exception_handler")


class BusinessException(Exception):
    """Base class for business exceptions."""
    def __init__(self, message: str, status_code: int = 200, code: int = 400, detail: Any = None):
        self.message = message
        self.status_code = status_code
        self.code = code
        self.detail = detail
        super().__init__(message)


# Repository error -> (HTTP status, envelope code, log level)
REPOSITORY_ERRORS = (
    (NotFoundError, status.HTTP_404_NOT_FOUND, "warning"),
    (ValidationError, status.HTTP_409_CONFLICT, "warning"),
    (PersistenceError, status.HTTP_503_SERVICE_UNAVAILABLE, "critical"),
)


def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    trace_id = getattr(request.state, "trace_id", "unknown")

    if isinstance(exc, BusinessException):
        logger.warning(f"Trace[{trace_id}] - BusinessError: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=ResponseModel.fail(code=exc.code, message=exc.message, data=exc.detail)
        )

    for error_type, http_status, level in REPOSITORY_ERRORS:
        if isinstance(exc, error_type):
            logger.log(level.upper(), f"Trace[{trace_id}] - {error_type.__name__}: {exc.message}")
            return JSONResponse(
                status_code=http_status,
                content=ResponseModel.fail(code=http_status, message=exc.message, data=exc.detail)
            )

    if isinstance(exc, RequestValidationError):
        logger.error(f"Trace[{trace_id}] - ValidationError: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=ResponseModel.fail(code=422, message="Invalid request parameters", data=jsonable_encoder(exc.errors()))
        )

    if isinstance(exc, SQLAlchemyError):
        logger.critical(f"Trace[{trace_id}] - DatabaseError: {str(exc)}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ResponseModel.fail(code=500, message="Service temporarily unavailable")
        )

    logger.opt(exception=True).error(f"Trace[{trace_id}] - UncaughtException: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ResponseModel.fail(
            code=500,
            message="System busy, please try again later",
            data={"trace_id": trace_id} if settings.DEBUG else None
        )
    )
