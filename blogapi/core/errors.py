import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "internal server error"
    headers = None

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "invalid request"


class ConflictError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "resource already exists"


class UnauthenticatedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "no token provided"
    headers = {"WWW-Authenticate": "Bearer"}


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "access denied, forbidden"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, kind: str, resource_id=None):
        self.kind = kind
        self.resource_id = resource_id
        super().__init__(f"{kind} not found")


class AssetUploadError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "image upload failed"


class AssetGatewayError(Exception):
    """The external image store rejected a call or could not be reached."""


def first_error_message(errors) -> str:
    """Render the first pydantic error as a single human readable line."""
    if not errors:
        return ValidationError.message
    error = errors[0]
    field = next((str(part) for part in reversed(error.get("loc", ())) if isinstance(part, str)), None)
    if field and field not in ("body", "query", "path", "form"):
        return f'"{field}" {error["msg"].lower()}'
    return error["msg"]


async def app_error_handler(request: Request, exc: AppError):
    if isinstance(exc, NotFoundError):
        logger.info(f"{exc.kind} {exc.resource_id} not found on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
        headers=exc.headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": first_error_message(exc.errors())},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
