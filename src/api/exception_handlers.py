"""Exception handlers for the API.

Every error leaves the API as ``{"error": ..., "code": ..., "details": ...}``.
"""

import typing as t
from copy import deepcopy

import structlog
from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404, HttpRequest
from ninja.errors import AuthenticationError, HttpError
from ninja.errors import ValidationError as SchemaValidationError
from ninja.responses import Response
from ninja_extra.exceptions import APIException

from common.exceptions import AppError

logger = structlog.get_logger(__name__)

SENSITIVE_KEYS = {"password", "token", "x-api-key", "authorization", "authentication", "cookie"}

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    429: "RATE_LIMIT",
}


def _error(status: int, message: str, code: str, details: t.Any = None) -> Response:
    data: dict[str, t.Any] = {"error": message, "code": code}
    if details is not None:
        data["details"] = details
    return Response(data, status=status)


def handle_app_error(request: HttpRequest, exc: AppError | t.Type[AppError]) -> Response:
    """Errors raised by the services carry their own status and code."""
    assert isinstance(exc, AppError)
    if exc.status_code >= 500:
        logger.error("app_error", code=exc.code, error=exc.message, path=request.path)
    return Response(exc.to_payload(), status=exc.status_code)


def handle_schema_validation_error(
    request: HttpRequest, exc: SchemaValidationError | t.Type[SchemaValidationError]
) -> Response:
    """Request bodies, query strings and path parameters that fail their schema."""
    assert isinstance(exc, SchemaValidationError)
    return _error(400, "Validation failed", "VALIDATION_ERROR", exc.errors)


def handle_django_validation_error(
    request: HttpRequest, exc: DjangoValidationError | t.Type[DjangoValidationError]
) -> Response:
    """Model validation (``full_clean``) failures.

    Args:
        request: The incoming HTTP request.
        exc: The exception.
    """
    assert isinstance(exc, DjangoValidationError)
    logger.info("model_validation_failed", path=request.path)
    details = exc.message_dict if hasattr(exc, "error_dict") else {"__all__": exc.messages}
    return _error(400, "Validation failed", "VALIDATION_ERROR", details)


def handle_authentication_error(
    request: HttpRequest, exc: AuthenticationError | t.Type[AuthenticationError]
) -> Response:
    return _error(401, "Unauthorized", "UNAUTHORIZED")


def handle_api_exception(request: HttpRequest, exc: APIException | t.Type[APIException]) -> Response:
    """Permission denials and throttling from ninja-extra."""
    assert isinstance(exc, APIException)
    status = exc.status_code
    response = _error(status, str(exc.detail), HTTP_ERROR_CODES.get(status, "ERROR"))
    wait = getattr(exc, "wait", None)
    if status == 429 and wait:
        response["Retry-After"] = str(int(wait))
    return response


def handle_http_error(request: HttpRequest, exc: HttpError | t.Type[HttpError]) -> Response:
    assert isinstance(exc, HttpError)
    return _error(exc.status_code, exc.message, HTTP_ERROR_CODES.get(exc.status_code, "ERROR"))


def handle_not_found(request: HttpRequest, exc: Http404 | t.Type[Http404]) -> Response:
    return _error(404, "Resource not found", "NOT_FOUND")


def handle_general_exception(request: HttpRequest, exc: Exception | t.Type[Exception]) -> Response:
    """Handle any other exception.

    The failure is logged with the request context and the client gets a generic 500
    without any detail about the cause.
    """
    logger.exception(
        "INTERNAL_SERVER_ERROR",
        method=request.method,
        path=request.path,
        headers=obfuscate(dict(request.headers)),
        query=obfuscate(request.GET.dict()),
    )
    return _error(500, "Internal server error", "INTERNAL_ERROR")


def obfuscate(data: dict[str, t.Any]) -> dict[str, t.Any]:
    """Obfuscate sensitive data in payloads and headers."""
    new_data = deepcopy(data)
    for key in data.keys():
        if key.lower() in SENSITIVE_KEYS:
            new_data[key] = "********"
    return new_data


EXCEPTION_HANDLERS: dict[type[Exception], t.Callable[..., Response]] = {
    Exception: handle_general_exception,
    AppError: handle_app_error,
    SchemaValidationError: handle_schema_validation_error,
    DjangoValidationError: handle_django_validation_error,
    AuthenticationError: handle_authentication_error,
    APIException: handle_api_exception,
    HttpError: handle_http_error,
    Http404: handle_not_found,
}
