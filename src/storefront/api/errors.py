"""Maps domain and transport exceptions onto enveloped HTTP responses."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from protean.exceptions import (
    ExpectedVersionError,
    InvalidOperationError,
    InvalidStateError,
    ObjectNotFoundError,
    ValidationError,
)
from starlette.exceptions import HTTPException

from storefront.api.envelope import failure
from storefront.shared.errors import AuthenticationError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"
VERSION_CONFLICT_MESSAGE = "The resource was changed by another request, please retry"


def _first_message(messages, default: str) -> str:
    """Pull a human-readable line out of a Protean messages payload."""
    if isinstance(messages, dict):
        for value in messages.values():
            found = _first_message(value, "")
            if found:
                return found
        return default
    if isinstance(messages, (list, tuple)):
        for value in messages:
            found = _first_message(value, "")
            if found:
                return found
        return default
    if messages:
        return str(messages)
    return default


def _messages(exc) -> object:
    """Error payload: ``messages`` where Protean sets it, else the dict or list passed as first argument."""
    messages = getattr(exc, "messages", None)
    if messages:
        return messages
    if exc.args and isinstance(exc.args[0], (dict, list, tuple)):
        return exc.args[0]
    return str(exc)


def _field_errors(messages) -> dict:
    if isinstance(messages, dict):
        return {key: value if isinstance(value, list) else [value] for key, value in messages.items()}
    return {"_entity": [str(messages)]}


async def _validation_error(request: Request, exc: ValidationError):
    messages = _messages(exc)
    return failure(422, _first_message(messages, "Validation failed"), {"errors": _field_errors(messages)})


async def _request_validation_error(request: Request, exc: RequestValidationError):
    errors = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.setdefault(".".join(location) or "_request", []).append(error.get("msg", "Invalid value"))
    first_field, first_messages = next(iter(errors.items()), ("_request", ["Invalid request"]))
    return failure(422, f"{first_field}: {first_messages[0]}", {"errors": errors})


async def _not_found(request: Request, exc: ObjectNotFoundError):
    return failure(404, _first_message(_messages(exc), "Not found"))


async def _conflict(request: Request, exc: InvalidStateError):
    return failure(409, _first_message(_messages(exc), "Conflict"))


async def _version_conflict(request: Request, exc: ExpectedVersionError):
    logger.warning("Concurrent write rejected", method=request.method, path=request.url.path, error=str(exc))
    return failure(409, VERSION_CONFLICT_MESSAGE)


async def _invalid_operation(request: Request, exc: InvalidOperationError):
    return failure(422, _first_message(_messages(exc), "Operation not allowed"))


async def _unauthorized(request: Request, exc: AuthenticationError):
    return failure(401, _first_message(_messages(exc), "Unauthorized"))


async def _http_exception(request: Request, exc: HTTPException):
    message = exc.detail if isinstance(exc.detail, str) else _first_message(exc.detail, "Request failed")
    response = failure(exc.status_code, message)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def _unhandled(request: Request, exc: Exception):
    logger.error(
        "Unhandled error",
        method=request.method,
        path=request.url.path,
        error=str(exc),
        exc_info=exc,
    )
    return failure(500, INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(InvalidStateError, _conflict)
    app.add_exception_handler(ExpectedVersionError, _version_conflict)
    app.add_exception_handler(InvalidOperationError, _invalid_operation)
    app.add_exception_handler(AuthenticationError, _unauthorized)
    app.add_exception_handler(HTTPException, _http_exception)
    app.add_exception_handler(Exception, _unhandled)
