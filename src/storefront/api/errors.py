"""Map storefront exceptions onto HTTP responses.

Protean's own handlers cover ValidationError and ObjectNotFoundError. The
handlers here are registered for the storefront subclasses so that the
more specific status codes win.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError
from protean.integrations.fastapi import register_exception_handlers

from storefront.exceptions import (
    ForbiddenError,
    InsufficientStockError,
    InvalidTransitionError,
    NotFoundError,
)

_STATUS_BY_ERROR = {
    InsufficientStockError: 400,
    InvalidTransitionError: 400,
    ForbiddenError: 403,
    NotFoundError: 404,
    ExpectedVersionError: 409,
}


def _messages(exc) -> dict:
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        return messages
    return {"_entity": [str(exc)]}


def _first_message(messages: dict) -> str:
    for value in messages.values():
        if isinstance(value, list) and value:
            return str(value[0])
        if value:
            return str(value)
    return "Request failed"


def _handler(status_code: int):
    async def handle(request: Request, exc: Exception) -> JSONResponse:
        messages = _messages(exc)
        return JSONResponse(
            status_code=status_code,
            content={"message": _first_message(messages), "errors": messages},
        )

    return handle


def register_storefront_exception_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    for exc_cls, status_code in _STATUS_BY_ERROR.items():
        app.add_exception_handler(exc_cls, _handler(status_code))
