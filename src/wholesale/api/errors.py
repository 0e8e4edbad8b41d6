"""Translate domain errors into HTTP responses.

Each error kind keeps its own status code so clients can tell "fix your
input" (400) from "retry or refresh" (409).
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError

from wholesale.shared.exceptions import AuthorizationError, InvalidTransitionError

logger = structlog.get_logger(__name__)


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"kind": "validation", "errors": exc.messages})


async def _not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"kind": "not_found", "detail": str(exc)})


async def _conflict(request: Request, exc: InvalidOperationError) -> JSONResponse:
    content = {"kind": "conflict", "detail": str(exc)}
    if isinstance(exc, InvalidTransitionError):
        content["current"] = exc.current
        content["target"] = exc.target
    return JSONResponse(status_code=409, content=content)


async def _forbidden(request: Request, exc: AuthorizationError) -> JSONResponse:
    logger.warning("Request denied", path=request.url.path, reason=str(exc))
    return JSONResponse(status_code=403, content={"kind": "authorization", "detail": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(InvalidOperationError, _conflict)
    app.add_exception_handler(AuthorizationError, _forbidden)
