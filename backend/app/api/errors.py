"""Global error handlers ensuring request_id is included in JSON responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.request_id import get_request_id
from app.domain.chat.exceptions import ChatError, ChatStoreError, RoomNotFound
from app.domain.matching.exceptions import MatchError, StudentNotFound

LOGGER = logging.getLogger(__name__)


def status_for(exc: Exception) -> int:
    """Map a domain error onto the HTTP status an endpoint should answer with."""
    if isinstance(exc, (RoomNotFound, StudentNotFound)):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ChatStoreError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    # validation, malformed input and any other domain error
    return status.HTTP_400_BAD_REQUEST


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exc_handler(request: Request, exc: StarletteHTTPException):  # type: ignore[override]
        rid = get_request_id(request)
        payload = {"detail": exc.detail, "request_id": rid}
        return JSONResponse(status_code=exc.status_code, content=payload, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exc_handler(request: Request, exc: RequestValidationError):  # type: ignore[override]
        rid = get_request_id(request)
        payload = {"detail": "validation_error", "errors": jsonable_encoder(exc.errors()), "request_id": rid}
        return JSONResponse(status_code=422, content=payload)

    @app.exception_handler(ChatError)
    async def chat_exc_handler(request: Request, exc: ChatError):  # type: ignore[override]
        return _domain_response(request, exc, exc.reason)

    @app.exception_handler(MatchError)
    async def match_exc_handler(request: Request, exc: MatchError):  # type: ignore[override]
        return _domain_response(request, exc, exc.reason)


def _domain_response(request: Request, exc: Exception, reason: str) -> JSONResponse:
    rid = get_request_id(request)
    code = status_for(exc)
    if code >= 500:
        LOGGER.warning("domain_error", extra={"reason": reason, "request_id": rid}, exc_info=exc)
    return JSONResponse(status_code=code, content={"detail": reason, "request_id": rid})
