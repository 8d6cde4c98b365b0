"""Generic error envelope and the cross-origin gate that rejects through it."""

from __future__ import annotations

import logging
from typing import Iterable

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers

from .schemas import ApiResponse, ErrorInfo

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"


class OriginNotAllowed(Exception):
    def __init__(self, origin: str):
        super().__init__(f"Origin {origin!r} is not allowed by CORS")
        self.origin = origin


def generic_error_response() -> JSONResponse:
    body = ApiResponse(success=False, error=ErrorInfo(code=500, message=GENERIC_ERROR_MESSAGE))
    return JSONResponse(status_code=500, content=body.to_json())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    if isinstance(exc, OriginNotAllowed):
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
    else:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return generic_error_response()


class OriginGate:
    """Lets through requests without an Origin header or from an allowed origin.

    Anything else is answered with the generic 500 envelope and never
    reaches CORS handling or a route.
    """

    def __init__(self, app, allowed_origins: Iterable[str] = ()):
        self.app = app
        self.allowed_origins = frozenset(o.rstrip("/") for o in allowed_origins)

    def is_allowed(self, origin: str | None) -> bool:
        return not origin or origin.rstrip("/") in self.allowed_origins

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        origin = Headers(scope=scope).get("origin")
        if not self.is_allowed(origin):
            response = await unhandled_exception_handler(Request(scope), OriginNotAllowed(origin))
            await response(scope, receive, send)
            return

        await self.app(scope, receive, send)


class ErrorEnvelopeMiddleware:
    """Turns exceptions escaping a route into the generic 500 envelope.

    Sits inside CORSMiddleware so allowed origins can still read the error.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message):
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            if response_started:
                raise
            response = await unhandled_exception_handler(Request(scope), exc)
            await response(scope, receive, send)
