"""CORS and request tracing middleware."""

import uuid
import time
import logging

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from tribe_console.core.config import settings

logger = logging.getLogger("tribe_console")

REQUEST_ID_HEADER = "X-Request-Id"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log one access line per response.

    An id forwarded by the upstream console is reused so audit entries can
    be matched with the caller's own logs.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER, "").strip()[:36] or str(uuid.uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()

        response: Response = await call_next(request)

        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time-Ms"] = str(elapsed_ms)

        logger.info(
            "%s %s -> %s in %sms role=%s rid=%s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request.headers.get(settings.ROLE_HEADER) or "-",
            request_id,
        )
        return response


def setup_middleware(app: FastAPI) -> None:
    """Install CORS and request tracing."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", REQUEST_ID_HEADER, settings.AUTH_HEADER, settings.ROLE_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(RequestIdMiddleware)
