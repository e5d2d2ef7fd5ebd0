import logging
import time
import uuid
from contextvars import ContextVar
from typing import Optional
from jose import jwt, JWTError
from starlette.types import ASGIApp, Message, Receive, Scope, Send
from app.core.config import JWT_SECRET_KEY, ALGORITHM

logger = logging.getLogger("tracker.request")

request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
user_id_ctx: ContextVar[Optional[str]] = ContextVar("user_id", default=None)


def _bearer_subject(scope: Scope) -> Optional[str]:
    """``sub`` of the Bearer token on the request, if it decodes."""
    for name, value in scope.get("headers", []):
        if name != b"authorization":
            continue
        scheme, _, token = value.decode("latin-1").partition(" ")
        if scheme.lower() != "bearer" or not token:
            return None
        try:
            claims = jwt.decode(token, JWT_SECRET_KEY, algorithms=[ALGORITHM], options={"verify_aud": False})
        except JWTError as e:
            logger.debug("Ignoring undecodable bearer token", extra={"error": str(e)})
            return None
        return claims.get("sub")
    return None


class ContextLoggingMiddleware:
    """
    Tags each HTTP request with a fresh request id and the token subject.

    Both land in context variables read by the access log and by service
    spans; the id is echoed back as ``x-request-id``. Authentication itself
    happens in the route dependencies.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = str(uuid.uuid4())
        request_id_ctx.set(request_id)
        user_id_ctx.set(_bearer_subject(scope))

        async def send_with_request_id(message: Message):
            if message["type"] == "http.response.start":
                message["headers"] = list(message.get("headers", [])) + [(b"x-request-id", request_id.encode())]
            await send(message)

        await self.app(scope, receive, send_with_request_id)


class RequestLoggingMiddleware:
    """One access-log line per HTTP request."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = time.perf_counter()
        status_code = None

        async def capture_status(message: Message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, capture_status)
        finally:
            logger.info(
                "%s %s -> %s",
                scope["method"],
                scope["path"],
                status_code,
                extra={
                    "method": scope["method"],
                    "path": scope["path"],
                    "status_code": status_code,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                    "request_id": request_id_ctx.get(),
                    "user_id": user_id_ctx.get(),
                },
            )


def get_request_id() -> Optional[str]:
    return request_id_ctx.get()


def get_user_id() -> Optional[str]:
    return user_id_ctx.get()
