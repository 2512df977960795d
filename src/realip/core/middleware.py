"""ASGI middleware that applies ``RealIP`` to every request.

Register on a FastAPI/Starlette app::

    app.add_middleware(RealIPMiddleware, real_ip=RealIP(headers, networks))

or wrap any ASGI callable directly with ``real_ip.wrap(app)``.

For ``http`` and ``websocket`` scopes the peer is read from
``scope["client"]``.  A peer that is not an IP literal is rejected before
the downstream app runs (``400 invalid remote address`` for HTTP, close
code 1008 for websockets).  Every other scope type passes through.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar

from starlette.datastructures import Headers
from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Receive, Scope, Send
from starlette.websockets import WebSocketClose

from .addr import join_host_port
from .base import InvalidRemoteAddress
from .resolver import RealIP

logger = logging.getLogger(__name__)

INVALID_REMOTE_ADDRESS = "invalid remote address"
_WS_POLICY_VIOLATION = 1008
_HANDLED_SCOPES = ("http", "websocket")

# ``host:port`` the downstream app sees for the current request; read by
# the log record filter in ``realip.infra.logging``.
current_client_address: ContextVar[str] = ContextVar(
    "realip_client_address", default=""
)


class RealIPMiddleware:
    """Replaces ``scope["client"]`` with the client behind a trusted proxy."""

    def __init__(self, app: ASGIApp, real_ip: RealIP) -> None:
        self.app = app
        self.real_ip = real_ip

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in _HANDLED_SCOPES:
            await self.app(scope, receive, send)
            return

        try:
            client = self.real_ip.resolve_client(
                scope.get("client"), Headers(scope=scope)
            )
        except InvalidRemoteAddress as exc:
            logger.warning("Rejecting request: %s", exc)
            await self._reject(scope, receive, send)
            return

        if client is not None:
            scope = {**scope, "client": client}
        host, port = scope["client"]
        token = current_client_address.set(join_host_port(host, port))
        try:
            await self.app(scope, receive, send)
        finally:
            current_client_address.reset(token)

    @staticmethod
    async def _reject(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "websocket":
            response = WebSocketClose(code=_WS_POLICY_VIOLATION)
        else:
            response = PlainTextResponse(INVALID_REMOTE_ADDRESS, status_code=400)
        await response(scope, receive, send)
