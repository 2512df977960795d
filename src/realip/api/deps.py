"""FastAPI dependencies exposing the resolved client address.

``RealIPMiddleware`` has already rewritten ``scope["client"]`` by the time
these run, so they simply read it back.

    client_ip: ClientIPDep
"""

from typing import Annotated

from fastapi import Depends, Request

from realip.core.addr import join_host_port

_DEFAULT_UNKNOWN_IP = "unknown"


def get_client_ip(request: Request) -> str:
    """Return the client IP (``"unknown"`` when the server gave none)."""
    if request.client and request.client.host:
        return request.client.host
    return _DEFAULT_UNKNOWN_IP


def get_client_address(request: Request) -> str:
    """Return the client address as ``host:port``."""
    if request.client is None:
        return _DEFAULT_UNKNOWN_IP
    return join_host_port(request.client.host, request.client.port)


ClientIPDep = Annotated[str, Depends(get_client_ip)]
ClientAddressDep = Annotated[str, Depends(get_client_address)]
