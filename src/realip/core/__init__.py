"""Trusted-proxy client address resolution.

Three layers:

1. **addr** — ``host:port`` split/join, IP literal parsing and left-most
   IP token extraction from comma-separated header values.

2. **RealIP** — the trusted networks plus the header priority list.
   Built once (``InvalidNetwork`` on a bad CIDR), then read-only.

3. **RealIPMiddleware** — ASGI wrapper that rewrites ``scope["client"]``
   before the downstream app runs.
"""

from .addr import first_ip, join_host_port, parse_ip, split_host_port
from .base import InvalidNetwork, InvalidRemoteAddress, RealIPError
from .middleware import (
    INVALID_REMOTE_ADDRESS,
    RealIPMiddleware,
    current_client_address,
)
from .resolver import RealIP, parse_network

__all__ = [
    "INVALID_REMOTE_ADDRESS",
    "InvalidNetwork",
    "InvalidRemoteAddress",
    "RealIP",
    "RealIPError",
    "RealIPMiddleware",
    "current_client_address",
    "first_ip",
    "join_host_port",
    "parse_ip",
    "parse_network",
    "split_host_port",
]
