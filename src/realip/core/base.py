"""Exceptions raised by the real-IP resolver."""

from __future__ import annotations


class RealIPError(Exception):
    """Base class for every error raised by ``realip``."""


class InvalidNetwork(RealIPError, ValueError):
    """Raised at construction time when a trusted CIDR cannot be parsed."""

    def __init__(self, network: str) -> None:
        super().__init__(f"invalid network: {network!r}")
        self.network = network


class InvalidRemoteAddress(RealIPError, ValueError):
    """Raised when the peer address is not a ``host:port`` with an IP host."""

    def __init__(self, address: object) -> None:
        super().__init__(f"invalid remote address: {address!r}")
        self.address = address
