"""Recover the real client address behind trusted reverse proxies."""

from realip.core import (
    InvalidNetwork,
    InvalidRemoteAddress,
    RealIP,
    RealIPError,
    RealIPMiddleware,
)

__version__ = "0.1.0"

__all__ = [
    "InvalidNetwork",
    "InvalidRemoteAddress",
    "RealIP",
    "RealIPError",
    "RealIPMiddleware",
]
