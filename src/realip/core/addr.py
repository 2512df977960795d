"""Network address primitives.

``host:port`` handling follows the usual socket-library rules: IPv6 hosts
must be bracketed (``[::1]:80``), the port is everything after the last
colon, and a bare host without a port is an error.

Pure functions — no I/O, safe to call from any thread or coroutine.
"""

from __future__ import annotations

import ipaddress

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address

_ZONE_SEPARATOR = "%"
_TOKEN_SEPARATOR = ","


def split_host_port(address: str) -> tuple[str, str]:
    """Split ``address`` into ``(host, port)``.

    Raises:
        ValueError: if there is no port, or the colons/brackets are
            malformed (e.g. an unbracketed IPv6 literal).
    """
    colon = address.rfind(":")
    if colon < 0:
        raise ValueError(f"missing port in address {address!r}")

    if address.startswith("["):
        end = address.find("]")
        if end < 0:
            raise ValueError(f"missing ']' in address {address!r}")
        if end + 1 != colon:
            if end + 1 == len(address):
                raise ValueError(f"missing port in address {address!r}")
            raise ValueError(f"unexpected text after ']' in address {address!r}")
        host = address[1:end]
        if "[" in address[1:colon] or "]" in address[end + 1 :]:
            raise ValueError(f"unexpected bracket in address {address!r}")
    else:
        host = address[:colon]
        if ":" in host:
            raise ValueError(f"too many colons in address {address!r}")
        if "[" in address or "]" in address:
            raise ValueError(f"unexpected bracket in address {address!r}")

    return host, address[colon + 1 :]


def join_host_port(host: str, port: str | int) -> str:
    """Inverse of :func:`split_host_port`; brackets hosts containing a colon."""
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def parse_ip(value: str) -> IPAddress | None:
    """Parse an IPv4/IPv6 literal, returning ``None`` if it is not one.

    Zoned IPv6 literals (``fe80::1%eth0``) are rejected.
    """
    if not value or _ZONE_SEPARATOR in value:
        return None
    try:
        return ipaddress.ip_address(value)
    except ValueError:
        return None


def first_ip(value: str) -> str:
    """Return the left-most comma-separated token of ``value`` that is an IP.

    Tokens are whitespace-stripped and returned verbatim (not normalised).
    Returns ``""`` when no token parses.
    """
    for token in value.split(_TOKEN_SEPARATOR):
        token = token.strip()
        if parse_ip(token) is not None:
            return token
    return ""
