"""Trusted-proxy client address resolution.

``RealIP`` holds the trusted networks and the header priority list.  It is
built once at startup and only read afterwards, so one instance can be
shared by every concurrent request without locking.

Per request:

1. Split the peer ``host:port``; a non-IP host is ``InvalidRemoteAddress``.
2. If the peer is inside a trusted network, take the first configured
   header that is present and non-empty.
3. Use the left-most IP token of that header as the client, keeping the
   peer's original port.

Only the immediate peer is checked against the trusted networks.  The
header value is taken at face value; the hops listed after the left-most
token are not validated.
"""

from __future__ import annotations

import ipaddress
import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from .addr import IPAddress, first_ip, join_host_port, parse_ip, split_host_port
from .base import InvalidNetwork, InvalidRemoteAddress

if TYPE_CHECKING:
    from starlette.types import ASGIApp

    from realip.configs.system import RealIPConfig

logger = logging.getLogger(__name__)

IPNetwork = ipaddress.IPv4Network | ipaddress.IPv6Network

_CIDR_SEPARATOR = "/"


def parse_network(value: str) -> IPNetwork:
    """Parse a ``address/prefixlen`` string.

    Host bits may be set (``10.1.2.3/8`` → ``10.0.0.0/8``), but the prefix
    length is mandatory and must be a decimal bit count (no netmask or
    hostmask forms).

    Raises:
        InvalidNetwork: if ``value`` is not a CIDR.
    """
    if _CIDR_SEPARATOR not in value:
        raise InvalidNetwork(value)
    address, _, prefixlen = value.partition(_CIDR_SEPARATOR)
    if parse_ip(address) is None or not prefixlen.isdigit():
        raise InvalidNetwork(value)
    try:
        return ipaddress.ip_network(value, strict=False)
    except ValueError:
        raise InvalidNetwork(value) from None


def _match_form(network: IPNetwork) -> IPNetwork:
    """IPv4-mapped IPv6 networks (``::ffff:a.b.c.d/96+``) as plain IPv4."""
    if isinstance(network, ipaddress.IPv6Network) and network.prefixlen >= 96:
        mapped = network.network_address.ipv4_mapped
        if mapped is not None:
            return ipaddress.IPv4Network((mapped, network.prefixlen - 96))
    return network


class RealIP:
    """Rewrites the peer address when the connection comes from a trusted proxy.

    Usage::

        real_ip = RealIP(["X-Forwarded-For", "X-Real-IP"], ["10.0.0.0/8"])
        app = real_ip.wrap(app)

    Args:
        headers: Header names in priority order; the first one present with
            a non-empty value wins.  Kept verbatim (duplicates allowed).
        networks: Trusted CIDRs.  An empty list trusts nothing.

    Raises:
        InvalidNetwork: on the first malformed CIDR; no instance is created.
    """

    __slots__ = ("_headers", "_networks", "_trusted")

    def __init__(self, headers: Iterable[str], networks: Iterable[str]) -> None:
        self._networks: tuple[IPNetwork, ...] = tuple(
            parse_network(network) for network in networks
        )
        self._trusted: tuple[IPNetwork, ...] = tuple(
            _match_form(network) for network in self._networks
        )
        self._headers: tuple[str, ...] = tuple(headers)

    @classmethod
    def from_config(cls, config: RealIPConfig) -> RealIP:
        """Build from the ``real_ip`` config section."""
        real_ip = cls(config.headers, config.trusted_networks)
        logger.info(
            "RealIP: trusting %d network(s) %s, headers=%s",
            len(real_ip.networks),
            [str(network) for network in real_ip.networks],
            list(real_ip.headers),
        )
        return real_ip

    @property
    def headers(self) -> tuple[str, ...]:
        return self._headers

    @property
    def networks(self) -> tuple[IPNetwork, ...]:
        return self._networks

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(headers={list(self._headers)!r}, "
            f"networks={[str(n) for n in self._networks]!r})"
        )

    # -----------------------------------------------------------------
    # Request-time steps
    # -----------------------------------------------------------------

    @staticmethod
    def parse_peer(address: str) -> tuple[IPAddress, str]:
        """Split a ``host:port`` peer address into ``(ip, port)``.

        Raises:
            InvalidRemoteAddress: if the address cannot be split or the host
                is not an IP literal.
        """
        try:
            host, port = split_host_port(address)
        except ValueError:
            raise InvalidRemoteAddress(address) from None
        ip = parse_ip(host)
        if ip is None:
            raise InvalidRemoteAddress(address)
        return ip, port

    def is_trusted(self, ip: IPAddress) -> bool:
        """Return ``True`` if ``ip`` is inside any trusted network.

        IPv4-mapped IPv6 peers and networks are compared in their IPv4 form,
        so ``::ffff:8.8.8.8`` matches both ``8.8.0.0/16`` and
        ``::ffff:8.8.0.0/112``.
        """
        if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
            ip = ip.ipv4_mapped
        for network in self._trusted:
            if ip in network:
                return True
        return False

    def select_header(self, headers: Mapping[str, str]) -> str:
        """Return the first configured header with a non-empty value, or ``""``.

        ``headers`` should do case-insensitive lookup (e.g. Starlette's
        ``Headers``).
        """
        for name in self._headers:
            value = headers.get(name)
            if value:
                return value
        return ""

    def client_ip(self, headers: Mapping[str, str]) -> str:
        """Return the client IP advertised by a trusted peer, or ``""``."""
        value = self.select_header(headers)
        if not value:
            return ""
        return first_ip(value)

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def resolve(self, peer_address: str, headers: Mapping[str, str]) -> str:
        """Return the effective ``host:port`` for a request.

        The original ``peer_address`` is returned unchanged unless the peer
        is trusted and a header yields a valid IP; then that IP is joined
        with the original port.

        Raises:
            InvalidRemoteAddress: see :meth:`parse_peer`.
        """
        ip, port = self.parse_peer(peer_address)
        if not self.is_trusted(ip):
            return peer_address
        candidate = self.client_ip(headers)
        if not candidate:
            return peer_address
        return join_host_port(candidate, port)

    def resolve_client(
        self, client: Sequence[Any] | None, headers: Mapping[str, str]
    ) -> tuple[str, Any] | None:
        """ASGI flavour of :meth:`resolve` working on ``(host, port)`` pairs.

        Returns the replacement pair, or ``None`` when the client should be
        left untouched.

        Raises:
            InvalidRemoteAddress: if ``client`` is missing or its host is not
                an IP literal.
        """
        if not client or len(client) != 2:
            raise InvalidRemoteAddress(client)
        host, port = client
        ip = parse_ip(host) if isinstance(host, str) else None
        if ip is None:
            raise InvalidRemoteAddress(client)
        if not self.is_trusted(ip):
            return None
        candidate = self.client_ip(headers)
        if not candidate:
            return None
        logger.debug("Rewriting client %s -> %s (port %s)", host, candidate, port)
        return candidate, port

    def wrap(self, app: ASGIApp) -> ASGIApp:
        """Wrap an ASGI app so it sees the resolved client address."""
        from .middleware import RealIPMiddleware

        return RealIPMiddleware(app, real_ip=self)
