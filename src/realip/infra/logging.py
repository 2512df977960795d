"""Logging bootstrap for ``python -m realip``.

Every record carries a ``client_address`` field: the ``host:port`` the
application sees for the request being served (after ``RealIPMiddleware``
has substituted the proxied client), or ``""`` outside a request.  Output is
JSON lines by default, or coloured text for local development.

uvicorn's own loggers are routed through the same handler, so its access
log lines get the resolved client too.
"""

from __future__ import annotations

import logging
import sys

from realip.configs.system import LoggingConfig
from realip.core.middleware import current_client_address

_CLIENT_FIELD = "client_address"

_JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(client_address)s %(message)s"
_DEV_FORMAT = "%(levelprefix)s %(asctime)s [%(client_address)s] %(name)s  %(message)s"
_DEV_DATEFMT = "%H:%M:%S"

_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class ClientAddressFilter(logging.Filter):
    """Stamps the resolved client ``host:port`` onto every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        setattr(record, _CLIENT_FIELD, current_client_address.get())
        return True


def build_formatter(config: LoggingConfig) -> logging.Formatter:
    if config.json_output:
        from pythonjsonlogger.json import JsonFormatter

        return JsonFormatter(
            fmt=_JSON_FORMAT,
            rename_fields={"asctime": "timestamp", "levelname": "level"},
            defaults={_CLIENT_FIELD: ""},
        )

    from uvicorn.logging import DefaultFormatter

    return DefaultFormatter(fmt=_DEV_FORMAT, datefmt=_DEV_DATEFMT, use_colors=True)


def setup_logging(config: LoggingConfig | None = None) -> logging.Handler:
    """Install one stdout handler on the root and uvicorn loggers.

    Returns the handler so callers can attach it elsewhere.
    """
    config = config or LoggingConfig()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(ClientAddressFilter())
    handler.setFormatter(build_formatter(config))

    root = logging.getLogger()
    root.setLevel(config.level.upper())
    root.handlers = [handler]

    for name in _UVICORN_LOGGERS:
        uvi = logging.getLogger(name)
        uvi.handlers = [handler]
        uvi.propagate = False

    return handler
