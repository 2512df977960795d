"""Tests for the logging bootstrap and the client-address record field."""

from __future__ import annotations

import json
import logging

import httpx
import pytest
from pythonjsonlogger.json import JsonFormatter
from uvicorn.logging import DefaultFormatter

from realip.configs.system import LoggingConfig
from realip.core.middleware import RealIPMiddleware, current_client_address
from realip.core.resolver import RealIP
from realip.infra.logging import ClientAddressFilter, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


def _record() -> logging.LogRecord:
    return logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)


class TestSetupLogging:
    def test_json_output(self):
        handler = setup_logging(LoggingConfig(level="debug", json_output=True))
        root = logging.getLogger()

        assert root.level == logging.DEBUG
        assert root.handlers == [handler]
        assert isinstance(handler.formatter, JsonFormatter)

    def test_dev_output(self):
        handler = setup_logging(LoggingConfig(json_output=False))

        assert logging.getLogger().level == logging.INFO
        assert isinstance(handler.formatter, DefaultFormatter)

    def test_uvicorn_loggers_share_handler(self):
        handler = setup_logging()

        for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
            assert logging.getLogger(name).handlers == [handler]
            assert logging.getLogger(name).propagate is False

    def test_json_line_carries_client_address(self):
        handler = setup_logging(LoggingConfig(json_output=True))
        record = _record()
        token = current_client_address.set("64.63.62.61:9876")
        try:
            handler.filter(record)
        finally:
            current_client_address.reset(token)

        line = json.loads(handler.format(record))
        assert line["client_address"] == "64.63.62.61:9876"
        assert line["message"] == "msg"
        assert line["level"] == "INFO"


class TestClientAddressFilter:
    def test_outside_request(self):
        record = _record()

        assert ClientAddressFilter().filter(record) is True
        assert record.client_address == ""

    @pytest.mark.asyncio
    async def test_sees_rewritten_client_inside_request(self):
        seen: list[str] = []

        async def downstream(scope, receive, send):
            record = _record()
            ClientAddressFilter().filter(record)
            seen.append(record.client_address)
            await send({"type": "http.response.start", "status": 204, "headers": []})
            await send({"type": "http.response.body", "body": b""})

        app = RealIPMiddleware(
            downstream, real_ip=RealIP(["X-Forwarded-For"], ["8.8.0.0/16"])
        )
        transport = httpx.ASGITransport(app=app, client=("8.8.8.8", 9876))
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            await client.get("/", headers={"X-Forwarded-For": "2001:db8::1"})

        assert seen == ["[2001:db8::1]:9876"]
        assert current_client_address.get() == ""
