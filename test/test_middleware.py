"""
Tests for the structured logging middleware
"""

import json
import logging

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from attachments_inspector.middleware.logging import (
    ACCESS_LOGGER,
    RequestIdFilter,
    StructuredFormatter,
    StructuredLoggingMiddleware,
    client_address,
    get_request_id,
    level_for,
    request_id_var,
)


@pytest.fixture
def app():
    app = FastAPI()
    app.add_middleware(StructuredLoggingMiddleware)

    @app.get("/ping")
    async def ping():
        return {"request_id": get_request_id()}

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


class TestStructuredLoggingMiddleware:
    def test_generates_request_id(self, app):
        response = TestClient(app).get("/ping")

        request_id = response.headers["X-Request-ID"]
        assert request_id
        assert response.json()["request_id"] == request_id

    def test_honours_incoming_request_id(self, app):
        response = TestClient(app).get("/ping", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"

    def test_logs_request(self, app, caplog):
        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
            TestClient(app).get("/ping", headers={"X-Forwarded-For": "10.0.0.1, 10.0.0.2"})

        [record] = [r for r in caplog.records if r.name == ACCESS_LOGGER]
        assert record.path == "/ping"
        assert record.status_code == 200
        assert record.client_ip == "10.0.0.1"

    def test_not_found_logged_as_warning(self, app, caplog):
        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
            TestClient(app).get("/missing")

        [record] = [r for r in caplog.records if r.name == ACCESS_LOGGER]
        assert record.levelno == logging.WARNING

    def test_health_not_logged(self, app, caplog):
        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
            TestClient(app).get("/health")

        assert not [r for r in caplog.records if r.name == ACCESS_LOGGER]


class TestStructuredFormatter:
    def test_json_output(self):
        record = logging.LogRecord("attachments_inspector", logging.INFO, __file__, 1, "hello %s", ("world",), None)
        record.request_id = "req-1"
        record.path = "/ping"

        data = json.loads(StructuredFormatter().format(record))

        assert data["message"] == "hello world"
        assert data["level"] == "INFO"
        assert data["request_id"] == "req-1"
        assert data["path"] == "/ping"
        assert "duration_ms" not in data

    def test_request_id_filter(self):
        token = request_id_var.set("req-2")
        try:
            record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", (), None)
            assert RequestIdFilter().filter(record)
            assert record.request_id == "req-2"
        finally:
            request_id_var.reset(token)


class TestHelpers:
    def test_client_address_prefers_real_ip_over_peer(self):
        request = Request({"type": "http", "headers": [(b"x-real-ip", b"10.1.1.1")], "client": ("127.0.0.1", 5000)})

        assert client_address(request) == "10.1.1.1"

    def test_client_address_falls_back_to_peer(self):
        request = Request({"type": "http", "headers": [], "client": ("127.0.0.1", 5000)})

        assert client_address(request) == "127.0.0.1"

    @pytest.mark.parametrize("status_code, level", [(200, logging.INFO), (403, logging.WARNING), (503, logging.ERROR)])
    def test_level_for(self, status_code, level):
        assert level_for(status_code) == level
