"""
GCD Labs — Gateway Endpoint Tests
===================================

What:  Tests for GET /gcd/{a}/{b}, GET /health, middleware and error handlers.
How:   HTTPX AsyncClient over ASGITransport; the GCDClient dependency is the
       mock from conftest, except in the end-to-end class which runs a real
       compute server.

What we test:
    ✅ Successful computation relays {"result": "<decimal>"}
    ✅ Invalid A / B → 400 before any RPC is made
    ✅ Compute failures → 503 / 502 / 400 per the error mapping
    ✅ X-Request-ID is echoed and forwarded to the compute client
    ✅ Malformed X-Request-ID values are replaced, never forwarded
    ✅ Unexpected errors still carry X-Request-ID and an access-log line
    ✅ /health reflects the compute service's health
    ✅ Gateway → real gRPC compute service, end to end
"""

import logging
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from gcd_labs.config import settings
from gcd_labs.exceptions import ComputeServiceError, ComputeUnavailableError, ValidationError
from gcd_labs.gateway.dependencies import get_gcd_client
from gcd_labs.gateway.main import create_app, lifespan
from gcd_labs.rpc.client import GCDClient


class TestGCDRoute:
    """GET /gcd/{a}/{b} with a mocked compute client."""

    @pytest.mark.asyncio
    async def test_returns_result_as_string(self, test_client, mock_gcd_client):
        response = await test_client.get("/gcd/294/462")

        assert response.status_code == 200
        assert response.json() == {"result": "42"}
        args, _ = mock_gcd_client.compute.call_args
        assert args == (294, 462)

    @pytest.mark.asyncio
    async def test_large_result_keeps_precision(self, test_client, mock_gcd_client):
        mock_gcd_client.compute.return_value = 18446744073709551615

        response = await test_client.get("/gcd/18446744073709551615/18446744073709551615")

        assert response.status_code == 200
        assert response.json() == {"result": "18446744073709551615"}

    @pytest.mark.asyncio
    async def test_zero_operands_are_valid(self, test_client, mock_gcd_client):
        mock_gcd_client.compute.return_value = 0

        response = await test_client.get("/gcd/0/0")

        assert response.status_code == 200
        assert response.json() == {"result": "0"}

    # ── Parameter Validation ──────────────────────────────────────────────

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "path, message",
        [
            ("/gcd/abc/5", "Invalid parameter A"),
            ("/gcd/-1/5", "Invalid parameter A"),
            ("/gcd/+5/5", "Invalid parameter A"),
            ("/gcd/1.5/5", "Invalid parameter A"),
            ("/gcd/18446744073709551616/5", "Invalid parameter A"),
            ("/gcd/5/abc", "Invalid parameter B"),
            ("/gcd/5/-1", "Invalid parameter B"),
            ("/gcd/5/18446744073709551616", "Invalid parameter B"),
            ("/gcd/x/y", "Invalid parameter A"),
        ],
    )
    async def test_invalid_parameters_are_rejected(self, test_client, mock_gcd_client, path, message):
        response = await test_client.get(path)

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["message"] == message
        mock_gcd_client.compute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_validation_details_name_the_field(self, test_client):
        response = await test_client.get("/gcd/5/oops")

        assert response.json()["details"] == {"field": "b", "value": "oops"}

    # ── Compute Failures ──────────────────────────────────────────────────

    @pytest.mark.asyncio
    async def test_unavailable_compute_service_is_503(self, test_client, mock_gcd_client):
        mock_gcd_client.compute.side_effect = ComputeUnavailableError(
            context={"grpc_code": "UNAVAILABLE", "target": "gcd-service:3000"}
        )

        response = await test_client.get("/gcd/48/18")

        assert response.status_code == 503
        body = response.json()
        assert body["error"] == "service_unavailable"
        # Upstream details stay in the logs
        assert "gcd-service" not in response.text

    @pytest.mark.asyncio
    async def test_compute_service_error_is_502(self, test_client, mock_gcd_client):
        mock_gcd_client.compute.side_effect = ComputeServiceError(
            context={"grpc_code": "INTERNAL", "grpc_details": "stack trace here"}
        )

        response = await test_client.get("/gcd/48/18")

        assert response.status_code == 502
        assert response.json()["error"] == "upstream_error"
        assert "stack trace" not in response.text

    @pytest.mark.asyncio
    async def test_server_side_invalid_argument_is_400(self, test_client, mock_gcd_client):
        mock_gcd_client.compute.side_effect = ValidationError(message="a: Input should be an integer")

        response = await test_client.get("/gcd/48/18")

        assert response.status_code == 400
        assert response.json()["message"] == "a: Input should be an integer"

    @pytest.mark.asyncio
    async def test_unexpected_error_is_500_without_details(self, mock_gcd_client, caplog):
        mock_gcd_client.compute.side_effect = RuntimeError("secret internals")
        app = create_app()
        app.dependency_overrides[get_gcd_client] = lambda: mock_gcd_client
        transport = ASGITransport(app=app, raise_app_exceptions=False)

        with caplog.at_level(logging.ERROR, logger="gcd_labs.access"):
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.get("/gcd/48/18", headers={"X-Request-ID": "err-1"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "internal_server_error"
        assert body["request_id"] == "err-1"
        assert "secret" not in response.text
        assert response.headers["X-Request-ID"] == "err-1"
        assert any(
            "GET /gcd/48/18 500" in r.getMessage() and "[err-1]" in r.getMessage()
            for r in caplog.records
            if r.name == "gcd_labs.access"
        )


class TestRequestID:
    """X-Request-ID generation, echo and forwarding."""

    @pytest.mark.asyncio
    async def test_client_request_id_is_echoed_and_forwarded(self, test_client, mock_gcd_client):
        response = await test_client.get("/gcd/48/18", headers={"X-Request-ID": "trace-123"})

        assert response.headers["X-Request-ID"] == "trace-123"
        _, kwargs = mock_gcd_client.compute.call_args
        assert kwargs["request_id"] == "trace-123"

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, test_client, mock_gcd_client):
        response = await test_client.get("/gcd/48/18")

        rid = response.headers["X-Request-ID"]
        assert len(rid) == 8
        _, kwargs = mock_gcd_client.compute.call_args
        assert kwargs["request_id"] == rid

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "header",
        [
            "café".encode("utf-8"),
            b"a\tb",
            b"x" * 20000,
            b"x" * 65,
            b"has space",
            b"semi;colon",
        ],
    )
    async def test_malformed_request_id_is_replaced(self, test_client, mock_gcd_client, header):
        response = await test_client.get("/gcd/48/18", headers={"X-Request-ID": header})

        assert response.status_code == 200
        rid = response.headers["X-Request-ID"]
        assert len(rid) == 8
        assert rid.encode() != header
        _, kwargs = mock_gcd_client.compute.call_args
        assert kwargs["request_id"] == rid

    @pytest.mark.asyncio
    async def test_longest_accepted_request_id(self, test_client, mock_gcd_client):
        rid = "A1._-" * 12 + "abcd"  # 64 characters

        response = await test_client.get("/gcd/48/18", headers={"X-Request-ID": rid})

        assert response.headers["X-Request-ID"] == rid

    @pytest.mark.asyncio
    async def test_error_body_carries_request_id(self, test_client):
        response = await test_client.get("/gcd/x/1", headers={"X-Request-ID": "bad-1"})

        assert response.json()["request_id"] == "bad-1"


class TestHealthRoute:
    """GET /health."""

    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["compute"] == "serving"
        assert body["uptime_seconds"] >= 0

    @pytest.mark.asyncio
    async def test_unhealthy_when_compute_not_serving(self, test_client, mock_gcd_client):
        mock_gcd_client.health_check.return_value = False

        response = await test_client.get("/health")

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "unhealthy"
        assert body["compute"] == "unavailable"


class TestLifespan:
    """Application startup and shutdown."""

    @pytest.mark.asyncio
    async def test_lifespan_opens_and_closes_client(self):
        app = create_app()
        with patch("gcd_labs.gateway.main.setup_logging"), \
             patch("gcd_labs.gateway.main.GCDClient") as client_cls:
            client_cls.return_value.close = AsyncMock()

            async with lifespan(app):
                assert app.state.gcd_client is client_cls.return_value

            client_cls.return_value.close.assert_awaited_once()
        client_cls.assert_called_once_with(settings.compute_target, settings.rpc_timeout)


class TestEndToEnd:
    """Gateway → GCDClient → real gRPC compute server."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "a, b, expected",
        [
            ("294", "462", "42"),
            ("0", "5", "5"),
            ("17", "5", "1"),
            ("48", "18", "6"),
            ("0", "0", "0"),
        ],
    )
    async def test_gcd_through_both_services(self, compute_server, a, b, expected):
        target, _ = compute_server
        app = create_app()
        async with GCDClient(target, timeout=2.0) as gcd_client:
            app.dependency_overrides[get_gcd_client] = lambda: gcd_client
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.get(f"/gcd/{a}/{b}")

        assert response.status_code == 200
        assert response.json() == {"result": expected}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("header", ["café".encode("utf-8"), b"a\tb", b"x" * 20000])
    async def test_malformed_request_id_does_not_break_the_call(self, compute_server, header):
        target, _ = compute_server
        app = create_app()
        async with GCDClient(target, timeout=2.0) as gcd_client:
            app.dependency_overrides[get_gcd_client] = lambda: gcd_client
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.get("/gcd/48/18", headers={"X-Request-ID": header})

        assert response.status_code == 200
        assert response.json() == {"result": "6"}
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_health_through_both_services(self, compute_server):
        target, _ = compute_server
        app = create_app()
        async with GCDClient(target, timeout=2.0) as gcd_client:
            app.dependency_overrides[get_gcd_client] = lambda: gcd_client
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["compute"] == "serving"
