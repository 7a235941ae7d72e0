"""
GCD Labs — Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_gcd_client: AsyncMock-backed stand-in for GCDClient
    ├── test_client:     HTTPX AsyncClient wired to a fresh gateway app
    └── compute_server:  Real grpc.aio compute server on an ephemeral port
"""

import os

# Override settings BEFORE any gcd_labs import reads them
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["COMPUTE_HOST"] = "127.0.0.1"
os.environ["COMPUTE_PORT"] = "0"
os.environ["RPC_TIMEOUT"] = "2.0"

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from gcd_labs.config import Settings  # noqa: E402
from gcd_labs.gateway.dependencies import get_gcd_client  # noqa: E402
from gcd_labs.gateway.main import create_app  # noqa: E402
from gcd_labs.rpc.client import GCDClient  # noqa: E402
from gcd_labs.rpc.server import build_server  # noqa: E402


@pytest.fixture
def mock_gcd_client():
    """
    Provides a GCDClient double for gateway tests.

    Defaults: compute() returns 42, health_check() returns True.
    Tests override return_value / side_effect as needed.
    """
    client = MagicMock(spec=GCDClient)
    client.compute = AsyncMock(return_value=42)
    client.health_check = AsyncMock(return_value=True)
    client.close = AsyncMock()
    return client


@pytest_asyncio.fixture
async def test_client(mock_gcd_client):
    """
    Provides an async HTTP test client for gateway endpoint testing.

    ASGITransport does not run the lifespan, so the GCDClient dependency is
    replaced with mock_gcd_client.

    Usage:
        async def test_gcd(test_client):
            response = await test_client.get("/gcd/48/18")
            assert response.status_code == 200
    """
    app = create_app()
    app.dependency_overrides[get_gcd_client] = lambda: mock_gcd_client
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def compute_server():
    """
    Runs a real compute service on 127.0.0.1 with an OS-assigned port.

    Yields:
        (target, health_servicer): "127.0.0.1:<port>" and the server's
        health servicer, so tests can flip its status.
    """
    cfg = Settings(compute_host="127.0.0.1", compute_port=0)
    server, port, health_servicer = await build_server(cfg)
    await server.start()
    try:
        yield f"127.0.0.1:{port}", health_servicer
    finally:
        await server.stop(None)
