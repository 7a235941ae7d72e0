"""FastAPI dependencies shared by the gateway routes."""

from fastapi import Request

from gcd_labs.rpc.client import GCDClient


def get_gcd_client(request: Request) -> GCDClient:
    """Return the GCDClient opened by the application lifespan."""
    return request.app.state.gcd_client
