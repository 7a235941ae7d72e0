"""
GCD Labs — Health Check Route
===============================

What:  Health endpoint for container probes and load balancers.
How:   Asks the compute service's gRPC health service whether
       gcd.GCDService is SERVING.

The gateway can only answer GCD requests when the compute service is up, so
its health is the compute service's health:
    - healthy:   compute service SERVING (HTTP 200)
    - unhealthy: anything else (HTTP 503, stop routing traffic)
"""

import time

from fastapi import APIRouter, Depends, Response

from gcd_labs import __version__
from gcd_labs.gateway.dependencies import get_gcd_client
from gcd_labs.rpc.client import GCDClient
from gcd_labs.schemas.gcd import HealthResponse

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={
        200: {"description": "Gateway and compute service are serving", "model": HealthResponse},
        503: {"description": "Compute service is not serving", "model": HealthResponse},
    },
    summary="Service health check",
)
async def health_check(
    response: Response,
    client: GCDClient = Depends(get_gcd_client),
) -> HealthResponse:
    serving = await client.health_check()
    if not serving:
        response.status_code = 503

    return HealthResponse(
        status="healthy" if serving else "unhealthy",
        version=__version__,
        compute="serving" if serving else "unavailable",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
