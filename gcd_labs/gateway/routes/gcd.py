"""
GCD Labs — GCD Route Handler
==============================

What:  GET /gcd/{a}/{b}, the gateway's only business endpoint.
How:   Parses both path parameters as uint64, forwards them to the compute
       service and relays the result as {"result": "<decimal>"}.

Request Flow:
    1. Parse A, then B (the first invalid one is reported)
    2. GCDClient.compute() over gRPC, carrying the request ID
    3. 200 with GCDResult

Error responses (formatted by the global exception handlers):
    400: Invalid parameter A / B (ValidationError)
    502: Compute service returned an unexpected error (ComputeServiceError)
    503: Compute service unreachable or too slow (ComputeUnavailableError)
"""

import logging

from fastapi import APIRouter, Depends

from gcd_labs.gateway.dependencies import get_gcd_client
from gcd_labs.gateway.middleware.request_id import request_id_var
from gcd_labs.rpc.client import GCDClient
from gcd_labs.schemas.gcd import ErrorResponse, GCDResult
from gcd_labs.services.gcd import parse_uint64

logger = logging.getLogger(__name__)

router = APIRouter(tags=["GCD"])


@router.get(
    "/gcd/{a}/{b}",
    response_model=GCDResult,
    responses={
        200: {"description": "GCD computed", "model": GCDResult},
        400: {"description": "A or B is not an unsigned 64-bit integer", "model": ErrorResponse},
        502: {"description": "Compute service error", "model": ErrorResponse},
        503: {"description": "Compute service unavailable", "model": ErrorResponse},
    },
    summary="Greatest common divisor of two unsigned integers",
    description=(
        "Computes gcd(a, b) for two unsigned 64-bit integers given as decimal path "
        "parameters. The result is returned as a decimal string."
    ),
)
async def get_gcd(
    a: str,
    b: str,
    client: GCDClient = Depends(get_gcd_client),
) -> GCDResult:
    """
    Compute gcd(a, b) through the compute service.

    Path parameters are taken as raw strings so that malformed values get this
    service's own 400 response rather than FastAPI's 422.
    """
    operand_a = parse_uint64(a, "A")
    operand_b = parse_uint64(b, "B")

    rid = request_id_var.get("")
    result = await client.compute(operand_a, operand_b, request_id=rid or None)

    logger.debug("[%s] gcd(%d, %d) = %d", rid, operand_a, operand_b, result)
    return GCDResult(result=str(result))
