"""
GCD Labs — Pydantic Request/Response Schemas
==============================================

What:  Two families of models:
       1. RPC messages (GCDRequest, GCDResponse) exchanged between gateway
          and compute service.
       2. HTTP payloads (GCDResult, ErrorResponse, HealthResponse) returned by
          the gateway.
How:   RPC messages are frozen and strict: the wire codec encodes them with
       model_dump_json() and decodes with model_validate_json(), so a JSON
       string "5" or a float 5.0 is rejected instead of coerced.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from gcd_labs.services.gcd import UINT64_MAX


# ══════════════════════════════════════════════════════════════════════════
# RPC Messages — gateway ⇄ compute service
# ══════════════════════════════════════════════════════════════════════════


class GCDRequest(BaseModel):
    """
    What:  The two operands of a single compute call.
    Invariant: both fields are in [0, 2**64 - 1]; zero is allowed.
    """
    a: int = Field(ge=0, le=UINT64_MAX, description="First operand (uint64)")
    b: int = Field(ge=0, le=UINT64_MAX, description="Second operand (uint64)")

    model_config = ConfigDict(frozen=True, strict=True)


class GCDResponse(BaseModel):
    """
    What:  The result of a compute call.
    Invariant: result == gcd(a, b) for the request it answers.
    """
    result: int = Field(ge=0, le=UINT64_MAX, description="gcd(a, b) (uint64)")

    model_config = ConfigDict(frozen=True, strict=True)


# ══════════════════════════════════════════════════════════════════════════
# HTTP Response Models — what the gateway returns to clients
# ══════════════════════════════════════════════════════════════════════════


class GCDResult(BaseModel):
    """
    What:  Successful gateway response for GET /gcd/{a}/{b}.

    The result is a decimal string, not a JSON number: JavaScript clients
    parse numbers as doubles, which lose precision above 2**53.

    Example:
        {"result": "42"}
    """
    result: str = Field(description="gcd(a, b) as a decimal string")


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all gateway errors.

    Fields:
        error: Machine-readable error code (e.g. "validation_error")
        message: Human-readable description
        details: Optional extra context (e.g. which parameter failed)
        request_id: Correlation ID for tracing this error in both services' logs

    Example:
        {
            "error": "validation_error",
            "message": "Invalid parameter B",
            "details": {"field": "b", "value": "abc"},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    What:  Gateway health, including whether the compute service is serving.
    Who:   Returned by GET /health for load balancer and container probes.
    """
    status: str = Field(description="Overall status: healthy, unhealthy")
    version: str = Field(description="Application version")
    compute: str = Field(description="Compute service status: serving, unavailable")
    uptime_seconds: float = Field(description="Seconds since the gateway started")
