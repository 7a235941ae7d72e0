"""
GCD Labs — Compute Service Client
===================================

What:  Async client the gateway uses to call /gcd.GCDService/Compute.
How:   One grpc.aio channel per client; every call carries a deadline and the
       gateway's request ID as metadata. gRPC failures are translated into
       the application exception hierarchy so the gateway never sees grpc types.
Who:   Created in the gateway lifespan and stored on app.state.gcd_client.

Error Mapping (gRPC status → exception → HTTP):
    UNAVAILABLE, DEADLINE_EXCEEDED → ComputeUnavailableError → 503
    INVALID_ARGUMENT               → ValidationError         → 400
    anything else                  → ComputeServiceError     → 502

No retries are attempted; a failed call is reported to the caller at once.
"""

import logging
from typing import Optional

import grpc
import pydantic
from grpc_health.v1 import health_pb2, health_pb2_grpc

from gcd_labs.config import settings
from gcd_labs.exceptions import (
    ComputeServiceError,
    ComputeUnavailableError,
    GCDLabsError,
    ValidationError,
)
from gcd_labs.rpc import codec
from gcd_labs.schemas.gcd import GCDRequest

logger = logging.getLogger(__name__)

_UNAVAILABLE_CODES = {grpc.StatusCode.UNAVAILABLE, grpc.StatusCode.DEADLINE_EXCEEDED}


class GCDClient:
    """
    Thin async wrapper around the Compute RPC and the health RPC.

    Usage:
        async with GCDClient("localhost:3000") as client:
            await client.compute(294, 462)   # → 42
    """

    def __init__(self, target: Optional[str] = None, timeout: Optional[float] = None):
        """
        Args:
            target: host:port of the compute service (default: settings.compute_target)
            timeout: per-call deadline in seconds (default: settings.rpc_timeout)
        """
        self.target = target or settings.compute_target
        self.timeout = timeout if timeout is not None else settings.rpc_timeout

        self._channel = grpc.aio.insecure_channel(self.target)
        self._compute = self._channel.unary_unary(
            codec.COMPUTE_PATH,
            request_serializer=codec.encode_request,
            response_deserializer=codec.decode_response,
        )
        self._health = health_pb2_grpc.HealthStub(self._channel)

        logger.info("GCDClient created for %s (timeout=%.1fs)", self.target, self.timeout)

    async def __aenter__(self) -> "GCDClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def compute(self, a: int, b: int, request_id: Optional[str] = None) -> int:
        """
        Ask the compute service for gcd(a, b).

        Args:
            a, b: Operands in [0, 2**64 - 1] (already parsed by the caller).
            request_id: Forwarded as x-request-id metadata when given.

        Returns:
            The GCD as an int.

        Raises:
            ValidationError: Operands out of range, or INVALID_ARGUMENT from the server
            ComputeUnavailableError: Server unreachable or deadline exceeded
            ComputeServiceError: Any other RPC failure
        """
        try:
            request = GCDRequest(a=a, b=b)
        except pydantic.ValidationError as e:
            raise ValidationError(
                message="Operands must be unsigned 64-bit integers",
                context={"a": a, "b": b, "errors": e.error_count()},
            ) from e

        metadata = ((codec.REQUEST_ID_KEY, request_id),) if request_id else None

        try:
            response = await self._compute(request, timeout=self.timeout, metadata=metadata)
        except grpc.aio.AioRpcError as e:
            raise self._translate(e, request_id) from e

        return response.result

    def _translate(self, error: grpc.aio.AioRpcError, request_id: Optional[str]) -> GCDLabsError:
        """Map a failed RPC onto the application exception hierarchy."""
        code = error.code()
        ctx = {
            "grpc_code": code.name,
            "grpc_details": error.details(),
            "target": self.target,
        }

        if code in _UNAVAILABLE_CODES:
            logger.warning(
                "[%s] Compute service unavailable at %s: %s",
                request_id or "",
                self.target,
                code.name,
            )
            return ComputeUnavailableError(context=ctx)

        if code == grpc.StatusCode.INVALID_ARGUMENT:
            return ValidationError(
                message=error.details() or "Invalid GCD request",
                context=ctx,
            )

        logger.error(
            "[%s] Compute RPC failed: %s %s",
            request_id or "",
            code.name,
            error.details(),
        )
        return ComputeServiceError(context=ctx)

    async def health_check(self) -> bool:
        """
        Return True when the compute service reports SERVING for gcd.GCDService.

        Never raises: any RPC failure counts as "not serving".
        """
        try:
            response = await self._health.Check(
                health_pb2.HealthCheckRequest(service=codec.SERVICE_NAME),
                timeout=self.timeout,
            )
        except grpc.aio.AioRpcError as e:
            logger.warning("Compute health check failed: %s", e.code().name)
            return False
        return response.status == health_pb2.HealthCheckResponse.SERVING

    async def close(self) -> None:
        await self._channel.close()
