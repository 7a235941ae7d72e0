"""
GCD Labs — Compute Service (gRPC Server)
==========================================

What:  Exposes the GCD core as the unary RPC /gcd.GCDService/Compute.
How:   grpc.aio server with a generic handler built from the JSON codec, plus
       the standard gRPC health service so orchestrators and the gateway can
       probe readiness.
Who:   Started by the `gcd-compute` console script (or `python -m gcd_labs.rpc.server`).

Lifecycle:
    Startup:
    1. Configure logging
    2. Build server: register GCD handler, health service and reflection, bind port
    3. Mark "" and gcd.GCDService as SERVING
    4. Start accepting calls

    Shutdown (SIGINT / SIGTERM):
    1. Flip every health status to NOT_SERVING
    2. Stop with `compute_shutdown_grace` seconds for in-flight calls
"""

import asyncio
import logging
import signal
from typing import Optional, Tuple

import grpc
import pydantic
from grpc_health.v1 import health, health_pb2, health_pb2_grpc
from grpc_reflection.v1alpha import reflection

from gcd_labs.config import Settings, settings
from gcd_labs.logging_config import setup_logging
from gcd_labs.rpc import codec
from gcd_labs.schemas.gcd import GCDRequest, GCDResponse
from gcd_labs.services.gcd import compute

logger = logging.getLogger(__name__)


def _request_id(context: grpc.aio.ServicerContext) -> str:
    """Return the caller's x-request-id metadata value, or "" when absent."""
    for key, value in context.invocation_metadata() or ():
        if key == codec.REQUEST_ID_KEY:
            return value
    return ""


def _describe(exc: pydantic.ValidationError) -> str:
    """Flatten pydantic errors into one line for the gRPC status details."""
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err["loc"]) or "request"
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)


class GCDServicer:
    """
    Implementation of gcd.GCDService.

    Stateless: a single instance serves every call concurrently.
    """

    async def Compute(
        self, request: GCDRequest, context: grpc.aio.ServicerContext
    ) -> GCDResponse:
        """Return gcd(request.a, request.b). Never fails for a decoded request."""
        result = compute(request.a, request.b)
        logger.debug(
            "[%s] Compute(a=%d, b=%d) -> %d",
            _request_id(context),
            request.a,
            request.b,
            result,
        )
        return GCDResponse(result=result)


def _compute_handler(servicer: GCDServicer) -> grpc.RpcMethodHandler:
    """
    Build the unary-unary handler for Compute.

    Decoding happens inside the behavior rather than in request_deserializer,
    so a bad payload becomes INVALID_ARGUMENT instead of a generic INTERNAL.
    """

    async def behavior(raw: bytes, context: grpc.aio.ServicerContext) -> GCDResponse:
        try:
            request = codec.decode_request(raw)
        except pydantic.ValidationError as e:
            details = _describe(e)
            logger.warning("[%s] Rejected Compute request: %s", _request_id(context), details)
            await context.abort(grpc.StatusCode.INVALID_ARGUMENT, details)
        return await servicer.Compute(request, context)

    return grpc.unary_unary_rpc_method_handler(
        behavior,
        request_deserializer=None,
        response_serializer=codec.encode_response,
    )


async def build_server(
    cfg: Optional[Settings] = None,
) -> Tuple[grpc.aio.Server, int, health.aio.HealthServicer]:
    """
    Create (but do not start) the compute server.

    Returns:
        (server, bound_port, health_servicer). bound_port differs from
        cfg.compute_port only when cfg.compute_port is 0.
    """
    cfg = cfg or settings

    server = grpc.aio.server(
        options=[
            ("grpc.keepalive_time_ms", 30000),
            ("grpc.keepalive_timeout_ms", 5000),
            ("grpc.keepalive_permit_without_calls", True),
        ],
    )

    gcd_handler = grpc.method_handlers_generic_handler(
        codec.SERVICE_NAME,
        {codec.COMPUTE_METHOD: _compute_handler(GCDServicer())},
    )
    server.add_generic_rpc_handlers((gcd_handler,))

    health_servicer = health.aio.HealthServicer()
    health_pb2_grpc.add_HealthServicer_to_server(health_servicer, server)
    for service in ("", codec.SERVICE_NAME):
        await health_servicer.set(service, health_pb2.HealthCheckResponse.SERVING)

    if cfg.compute_reflection:
        # Lists service names only; the JSON codec has no descriptors to serve
        reflection.enable_server_reflection(
            (codec.SERVICE_NAME, health.SERVICE_NAME, reflection.SERVICE_NAME),
            server,
        )

    listen_addr = f"{cfg.compute_host}:{cfg.compute_port}"
    port = server.add_insecure_port(listen_addr)
    logger.info("Compute server bound to %s (port %d)", listen_addr, port)

    return server, port, health_servicer


async def serve(cfg: Optional[Settings] = None) -> None:
    """Run the compute service until SIGINT or SIGTERM."""
    cfg = cfg or settings
    server, port, health_servicer = await build_server(cfg)

    await server.start()
    logger.info("=" * 60)
    logger.info("GCD compute service listening on %s:%d", cfg.compute_host, port)
    logger.info("=" * 60)

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            # Windows: Ctrl+C still reaches asyncio.run() as KeyboardInterrupt
            logger.debug("Signal handlers unsupported on this platform")
            break

    await stop.wait()

    logger.info("GCD compute service shutting down...")
    await health_servicer.enter_graceful_shutdown()
    await server.stop(cfg.compute_shutdown_grace)
    logger.info("Shutdown complete.")


def main() -> None:
    """Console entry point: `gcd-compute`."""
    setup_logging()
    asyncio.run(serve())


if __name__ == "__main__":
    main()
