"""
GCD Labs — Package Initializer
================================

What: Two-tier GCD example: an HTTP gateway in front of a gRPC compute service.
Who:  Imported by both entry points (`gcd-gateway`, `gcd-compute`) and by pytest.

Architecture Note:

    ┌─────────────────────────────────────┐
    │     Gateway (FastAPI, HTTP/JSON)    │  ← gcd_labs.gateway
    ├─────────────────────────────────────┤
    │     RPC Client / Codec (gRPC)       │  ← gcd_labs.rpc.client, rpc.codec
    ├─────────────────────────────────────┤
    │     Compute Service (gRPC server)   │  ← gcd_labs.rpc.server
    ├─────────────────────────────────────┤
    │     Core (pure Euclid)              │  ← gcd_labs.services.gcd
    └─────────────────────────────────────┘

    Each layer only talks to the one directly below it. The core has no
    knowledge of HTTP or gRPC and is unit-tested in isolation.
"""

__version__ = "1.0.0"
