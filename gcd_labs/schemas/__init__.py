from gcd_labs.schemas.gcd import (
    ErrorResponse,
    GCDRequest,
    GCDResponse,
    GCDResult,
    HealthResponse,
)

__all__ = [
    "ErrorResponse",
    "GCDRequest",
    "GCDResponse",
    "GCDResult",
    "HealthResponse",
]
