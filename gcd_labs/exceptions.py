"""
GCD Labs — Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions for the gateway/transport boundary.
How:   Each exception carries a message and optional context dict.
       Global exception handlers (registered in gateway/main.py) catch these
       and return structured JSON error responses with the right status code.
Who:   Raised by the boundary parser and the RPC client; caught by handlers.

The GCD core itself never raises: it is total over its input domain. Every
exception below belongs to the layers around it.

Exception Hierarchy:
    GCDLabsError (base)
    ├── ValidationError          → 400 Bad Request (malformed input)
    ├── ComputeUnavailableError  → 503 Service Unavailable (unreachable / deadline)
    └── ComputeServiceError      → 502 Bad Gateway (any other RPC failure)
"""

from typing import Any, Dict, Optional


class GCDLabsError(Exception):
    """
    Base exception for all GCD Labs application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; only surfaced for validation errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(GCDLabsError):
    """
    Raised when client input fails validation.

    When:    A path parameter is not a decimal uint64, or the compute service
             rejected the request with INVALID_ARGUMENT.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Invalid parameter A",
            "details": {"field": "a", "value": "-1"}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = dict(context or {})
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class ComputeUnavailableError(GCDLabsError):
    """
    Raised when the compute service cannot be reached in time.

    When:    gRPC status UNAVAILABLE (connection refused, DNS failure, server
             shutting down) or DEADLINE_EXCEEDED.
    HTTP:    503 Service Unavailable

    The client is expected to try again later; the gateway itself does not
    retry.
    """

    def __init__(
        self,
        message: str = "GCD compute service is temporarily unavailable",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ComputeServiceError(GCDLabsError):
    """
    Raised when the compute service answered with an unexpected failure.

    When:    Any gRPC status other than UNAVAILABLE, DEADLINE_EXCEEDED or
             INVALID_ARGUMENT (e.g. INTERNAL, UNIMPLEMENTED).
    HTTP:    502 Bad Gateway

    The gRPC status code and details are kept in `context` for the logs only.
    """

    def __init__(
        self,
        message: str = "GCD compute service returned an error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
