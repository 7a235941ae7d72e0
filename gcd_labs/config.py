"""
GCD Labs — Application Configuration
======================================

What:  Centralized configuration for both the gateway and the compute service.
How:   Pydantic Settings reads environment variables (or a .env file),
       validates types/ranges, and exposes a singleton `settings` object.
Who:   Imported by the gateway app factory, the gRPC server and the RPC client.
When:  Loaded once at module import time.

Both services share one Settings class so a single .env file can describe a
whole local deployment. Each process simply ignores the fields it doesn't use.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for running both services on one
    machine. In containers, COMPUTE_TARGET is usually `gcd-service:3000`.
    """

    # ── Compute Service (gRPC server) ─────────────────────────────────────
    compute_host: str = Field(default="0.0.0.0")

    # Port 0 asks the OS for an ephemeral port (used by the test-suite)
    compute_port: int = Field(default=3000, ge=0, le=65535)

    # What: Register gRPC server reflection so grpcurl can list services
    compute_reflection: bool = Field(default=True)

    # What: Seconds in-flight calls get to finish after SIGTERM
    compute_shutdown_grace: float = Field(default=5.0, ge=0, le=120)

    # ── RPC Client (used by the gateway) ──────────────────────────────────
    # Format: host:port understood by grpc.aio.insecure_channel
    compute_target: str = Field(
        default="localhost:3000",
        description="Address of the compute service as dialed by the gateway",
    )

    # What: Per-call deadline in seconds for Compute and health RPCs
    rpc_timeout: float = Field(default=5.0, gt=0, le=60)

    # ── Gateway (HTTP server) ─────────────────────────────────────────────
    gateway_host: str = Field(default="0.0.0.0")
    gateway_port: int = Field(default=8000, ge=1, le=65535)

    # Format: Comma-separated URLs, or "*" for any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Logging ───────────────────────────────────────────────────────────
    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # COMPUTE_TARGET and compute_target both work
    }


# Singleton instance — imported throughout the application
settings = Settings()
