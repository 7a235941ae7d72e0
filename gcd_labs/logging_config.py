"""
GCD Labs — Logging Configuration
==================================

What:  One place that configures stdlib logging for both services.
Who:   Called by the gateway lifespan and by the compute service's main().
"""

import logging
import sys
from typing import Optional

from gcd_labs.config import settings


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger with a consistent format across all modules.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s

    Args:
        level: Overrides settings.log_level when given (e.g. from tests).
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    level_name = (level or settings.log_level).upper()

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("grpc").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
