"""
Logging setup.

Configures the loguru logger for processes that embed the engine.
The engine itself never configures sinks on import.
"""

import sys

from loguru import logger


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    environment: str | None = None,
) -> None:
    """
    Configure logger with stderr output and optional file rotation.

    Args:
        level: Minimum log level
        log_file: Optional path for a rotated log file
        environment: Deployment name recorded in the startup message
    """
    logger.remove()
    logger.add(sys.stderr, level=level)

    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            level=level,
            encoding="utf-8",
        )

    logger.info(
        "Membership engine logging configured",
        extra={"level": level, "environment": environment},
    )
