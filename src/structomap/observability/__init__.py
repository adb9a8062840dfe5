"""structomap observability: structured logging.

Public API:
    setup_logging(cfg)  - Install the structlog or stdlib JSON root handler
    shutdown_logging()  - Detach and close it
    get_logger(name)    - Logger taking logger.debug("event", key=value)
"""

from structomap.observability.config import LoggingConfig
from structomap.observability.logging import get_logger, setup_logging, shutdown_logging

__all__ = [
    "LoggingConfig",
    "setup_logging",
    "shutdown_logging",
    "get_logger",
]
