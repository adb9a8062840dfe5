"""Logging configuration, read from STRUCTOMAP_LOG_* env vars.

    STRUCTOMAP_LOG_FORMATTER  structlog (default) | stdlib
    STRUCTOMAP_LOG_FORMAT     json (default) | console
    STRUCTOMAP_LOG_LEVEL      WARNING (default), any stdlib level name
    STRUCTOMAP_LOG_PATH       append JSON lines to this file instead of stderr
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field


@dataclass
class LoggingConfig:
    log_formatter: str = field(
        default_factory=lambda: os.environ.get("STRUCTOMAP_LOG_FORMATTER", "structlog")
    )
    log_format: str = field(
        default_factory=lambda: os.environ.get("STRUCTOMAP_LOG_FORMAT", "json")
    )
    log_level: str = field(
        default_factory=lambda: os.environ.get("STRUCTOMAP_LOG_LEVEL", "WARNING")
    )
    # None -> stderr
    log_path: str | None = field(
        default_factory=lambda: os.environ.get("STRUCTOMAP_LOG_PATH") or None
    )
