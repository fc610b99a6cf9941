"""
logging.py — Application-Wide Logging Configuration

Purpose:
- One console format for API requests, persistence calls and model
  recomputes: timestamp | level | module | message
- Keep fincast's own loggers at the configured level (DEBUG shows every
  engine recompute and store notification) while third-party libraries
  that log per query or per request stay at WARNING.
"""

import logging
from typing import Optional

# -----------------------------------------------------------------------------
# Log Format
# -----------------------------------------------------------------------------

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
)

APP_LOGGER = "fincast"

# SQL echo, connection pool churn and HTTP client chatter
NOISY_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "urllib3",
    "httpx",
    "httpcore",
    "multipart",
)

# -----------------------------------------------------------------------------
# Root Logger Initialization
# -----------------------------------------------------------------------------


def resolve_level(level: Optional[str]) -> int:
    """"debug" → logging.DEBUG; unknown names fall back to INFO."""
    if not level:
        return logging.INFO
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging settings.

    Parameters:
        level (str): "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"

    Behavior:
    - Sets the format globally and streams to the console (Uvicorn picks it up).
    - Applies `level` to the root and `fincast` loggers.
    - Caps NOISY_LOGGERS at WARNING unless `level` is stricter.
    - Called once from `main.py` at import time.
    """
    numeric = resolve_level(level)
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
    logging.getLogger().setLevel(numeric)
    logging.getLogger(APP_LOGGER).setLevel(numeric)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric, logging.WARNING))

    logging.getLogger(__name__).info("Logging initialized with level %s", logging.getLevelName(numeric))

# -----------------------------------------------------------------------------
# Logger Access Helper
# -----------------------------------------------------------------------------


def get_logger(name: str) -> logging.Logger:
    """
    Module logger; pass __name__ so records land under the `fincast` tree.

        logger = get_logger(__name__)
        logger.debug("Model recomputed: %d periods", n)
    """
    return logging.getLogger(name)
