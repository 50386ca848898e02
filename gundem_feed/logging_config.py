"""Logging setup for gundem_feed.

Log records go to stderr so the STDIO transport keeps stdout for protocol
messages.
"""

import logging
import sys
from typing import Optional

from gundem_feed.config import ServerConfig, get_config


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("gundem_feed")


def setup_logging(config: Optional[ServerConfig] = None) -> logging.Logger:
    """Configure and return the package logger."""
    if config is None:
        config = get_config()

    log_level = getattr(logging, config.log_level.upper(), logging.INFO)
    logger.setLevel(log_level)

    # Only add handler if it doesn't already exist (avoid duplicate handlers)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(log_level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
