"""Root logger configuration."""

from __future__ import annotations

import logging
import sys

from .config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Install a single stdout handler on the root logger."""
    resolved_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(resolved_level)
    if not any(getattr(handler, "_follow_graph", False) for handler in root_logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        setattr(handler, "_follow_graph", True)
        root_logger.addHandler(handler)

    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.db_echo else logging.WARNING
    )


__all__ = ["configure_logging"]
