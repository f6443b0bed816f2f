"""Logging setup for the assistant service."""

from __future__ import annotations

import logging


def setup_logging(level_name: str = "INFO") -> None:
    """Configure console logging once; later calls are no-ops."""
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    level = getattr(logging, level_name.upper(), logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
