"""Logging configuration helpers for vparecon."""

import logging
import os
from typing import Optional


def _resolve_level(level_name: str) -> int:
    return getattr(logging, level_name.upper(), logging.INFO)


def configure_logging(level_name: Optional[str] = None) -> None:
    """Configure root logging.

    The level comes from the argument, then VPARECON_LOG_LEVEL, then
    LOG_LEVEL, defaulting to INFO.
    """
    if level_name is None:
        level_name = os.getenv("VPARECON_LOG_LEVEL") or os.getenv("LOG_LEVEL", "INFO")
    level = _resolve_level(level_name)
    formatter = _build_formatter()
    root_logger = logging.getLogger()

    if root_logger.handlers:
        root_logger.setLevel(level)
        for handler in root_logger.handlers:
            handler.setLevel(level)
            handler.setFormatter(formatter)
        return

    logging.basicConfig(level=level)
    for handler in logging.getLogger().handlers:
        handler.setFormatter(formatter)


def _build_formatter() -> logging.Formatter:
    pattern = "%(asctime)s %(levelname)s %(name)s %(message)s"
    return logging.Formatter(pattern)
