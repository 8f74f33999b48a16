"""Logging configuration helpers."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
CHAIN_LOGGER = "hookchain.chain"


def resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def configure_logging(level: str | int = "INFO", trace_listeners: bool = False) -> None:
    """Configure root logging; ``trace_listeners`` turns on per-listener debug lines."""
    logging.basicConfig(level=resolve_level(level), format=LOG_FORMAT)
    if trace_listeners:
        logging.getLogger(CHAIN_LOGGER).setLevel(logging.DEBUG)
