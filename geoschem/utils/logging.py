"""
Package-wide logging for geoschem.

Usage:
    from geoschem.utils.logging import get_logger
    logger = get_logger(__name__)

Environment variables:
    GEOSCHEM_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)

The CLI can override the level at runtime through ``set_level``.
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Union


ROOT_LOGGER = "geoschem"
LOG_FORMAT = "%(levelname)s | %(name)s | %(message)s"

_LEVEL_NAMES = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


def _resolve_level(value: Union[str, int, None]) -> int:
    if isinstance(value, int):
        return value
    if not value:
        return logging.INFO
    return _LEVEL_NAMES.get(value.strip().upper(), logging.INFO)


def _package_logger() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if root.handlers:
        return root
    level = _resolve_level(os.getenv("GEOSCHEM_LOG_LEVEL"))
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)
    # messages stop at the package logger
    root.propagate = False
    return root


def set_level(level: Union[str, int]) -> None:
    """Change the level of every geoschem logger at once."""
    _package_logger().setLevel(_resolve_level(level))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return ``geoschem`` or one of its children.

    Module names already under the package (``geoschem.generator.fill``)
    map to the same child; anything else is nested below the package root.
    """
    pkg_logger = _package_logger()
    if not name or name == ROOT_LOGGER:
        return pkg_logger
    if name.startswith(ROOT_LOGGER + "."):
        name = name[len(ROOT_LOGGER) + 1:]
    return pkg_logger.getChild(name)
