"""Logging helpers shared by every gitversioning module.

Modules log through ``logging.getLogger(__name__)``. DEBUG traces are guarded
with :func:`is_debug_enabled` and carry structured fields built by
:func:`extra_context` so log handlers can filter on event/component/action.
"""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from ..constants import Constants


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once.

    The level is taken from ``level``, then the GITVERSIONING_LOG_LEVEL
    environment variable, then INFO.
    """
    level_name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or "INFO").upper()
    level_value = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level_value)


def add_file_handler(path: str) -> None:
    """Mirror log output to ``path``."""
    file_handler = logging.FileHandler(path, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
    logging.getLogger().addHandler(file_handler)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when ``logger`` would emit DEBUG records."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**kwargs: Any) -> Dict[str, Any]:
    """Build the ``extra`` mapping for a structured log record.

    None values are dropped so records only carry the fields that apply.
    """
    context: Dict[str, Any] = {}
    for key, value in kwargs.items():
        if value is None:
            continue
        context[key] = value
    return context
