"""
Process-wide logging setup.

Modules use `logging.getLogger(__name__)` and log `event_name key=value`
messages; this only installs the root handler once.
"""

from __future__ import annotations

import logging
import sys

from . import config

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_configured = False


def configure_logging(level: str | None = None) -> None:
    global _configured
    root = logging.getLogger()
    root.setLevel(level or config.log_level())
    if _configured:
        return None

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    root.addHandler(handler)
    _configured = True
