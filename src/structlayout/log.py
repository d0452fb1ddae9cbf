from __future__ import annotations

import logging
import os
import sys
from typing import Optional


LOG_ENV = "STRUCTLAYOUT_LOG"
DEFAULT_LEVEL = logging.WARNING
LOG_FORMAT = "[structlayout:%(name)s] %(levelname)s: %(message)s"


def parse_level(value: Optional[str]) -> Optional[int]:
    if value is None or not value.strip():
        return DEFAULT_LEVEL
    value = value.strip()
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value.upper())
    if isinstance(level, int):
        return level
    return None


def configure_logging(stream=None) -> int:
    raw = os.environ.get(LOG_ENV)
    level = parse_level(raw)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger("structlayout")
    root.handlers[:] = [handler]
    root.propagate = False
    if level is None:
        root.setLevel(DEFAULT_LEVEL)
        root.warning("unknown %s value %r, using warning", LOG_ENV, raw)
        return DEFAULT_LEVEL
    root.setLevel(level)
    return level
