"""Configure process-wide logging once, at service or CLI startup."""
from __future__ import annotations

import logging
import os

_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_CONFIGURED = False


def _resolve_level(level: str | int | None) -> int:
    if isinstance(level, int):
        return level
    if not level:
        return logging.INFO
    return getattr(logging, str(level).strip().upper(), logging.INFO)


def configure_logging(level: str | int | None = None, *, force: bool = False) -> None:
    global _CONFIGURED
    if _CONFIGURED and not force:
        return
    resolved = _resolve_level(level if level is not None else os.environ.get("SUTILIA_LOG_LEVEL"))
    logging.basicConfig(level=resolved, format=_FORMAT)
    logging.getLogger("sutilia").setLevel(resolved)
    _CONFIGURED = True
