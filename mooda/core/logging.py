from __future__ import annotations

import logging
import sys
from typing import Final

from mooda.core.config import settings

_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_HANDLER_ATTACHED: bool = False


def configure_logging(level_name: str | None = None) -> None:
    """Attach a single stdout handler to the root logger (idempotent)."""
    global _HANDLER_ATTACHED

    name = (level_name or settings.LOG_LEVEL).upper()
    level = getattr(logging, name, logging.INFO)
    root = logging.getLogger()

    if not _HANDLER_ATTACHED:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)
        _HANDLER_ATTACHED = True

    root.setLevel(level)
