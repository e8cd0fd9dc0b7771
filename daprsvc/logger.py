from __future__ import annotations

import logging
from typing import Optional

from .settings import Settings, settings as default_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(cfg: Optional[Settings] = None) -> None:
    """Root logger setup for applications; the library itself only calls logging.getLogger."""
    cfg = cfg or default_settings
    logging.basicConfig(
        level=getattr(logging, cfg.LOG_LEVEL.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
