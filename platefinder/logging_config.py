from __future__ import annotations

import logging
import os

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Set the ``platefinder`` log level from ``PLATEFINDER_LOG_LEVEL`` (default INFO)."""
    level_name = (level or os.getenv("PLATEFINDER_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(format=_FORMAT)
    logging.getLogger("platefinder").setLevel(getattr(logging, level_name, logging.INFO))
