"""Logger factory for docshost modules.

Each named logger gets one stream handler with the ``[docshost]`` prefix and
the level from `docshost.config.log_level_name()`.
"""
from __future__ import annotations

import logging
import threading

from docshost import config as app_config

_LOCK = threading.Lock()
_FORMAT = "[docshost] %(asctime)s %(levelname)s %(name)s %(message)s"


def get_logger(name: str = "docshost") -> logging.Logger:
    with _LOCK:
        logger = logging.getLogger(name)
        logger.setLevel(getattr(logging, app_config.log_level_name(), logging.INFO))
        if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(_FORMAT))
            logger.addHandler(handler)
        logger.propagate = False
        return logger


__all__ = ["get_logger"]
