from __future__ import annotations

import logging
import time

_CONFIGURED = False

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


class TextFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__(LOG_FORMAT)
        self.converter = time.gmtime


def configure_logging(level: int | str = logging.INFO) -> logging.Logger:
    """
    Install one stream handler on the root logger. Calling again only adjusts the level.
    """
    global _CONFIGURED
    root = logging.getLogger()
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError("unknown log level")

    if not _CONFIGURED:
        handler = logging.StreamHandler()
        handler.setFormatter(TextFormatter())
        root.addHandler(handler)
        _CONFIGURED = True

    root.setLevel(level)
    return root
