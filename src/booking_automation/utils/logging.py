from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"


def configure_logging(level: str | int = "INFO") -> None:
    """
    What it does:
    - Installs a single timestamped stream handler on the root logger.

    Why it matters:
    - Page objects log every step; a run over a whole data table is only
      readable when all modules share one format.

    Behavior:
    - Safe to call repeatedly (replaces previous handlers).
    - Unknown level names fall back to INFO.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT, force=True)
    # The sync Playwright API drives an asyncio loop, which is noisy at DEBUG.
    logging.getLogger("asyncio").setLevel(logging.WARNING)
