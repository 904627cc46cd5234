import logging
import sys

from spectapps.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = None) -> None:
    """Configure the root logger for the API process"""
    level_name = level or settings.LOG_LEVEL
    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name.upper(), logging.INFO))

    # Avoid stacking handlers when the app module is imported more than once
    if not any(getattr(h, "_spectapps", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._spectapps = True
        root.addHandler(handler)

    # aiohttp access noise
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
