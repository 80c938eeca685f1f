import logging
from typing import Optional

from habitflow.settings import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"

# Transport libraries log every request at DEBUG.
QUIET_LOGGERS = ("urllib3", "requests", "httpx", "httpcore")


def resolve_level(level_name: Optional[str]) -> int:
    level = logging.getLevelName((level_name or "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level_name: Optional[str] = None) -> int:
    level = resolve_level(level_name or get_settings().log_level)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("habitflow").setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    return level
