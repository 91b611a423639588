# backend/careers/core/logging.py
import logging

from careers.core.config import settings

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_configured = False


def configure_logging(level: str | None = None) -> None:
    """Set up root logging once; later calls only adjust the level."""
    global _configured
    lvl = (level or settings.LOG_LEVEL or "INFO").upper()
    if not _configured:
        logging.basicConfig(level=lvl, format=_FORMAT)
        _configured = True
    logging.getLogger().setLevel(lvl)
    # SQL echo is controlled by DATABASE_ECHO, keep the engine logger quiet otherwise
    if not settings.DATABASE_ECHO:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
