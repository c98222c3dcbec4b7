"""
Logging configuration shared by the API process.
"""
import logging
import sys

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger once with a single stream handler."""
    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())

    if not any(getattr(h, "_employees_api", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._employees_api = True
        root.addHandler(handler)

    # SQL echo is controlled by SQLALCHEMY_ECHO, keep the engine logger quiet otherwise
    if not settings.SQLALCHEMY_ECHO:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
