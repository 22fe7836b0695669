"""Process-wide logging setup, called once from create_app()."""

import logging
import sys

from crudkit.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

# Driver loggers that are chatty at INFO.
_QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncio", "redis")

_stdout_handler: logging.Handler | None = None


def setup_logging(settings: Settings) -> None:
    """Send records to stdout; DEBUG when settings.debug, else INFO.

    Safe to call again (tests build many apps): the stdout handler is
    attached once and only the level is refreshed.
    """
    global _stdout_handler
    root = logging.getLogger()
    if _stdout_handler is None:
        _stdout_handler = logging.StreamHandler(sys.stdout)
        _stdout_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(_stdout_handler)
    root.setLevel(logging.DEBUG if settings.debug else logging.INFO)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
