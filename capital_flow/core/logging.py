import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Third-party loggers that flood INFO/DEBUG with per-query or per-request lines
QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "httpx", "uvicorn.access")


def setup_logging(level: str = "INFO", debug: bool = False) -> None:
    """
    Configure stdout logging for the tracker.

    The ``capital_flow`` loggers follow ``level``; third-party chatter is
    held at WARNING unless ``debug`` is set.
    """
    app_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=app_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("capital_flow").setLevel(app_level)

    if not debug:
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Retrieve a namespaced logger.
    """
    return logging.getLogger(name)
