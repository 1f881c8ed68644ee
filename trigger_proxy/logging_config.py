import logging
import sys

# httpx logs every request URL at INFO, including ?token= credentials
_QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: int | str = logging.INFO) -> None:
    """Configure logging for the proxy. Safe to call again to change the level."""
    root = logging.getLogger()
    root.setLevel(level.upper() if isinstance(level, str) else level)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )
        root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a named logger. Use as: logger = get_logger(__name__)."""
    return logging.getLogger(name)
