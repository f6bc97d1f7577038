import logging
import sys

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Chatty third-party loggers capped at WARNING.
_QUIET_LOGGERS = ("uvicorn.access", "watchfiles")


def configure_logging(level: str = "INFO") -> None:
    """Send every texia log line to stdout with one handler on the root logger."""
    numeric_level = logging.getLevelName(str(level).upper())
    invalid = not isinstance(numeric_level, int)
    if invalid:
        numeric_level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    # Called again on restart; keep a single handler
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if invalid:
        logging.getLogger(__name__).warning("Nivel de log inválido %r; se usa INFO", level)
