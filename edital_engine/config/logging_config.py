"""
Log setup for applications embedding the edital engine.

Engine modules only ever call ``logging.getLogger(__name__)``; handlers are
attached by the host process through ``setup_logging()``, which reads its
defaults from ``settings.logging`` (``EDITAL_LOGGING__LEVEL``,
``EDITAL_LOGGING__LOG_FILE``, ``EDITAL_LOGGING__SQL_LEVEL``).
"""
import logging
import sys
from pathlib import Path
from typing import Optional, Union

from .settings import settings

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# SQLAlchemy logs every statement at INFO when echo is enabled
SQL_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool")

_configured = False
_installed: list[logging.Handler] = []
_previous_level: Optional[int] = None


def _level(value: Union[int, str]) -> int:
    if isinstance(value, int):
        return value
    resolved = logging.getLevelName(value.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {value}")
    return resolved


def setup_logging(
    level: Union[int, str, None] = None,
    log_file: Union[str, Path, None] = None,
    format_string: Optional[str] = None,
) -> None:
    """
    Attach console (and optionally file) handlers to the root logger.

    Only the first call has an effect until ``reset_logging()`` is called.
    Arguments left as None fall back to ``settings.logging``.
    """
    global _configured, _previous_level

    if _configured:
        return

    level = _level(level if level is not None else settings.logging.level)
    log_file = log_file or settings.logging.log_file
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    _previous_level = root.level
    root.setLevel(level)

    sql_level = _level(settings.logging.sql_level)
    for name in SQL_LOGGERS:
        logging.getLogger(name).setLevel(sql_level)

    _installed[:] = handlers
    _configured = True
    logging.getLogger(__name__).debug(
        f"Logging configured: level={logging.getLevelName(level)}, file={log_file or '-'}"
    )


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)``, running ``setup_logging()`` first if needed."""
    if not _configured:
        setup_logging()
    return logging.getLogger(name)


def reset_logging() -> None:
    """Detach and close the handlers installed by ``setup_logging()``."""
    global _configured, _previous_level

    root = logging.getLogger()
    for handler in _installed:
        root.removeHandler(handler)
        handler.close()
    _installed.clear()
    if _previous_level is not None:
        root.setLevel(_previous_level)
        _previous_level = None
    _configured = False
