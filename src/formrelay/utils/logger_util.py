import logging
import os
from pathlib import Path
from typing import Optional

_FORMAT = '%(asctime)s     || %(name)s \n%(levelname)s   || %(message)s \n'
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _log_dir() -> Optional[Path]:
    """Directory for per-logger files, or None to log to the stream only.

    ``FORMRELAY_LOG_DIR`` moves it (default ``log/``); set it empty on hosts
    where the filesystem is read-only and stderr is collected for you.
    """
    raw = os.environ.get("FORMRELAY_LOG_DIR", "log")
    if not raw:
        return None
    path = Path(raw)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError:
        return None
    return path


def _level(default: int) -> int:
    # FORMRELAY_LOG_LEVEL (e.g. "WARNING") caps every module's requested level
    name = os.environ.get("FORMRELAY_LOG_LEVEL")
    if not name:
        return default
    override = logging.getLevelName(name.strip().upper())
    return max(default, override) if isinstance(override, int) else default


def get_logger(name: str, level=logging.INFO) -> logging.Logger:
    """Get a named logger writing to stderr and, when possible, ``<log dir>/<name>.log``.

    Example:
        logger = get_logger(__name__, logging.DEBUG)
        logger.error("%s: %s", endpoint, message)

    Returns:
        logging.Logger: Configured logger instance.
    """
    logger = logging.getLogger(name)
    level = _level(level)

    # handlers are attached once per name; repeated calls only adjust the level
    if logger.handlers:
        logger.setLevel(level)
        return logger

    formatter = logging.Formatter(_FORMAT, datefmt=_DATEFMT)
    handlers = [logging.StreamHandler()]
    logs_dir = _log_dir()
    if logs_dir is not None:
        handlers.append(logging.FileHandler(str(logs_dir / f"{name}.log"), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    logger.propagate = False

    logger.debug("'%s' initialized with level %s", name, logging.getLevelName(level))
    return logger
