"""
Logging configuration for the records service.

``setup_logging`` configures the root logger with a console handler
and an optional file handler.  Modules obtain their loggers with
``logging.getLogger(__name__)`` and pass correlating identifiers
(``tx_id``, ``system_id``, ``record_id``) as message arguments, e.g.::

    logger.info("Creating record tx_id=%s system_id=%s", tx_id, system_id)
"""

import logging
from pathlib import Path
from typing import Optional

from .config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: Optional[str] = None, logfile: Optional[str] = None) -> logging.Logger:
    """Configure the root logger once and return the package logger.

    When the root logger already has handlers (an embedding web
    server, for example) only the level is applied.

    Parameters
    ----------
    level : Optional[str]
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.  Defaults to
        ``settings.log_level``.
    logfile : Optional[str]
        Path to a file to log messages to.  Missing parent directories
        are created.  Defaults to ``settings.log_file``; if neither is
        set, no file handler is added.

    Returns
    -------
    logging.Logger
        The ``nr_permitting_api`` package logger.
    """
    level_name = (level or settings.log_level).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    root.setLevel(numeric_level)
    package_logger = logging.getLogger("nr_permitting_api")
    if root.handlers:
        return package_logger

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    logfile = logfile or settings.log_file
    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    return package_logger
