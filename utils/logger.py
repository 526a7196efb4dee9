from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict

LOG_FILE_NAME = "femail.log"


def configure_logging(log_dir: Path | None, level: str = "INFO") -> Path | None:
    """Configure the log file and a stderr handler that only reports warnings.

    Command output owns stdout, so console logging stays at WARNING no matter
    what ``level`` the file handler gets. Without a ``log_dir`` only the stderr
    handler is installed.
    """

    handlers: Dict[str, Dict[str, Any]] = {
        "stderr": {
            "class": "logging.StreamHandler",
            "formatter": "console",
            "level": "WARNING",
        },
    }
    log_path = None
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / LOG_FILE_NAME
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "standard",
            "filename": str(log_path),
            "maxBytes": 1_000_000,
            "backupCount": 3,
            "encoding": "utf-8",
        }

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            },
            "console": {
                "format": "%(levelname)s | %(message)s",
            },
        },
        "handlers": handlers,
        "root": {
            "handlers": list(handlers),
            "level": level.upper(),
        },
    }

    logging.config.dictConfig(config)
    logging.getLogger(__name__).debug("Logging configured at %s", level)
    return log_path
