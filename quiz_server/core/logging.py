from pathlib import Path
import logging
import logging.config
import os


def _rotating_file(filename: Path, log_level: str) -> dict:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": "default",
        "level": log_level,
        "filename": str(filename),
        "maxBytes": 5 * 1024 * 1024,
        "backupCount": 3,
        "encoding": "utf-8",
    }


def configure_logging():
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    log_dir = Path("logs")
    log_dir.mkdir(parents=True, exist_ok=True)

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "level": log_level,
            },
            "file": _rotating_file(log_dir / "app.log", log_level),
            "session_file": _rotating_file(log_dir / "session.log", log_level),
            "store_file": _rotating_file(log_dir / "store.log", log_level),
        },
        "root": {
            "level": log_level,
            "handlers": ["console", "file"],
        },
        "loggers": {
            "session": {
                "level": log_level,
                "handlers": ["console", "session_file"],
                "propagate": False,
            },
            "store": {
                "level": log_level,
                "handlers": ["console", "store_file"],
                "propagate": False,
            },
        },
    }

    logging.config.dictConfig(config)
