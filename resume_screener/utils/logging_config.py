"""
Logging setup for the resume screener.

One dictConfig per process. Profiles are picked from ENVIRONMENT; LOG_LEVEL and LOG_DIR
override the level and the directory for the rotating files.
"""
import logging
import logging.config
import os
import time
from datetime import date
from pathlib import Path
from typing import Any, Dict, List

ROOT_LOGGER = "resume_screener"

FORMATS = {
    "simple": "%(levelname)s - %(name)s - %(message)s",
    "detailed": "%(asctime)s | %(levelname)-8s | %(name)-45s | %(funcName)s:%(lineno)d | %(message)s",
    "json": '{"ts": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "line": %(lineno)d, "message": "%(message)s"}',
}

# environment -> (level, file logging, format); level None means LOG_LEVEL
PROFILES = {
    "production": (None, True, "json"),
    "development": ("DEBUG", True, "detailed"),
    "testing": ("WARNING", False, "simple"),
}

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def _rotating_file(path: Path, level: str) -> Dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "file",
        "filename": str(path),
        "maxBytes": MAX_LOG_BYTES,
        "backupCount": LOG_BACKUPS,
        "encoding": "utf8",
    }


def setup_logging(
    level: str = "INFO",
    enable_file: bool = True,
    format_style: str = "detailed",
    log_dir: str = None,
) -> None:
    """
    Configure the root logger and uvicorn's loggers.

    Args:
        level: Logging level name
        enable_file: Also write daily rotating files (all records, and errors only)
        format_style: 'simple', 'detailed' or 'json' for the console
        log_dir: Directory for log files (defaults to LOG_DIR or ./logs)
    """
    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "console",
            "stream": "ext://sys.stdout",
        }
    }
    root_handlers: List[str] = ["console"]

    if enable_file:
        directory = Path(log_dir or os.getenv("LOG_DIR", "logs"))
        directory.mkdir(parents=True, exist_ok=True)
        stamp = date.today().strftime("%Y%m%d")
        handlers["file"] = _rotating_file(directory / f"resume_screener_{stamp}.log", level)
        handlers["error_file"] = _rotating_file(directory / f"resume_screener_errors_{stamp}.log", "ERROR")
        root_handlers += ["file", "error_file"]

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"format": FORMATS.get(format_style, FORMATS["detailed"]), "datefmt": "%Y-%m-%d %H:%M:%S"},
            "file": {"format": FORMATS["detailed"], "datefmt": "%Y-%m-%d %H:%M:%S"},
        },
        "handlers": handlers,
        "root": {"level": level, "handlers": root_handlers},
        "loggers": {
            # uvicorn installs its own handlers; route through ours instead
            "uvicorn": {"level": "INFO", "handlers": root_handlers, "propagate": False},
            "uvicorn.access": {"level": "INFO", "handlers": ["console"], "propagate": False},
        },
    })

    get_logger("logging").info(f"Logging configured: level={level} file={enable_file} format={format_style}")


def get_logger(name: str) -> logging.Logger:
    """Logger under the resume_screener namespace; module __name__ values are already inside it."""
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def configure_for_environment() -> None:
    environment = os.getenv("ENVIRONMENT", "development").lower()
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    level, enable_file, format_style = PROFILES.get(environment, (None, True, "detailed"))
    setup_logging(level=level or log_level, enable_file=enable_file, format_style=format_style)


class PerformanceMonitor:
    """Times a block and logs it; slow blocks are logged as warnings. Exceptions pass through."""

    def __init__(self, operation_name: str, logger: logging.Logger = None, threshold_ms: float = 1000):
        self.operation_name = operation_name
        self.logger = logger or get_logger("performance")
        self.threshold_ms = threshold_ms
        self.elapsed_ms = None
        self._started = None

    def __enter__(self):
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_ms = (time.perf_counter() - self._started) * 1000

        if exc_type is not None:
            self.logger.error(f"{self.operation_name} failed after {self.elapsed_ms:.0f}ms: {exc_val}")
        elif self.elapsed_ms > self.threshold_ms:
            self.logger.warning(f"{self.operation_name} took {self.elapsed_ms:.0f}ms (threshold {self.threshold_ms:.0f}ms)")
        else:
            self.logger.info(f"{self.operation_name} took {self.elapsed_ms:.0f}ms")
        return False
