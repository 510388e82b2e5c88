"""Logging setup for the performance engine and its host applications.

Wraps the standard ``logging`` module with YAML configuration, per-component
level overrides, platform-aware log locations and startup-based rotation.

Platform-specific log locations:
    - macOS: ~/Library/Logs/PohPerf/pohperf.log
    - Linux: ~/.pohperf/logs/pohperf.log
    - Windows: %AppData%/PohPerf/Logs/pohperf.log

Each initialization rotates the previous log, keeping the last 5 runs.

Typical usage example:
    from pohperf.core.logging_system import get_logger

    logger = get_logger(__name__)
    logger.debug("ground roll at %d ft: %.0f", pa, value)
"""

import logging
import os
import platform
import time
from pathlib import Path
from typing import Any

import yaml

DEFAULT_LOG_FILENAME = "pohperf.log"

_logging_config: dict[str, Any] = {}
_loggers_cache: dict[str, logging.Logger] = {}
_initialized = False


class LoggingError(Exception):
    """Raised when logging system operations fail."""


def get_platform_log_dir() -> Path:
    """Get platform-specific log directory.

    Returns:
        Path to the platform-appropriate log directory.
    """
    system = platform.system()

    if system == "Darwin":
        return Path.home() / "Library" / "Logs" / "PohPerf"
    elif system == "Windows":
        appdata = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return appdata / "PohPerf" / "Logs"
    else:
        return Path.home() / ".pohperf" / "logs"


def rotate_logs(
    log_dir: Path, log_filename: str = DEFAULT_LOG_FILENAME, keep_count: int = 5
) -> None:
    """Rotate logs on startup, keeping the last N runs.

    pohperf.log becomes pohperf.log.1, older logs shift up by one and
    anything beyond keep_count is deleted.

    Args:
        log_dir: Directory containing log files.
        log_filename: Base name of the log file.
        keep_count: Number of old logs to keep.
    """
    log_file = log_dir / log_filename
    if not log_file.exists():
        return

    oldest_log = log_dir / f"{log_filename}.{keep_count}"
    if oldest_log.exists():
        oldest_log.unlink()

    for i in range(keep_count - 1, 0, -1):
        old_log = log_dir / f"{log_filename}.{i}"
        if old_log.exists():
            old_log.rename(log_dir / f"{log_filename}.{i + 1}")

    log_file.rename(log_dir / f"{log_filename}.1")


def initialize_logging(
    config_path: str | Path | None = None, use_platform_dir: bool = True
) -> None:
    """Initialize the logging system from YAML configuration.

    Call once at application startup. Rotates the previous run's log.

    Args:
        config_path: Path to logging configuration YAML file. If None, the
            built-in defaults are used.
        use_platform_dir: If True, log to the platform-specific directory
            instead of the configured ``log_dir``.

    Raises:
        LoggingError: If the configuration file is missing or unreadable.
    """
    global _logging_config, _initialized

    if config_path:
        config_path = Path(config_path)
        if not config_path.exists():
            raise LoggingError(f"Logging config file not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise LoggingError(f"Failed to load logging config: {e}") from e

        _logging_config = {**_get_default_config(), **loaded}
    else:
        _logging_config = _get_default_config()

    if use_platform_dir:
        _logging_config["log_dir"] = str(get_platform_log_dir())

    # Release the previous log file before rotating it
    _close_root_handlers()

    log_dir = Path(_logging_config["log_dir"])
    file_config = _logging_config.get("file", {})

    if file_config.get("enabled", True):
        log_dir.mkdir(parents=True, exist_ok=True)
        rotate_logs(
            log_dir,
            file_config.get("filename", DEFAULT_LOG_FILENAME),
            file_config.get("backup_count", 5),
        )

    _configure_root_logger()
    _loggers_cache.clear()

    # Module-level loggers exist before initialization; apply overrides to them too
    for name in _logging_config.get("components", {}):
        get_logger(name)

    _initialized = True


def _get_default_config() -> dict[str, Any]:
    return {
        "level": "INFO",
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        "date_format": "%Y-%m-%d %H:%M:%S",
        "log_dir": "logs",
        "file": {
            "enabled": True,
            "filename": DEFAULT_LOG_FILENAME,
            "backup_count": 5,
        },
        "console": {
            "enabled": True,
            "level": "WARNING",
        },
        "components": {},
    }


def _close_root_handlers() -> None:
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        handler.close()
        root_logger.removeHandler(handler)


def _configure_root_logger() -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, _logging_config.get("level", "INFO")))
    _close_root_handlers()

    console_config = _logging_config.get("console", {})
    if console_config.get("enabled", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_config.get("level", "WARNING")))
        console_handler.setFormatter(_get_formatter())
        root_logger.addHandler(console_handler)

    file_config = _logging_config.get("file", {})
    if file_config.get("enabled", True):
        filename = file_config.get("filename", DEFAULT_LOG_FILENAME)
        log_file = Path(_logging_config["log_dir"]) / filename

        # Rotation happens on startup, not by size
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(_get_formatter())
        root_logger.addHandler(file_handler)


class MillisecondFormatter(logging.Formatter):
    """Formatter that appends milliseconds with a dot separator."""

    def formatTime(self, record, datefmt=None):
        ct = self.converter(record.created)
        s = time.strftime(datefmt or "%Y-%m-%d %H:%M:%S", ct)
        return f"{s}.{int(record.msecs):03d}"


def _get_formatter() -> logging.Formatter:
    return MillisecondFormatter(
        _logging_config.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
        _logging_config.get("date_format", "%Y-%m-%d %H:%M:%S"),
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module or component.

    Loggers are cached. A component can have its level overridden, or be
    disabled, under the ``components`` section of the logging config:

        components:
          pohperf.performance.interpolation:
            level: DEBUG

    Importing the library does not initialize logging. Until
    ``initialize_logging`` runs, records follow the host application's
    logging setup.

    Args:
        name: Logger name, typically ``__name__``.

    Returns:
        Logger instance.
    """
    if name in _loggers_cache:
        return _loggers_cache[name]

    logger = logging.getLogger(name)

    component_config = _logging_config.get("components", {}).get(name, {})
    if component_config.get("enabled", True):
        logger.disabled = False
        if "level" in component_config:
            logger.setLevel(getattr(logging, component_config["level"]))
    else:
        logger.disabled = True

    _loggers_cache[name] = logger
    return logger


def shutdown_logging() -> None:
    """Flush and close all handlers. Call at application shutdown."""
    global _initialized

    logging.shutdown()
    _close_root_handlers()
    _loggers_cache.clear()
    _initialized = False


def is_initialized() -> bool:
    """Check whether ``initialize_logging`` has run."""
    return _initialized
