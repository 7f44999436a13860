"""Logging for the `audiochain` logger tree.

Only `audiochain.*` loggers are touched; the host application's root logger and
handlers are left alone.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from audiochain.config import LoggingSettings, Settings
from audiochain.exceptions import ConfigurationError

LIBRARY_LOGGER = "audiochain"
ENGINE_COMMAND_LOGGER = "audiochain.pipeline.invoker"


def _level(name: str | None) -> int:
    level = logging.getLevelName(str(name or "INFO").strip().upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"LOG_LEVEL is not a logging level: {name!r}")
    return level


def _file_handler(cfg: LoggingSettings, log_dir: str) -> RotatingFileHandler:
    file_path = Path(str(cfg.file))
    if not file_path.is_absolute():
        file_path = Path(log_dir) / file_path
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigurationError(f"cannot create log directory {file_path.parent}: {exc}") from exc
    return RotatingFileHandler(
        file_path,
        maxBytes=int(cfg.max_bytes),
        backupCount=int(cfg.backup_count),
        encoding="utf-8",
    )


def setup_logging(settings: Settings | None = None, *, force: bool = False) -> logging.Logger:
    """Attach console/file handlers from `LoggingSettings` to the library logger.

    Runs once per process unless `force` is set. With `engine_commands`
    enabled the invoker logger emits each engine command line even when the
    library level is INFO or higher.
    """
    logger = logging.getLogger(LIBRARY_LOGGER)
    if getattr(logger, "_audiochain_configured", False) and not force:
        return logger

    settings = settings or Settings()
    cfg = settings.logging
    level = _level(cfg.level)
    formatter = logging.Formatter(fmt=str(cfg.format), datefmt=str(cfg.datefmt))

    handlers: list[logging.Handler] = []
    if cfg.console:
        handlers.append(logging.StreamHandler())
    if cfg.file:
        handlers.append(_file_handler(cfg, settings.log_dir))
    for handler in handlers:
        handler.setFormatter(formatter)

    for old in logger.handlers:
        if old not in handlers:
            old.close()
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = False

    commands = logging.getLogger(ENGINE_COMMAND_LOGGER)
    commands.setLevel(logging.DEBUG if cfg.engine_commands else logging.NOTSET)

    setattr(logger, "_audiochain_configured", True)
    logger.debug(
        "logging configured: level=%s engine=%s engine_loglevel=%s",
        logging.getLevelName(level),
        settings.engine.provider,
        settings.engine.loglevel,
    )
    return logger
