from __future__ import annotations

import logging
from pathlib import Path

import pytest

from audiochain.config import EngineConfig, LoggingSettings, Settings, WorkspaceConfig
from audiochain.exceptions import ConfigurationError
from audiochain.pipeline.invoker import EngineInvoker
from audiochain.utils.logging_setup import setup_logging

from conftest import StubEngine


def test_engine_config_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("AUDIO_ENGINE_FFMPEG_BIN", "/opt/ffmpeg/bin/ffmpeg")
    monkeypatch.setenv("AUDIO_ENGINE_LOGLEVEL", "WARNING")
    monkeypatch.setenv("AUDIO_ENGINE_TIMEOUT_S", "90")
    cfg = EngineConfig()
    assert cfg.ffmpeg_bin == "/opt/ffmpeg/bin/ffmpeg"
    assert cfg.loglevel == "warning"
    assert cfg.timeout_s == 90.0
    assert cfg.overwrite is True


def test_workspace_config_reads_environment(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("AUDIOCHAIN_TEMP_DIR", str(tmp_path / "scratch"))
    monkeypatch.setenv("AUDIOCHAIN_CLEANUP_ON_ERROR", "false")
    cfg = WorkspaceConfig()
    assert cfg.temp_dir == str(tmp_path / "scratch")
    assert cfg.cleanup_on_error is False


def test_invalid_loglevel_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match="AUDIO_ENGINE_LOGLEVEL"):
        EngineConfig(loglevel="loud")


def test_engine_config_dict_normalises_provider() -> None:
    settings = Settings(engine=EngineConfig(provider=" FFmpeg "))
    assert settings.engine_config()["provider"] == "ffmpeg"
    with pytest.raises(ConfigurationError):
        Settings(engine=EngineConfig(provider="")).engine_config()


def test_temp_dir_is_made_absolute(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    settings = Settings(workspace=WorkspaceConfig(temp_dir="work"))
    assert settings.workspace.temp_dir == str((tmp_path / "work").resolve())


@pytest.fixture()
def library_logger():
    logger = logging.getLogger("audiochain")
    commands = logging.getLogger("audiochain.pipeline.invoker")
    saved = (logger.handlers[:], logger.level, logger.propagate, commands.level)
    if hasattr(logger, "_audiochain_configured"):
        delattr(logger, "_audiochain_configured")
    yield logger
    for handler in logger.handlers:
        if handler not in saved[0]:
            handler.close()
    logger.handlers, logger.level, logger.propagate = saved[0], saved[1], saved[2]
    commands.setLevel(saved[3])
    if hasattr(logger, "_audiochain_configured"):
        delattr(logger, "_audiochain_configured")


def _read_log(logger: logging.Logger, path: Path) -> str:
    for handler in logger.handlers:
        handler.flush()
    return path.read_text(encoding="utf-8")


def test_setup_logging_configures_audiochain_logger_once(library_logger: logging.Logger, tmp_path: Path) -> None:
    settings = Settings(
        log_dir=str(tmp_path / "logs"),
        logging=LoggingSettings(level="debug", console=False, file="audiochain.log"),
    )
    assert setup_logging(settings) is library_logger
    assert library_logger.level == logging.DEBUG
    assert library_logger.propagate is False
    assert len(library_logger.handlers) == 1

    logging.getLogger("audiochain.pipeline.processor").debug("trim: a -> b")
    text = _read_log(library_logger, tmp_path / "logs" / "audiochain.log")
    assert "trim: a -> b" in text
    assert "engine_loglevel=error" in text

    setup_logging(Settings(logging=LoggingSettings(level="error")))
    assert library_logger.level == logging.DEBUG

    setup_logging(Settings(logging=LoggingSettings(level="error", console=False)), force=True)
    assert library_logger.level == logging.ERROR
    assert library_logger.handlers == []


def test_engine_commands_are_logged_above_debug_level(library_logger: logging.Logger, tmp_path: Path) -> None:
    settings = Settings(
        log_dir=str(tmp_path),
        logging=LoggingSettings(level="warning", console=False, file="engine.log", engine_commands=True),
    )
    setup_logging(settings)

    EngineInvoker(StubEngine()).run(["-i", "a.wav", str(tmp_path / "b.wav")])
    logging.getLogger("audiochain.pipeline.processor").info("reverse: a -> b")

    text = _read_log(library_logger, tmp_path / "engine.log")
    assert "engine run: stub -i a.wav" in text
    assert "reverse: a -> b" not in text


def test_unknown_log_level_is_a_configuration_error(library_logger: logging.Logger) -> None:
    with pytest.raises(ConfigurationError, match="LOG_LEVEL"):
        setup_logging(Settings(logging=LoggingSettings(level="chatty", console=False)))
