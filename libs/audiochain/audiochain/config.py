"""Configuration management using pydantic-settings."""

from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from audiochain.exceptions import ConfigurationError

_ENV_FILES = (".env", "../.env", "../../.env")

_FFMPEG_LOGLEVELS = frozenset(
    {"quiet", "panic", "fatal", "error", "warning", "info", "verbose", "debug", "trace"}
)


class EngineConfig(BaseSettings):
    """External audio engine configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AUDIO_ENGINE_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    provider: str = "ffmpeg"
    ffmpeg_bin: str = "ffmpeg"
    loglevel: str = "error"
    overwrite: bool = True
    timeout_s: float | None = Field(
        default=None,
        gt=0,
        description="Kill the engine after this many seconds (None waits indefinitely).",
    )

    @field_validator("loglevel")
    @classmethod
    def _check_loglevel(cls, value: str) -> str:
        level = str(value or "").strip().lower()
        if level not in _FFMPEG_LOGLEVELS:
            raise ConfigurationError(
                f"AUDIO_ENGINE_LOGLEVEL must be one of {sorted(_FFMPEG_LOGLEVELS)} (got {value!r})"
            )
        return level


class WorkspaceConfig(BaseSettings):
    """Temporary artifact workspace."""

    model_config = SettingsConfigDict(
        env_prefix="AUDIOCHAIN_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    temp_dir: str | None = None
    # Keep the failed step's partial output for inspection when False.
    cleanup_on_error: bool = True


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
    console: bool = True
    # Log every engine command line at DEBUG without lowering the library level.
    engine_commands: bool = False
    file: str | None = None
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=0)
    backup_count: int = Field(default=5, ge=0)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILES, env_file_encoding="utf-8", extra="ignore"
    )

    log_dir: str = "./logs"

    engine: EngineConfig = EngineConfig()
    workspace: WorkspaceConfig = WorkspaceConfig()
    logging: LoggingSettings = LoggingSettings()

    def model_post_init(self, __context: Any) -> None:
        if self.workspace.temp_dir:
            self.workspace.temp_dir = str(Path(self.workspace.temp_dir).expanduser().resolve())

    def engine_config(self) -> dict[str, Any]:
        """Return an engine config dict for the engine registry."""
        cfg = self.engine.model_dump()
        provider = str(cfg.get("provider") or "").strip().lower()
        if not provider:
            raise ConfigurationError("AUDIO_ENGINE_PROVIDER is not configured")
        cfg["provider"] = provider
        return cfg
