"""Engine factory and registry."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from audiochain.engines.base import AudioEngine
from audiochain.exceptions import ConfigurationError


def get_audio_engine(config: Mapping[str, Any]) -> AudioEngine:
    provider_type = str(config.get("provider", "ffmpeg")).strip().lower()

    match provider_type:
        case "ffmpeg" | "default":
            from audiochain.engines.ffmpeg import FFmpegEngine

            return FFmpegEngine(ffmpeg_bin=str(config.get("ffmpeg_bin") or "ffmpeg"))
        case _:
            raise ConfigurationError(f"Unknown audio engine: {provider_type}")
