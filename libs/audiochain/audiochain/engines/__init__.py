"""Audio engine implementations."""

from audiochain.engines.base import AudioEngine
from audiochain.engines.ffmpeg import FFmpegEngine
from audiochain.engines.registry import get_audio_engine

__all__ = ["AudioEngine", "FFmpegEngine", "get_audio_engine"]
