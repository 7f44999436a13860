"""FFmpeg-based audio engine."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from audiochain.engines.base import AudioEngine
from audiochain.exceptions import EngineUnavailableError
from audiochain.utils.ffmpeg import resolve_ffmpeg_bin
from audiochain.utils.subprocess import RunResult, run_subprocess

logger = logging.getLogger(__name__)


class FFmpegEngine(AudioEngine):
    name = "ffmpeg"

    def __init__(self, ffmpeg_bin: str = "ffmpeg") -> None:
        self.ffmpeg_bin = resolve_ffmpeg_bin(ffmpeg_bin)
        logger.debug("ffmpeg engine binary: %s", self.ffmpeg_bin)

    def describe(self, args: Sequence[str]) -> list[str]:
        return [self.ffmpeg_bin, *args]

    def execute(self, args: Sequence[str], *, timeout_s: float | None = None) -> RunResult:
        cmd = self.describe(args)
        try:
            return run_subprocess(cmd, timeout_s=timeout_s)
        except OSError as exc:
            # Missing, not permitted, or not a runnable image (ENOEXEC).
            raise EngineUnavailableError(
                self.name,
                f"binary not runnable: {self.ffmpeg_bin} ({exc}). Check AUDIO_ENGINE_FFMPEG_BIN.",
            ) from exc
