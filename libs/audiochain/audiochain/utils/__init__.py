"""Utility helpers."""

from audiochain.utils.ffmpeg import resolve_ffmpeg_bin
from audiochain.utils.subprocess import RunResult, run_subprocess
from audiochain.utils.timecode import format_factor, format_number, to_seconds

__all__ = [
    "RunResult",
    "format_factor",
    "format_number",
    "resolve_ffmpeg_bin",
    "run_subprocess",
    "to_seconds",
]
