"""Locating the ffmpeg executable.

An explicit path (`AUDIO_ENGINE_FFMPEG_BIN=/opt/ffmpeg/bin/ffmpeg`) must be an
executable file. A bare name is looked up on PATH; only the default name
`ffmpeg` falls back to the binary bundled with `imageio-ffmpeg`.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from audiochain.exceptions import EngineUnavailableError

logger = logging.getLogger(__name__)

_DEFAULT_NAME = "ffmpeg"
_HINT = (
    "Install ffmpeg and ensure it is in PATH (or install `imageio-ffmpeg` in the env, "
    "or set AUDIO_ENGINE_FFMPEG_BIN)."
)


def _is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def _bundled_ffmpeg() -> str | None:
    try:
        import imageio_ffmpeg
    except ImportError:
        return None
    try:
        return str(imageio_ffmpeg.get_ffmpeg_exe())
    except (RuntimeError, OSError) as exc:
        logger.warning("imageio-ffmpeg is installed but has no usable binary (%s)", exc)
        return None


def resolve_ffmpeg_bin(ffmpeg_bin: str | None = _DEFAULT_NAME) -> str:
    """Return a runnable ffmpeg path or raise `EngineUnavailableError`."""
    configured = (ffmpeg_bin or _DEFAULT_NAME).strip()
    candidate = Path(configured).expanduser()

    if os.sep in configured or (os.altsep and os.altsep in configured):
        if _is_executable(candidate):
            return str(candidate)
        raise EngineUnavailableError("ffmpeg", f"not an executable file: {candidate}. {_HINT}")

    found = shutil.which(configured)
    if found:
        return found

    if configured == _DEFAULT_NAME:
        bundled = _bundled_ffmpeg()
        if bundled:
            logger.info("ffmpeg not on PATH; using bundled binary %s", bundled)
            return bundled

    raise EngineUnavailableError("ffmpeg", f"{configured!r} not found in PATH. {_HINT}")
