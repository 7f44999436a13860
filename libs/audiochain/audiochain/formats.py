"""Audio formats and the engine encoder catalog."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from audiochain.exceptions import InvalidParameterError


class AudioFormat(str, Enum):
    WAV = "wav"
    MP3 = "mp3"
    FLAC = "flac"
    OGG = "ogg"
    OPUS = "opus"
    M4A = "m4a"

    @classmethod
    def parse(cls, value: "AudioFormat | str") -> "AudioFormat":
        """Resolve a member, member name or file extension (`"mp3"`, `".MP3"`)."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidParameterError(f"unknown audio format: {value!r}")
        key = value.strip().lstrip(".").lower()
        for member in cls:
            if key in (member.value, member.name.lower()):
                return member
        raise InvalidParameterError(f"unknown audio format: {value!r}")

    @classmethod
    def from_path(cls, path: str | Path) -> "AudioFormat":
        suffix = Path(path).suffix
        if not suffix:
            raise InvalidParameterError(f"cannot infer audio format without an extension: {path}")
        return cls.parse(suffix)


@dataclass(frozen=True)
class EncoderSpec:
    codec_args: tuple[str, ...]
    container_ext: str


FORMAT_CATALOG: Mapping[AudioFormat, EncoderSpec] = MappingProxyType(
    {
        AudioFormat.WAV: EncoderSpec(("-c:a", "pcm_s16le", "-f", "wav"), "wav"),
        AudioFormat.MP3: EncoderSpec(("-c:a", "libmp3lame", "-q:a", "2", "-f", "mp3"), "mp3"),
        AudioFormat.FLAC: EncoderSpec(("-c:a", "flac", "-f", "flac"), "flac"),
        AudioFormat.OGG: EncoderSpec(("-c:a", "libvorbis", "-q:a", "5", "-f", "ogg"), "ogg"),
        AudioFormat.OPUS: EncoderSpec(("-c:a", "libopus", "-b:a", "128k", "-f", "opus"), "opus"),
        # ipod is ffmpeg's muxer name for the m4a container
        AudioFormat.M4A: EncoderSpec(("-c:a", "aac", "-b:a", "192k", "-f", "ipod"), "m4a"),
    }
)


def lookup_format(fmt: AudioFormat | str) -> EncoderSpec:
    """Return the encoder spec for `fmt`; unknown formats fail before any engine call."""
    target = AudioFormat.parse(fmt)
    spec = FORMAT_CATALOG.get(target)
    if spec is None:
        raise InvalidParameterError(f"no encoder registered for audio format: {target.value}")
    return spec
