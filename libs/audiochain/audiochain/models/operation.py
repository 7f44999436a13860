"""Chain operations.

One frozen dataclass per operation. Arguments are validated on construction so
a malformed call fails with `InvalidParameterError` before any engine process
is started.
"""

from __future__ import annotations

from dataclasses import dataclass

from audiochain.exceptions import InvalidParameterError
from audiochain.formats import AudioFormat
from audiochain.models.artifact import ArtifactHandle
from audiochain.models.effect import AudioEffect
from audiochain.utils.timecode import Seconds, to_number, to_seconds


def _non_negative_seconds(value: Seconds, name: str) -> float:
    seconds = to_seconds(value, name=name)
    if seconds < 0:
        raise InvalidParameterError(f"{name} must be >= 0 (got {value!r})")
    return seconds


def _positive_factor(value: float, name: str) -> float:
    factor = to_number(value, name=name)
    if factor <= 0:
        raise InvalidParameterError(f"{name} must be > 0 (got {value!r})")
    return factor


def _optional_in_range(value: float | None, name: str, low: float, high: float) -> float | None:
    if value is None:
        return None
    number = to_number(value, name=name)
    if not low <= number <= high:
        raise InvalidParameterError(f"{name} must be within [{low:g}, {high:g}] (got {value!r})")
    return number


@dataclass(frozen=True)
class Seek:
    at: Seconds

    def __post_init__(self) -> None:
        object.__setattr__(self, "at", _non_negative_seconds(self.at, "Seek.at"))


@dataclass(frozen=True)
class Trim:
    start: Seconds
    end: Seconds

    def __post_init__(self) -> None:
        start = _non_negative_seconds(self.start, "Trim.start")
        end = _non_negative_seconds(self.end, "Trim.end")
        if start > end:
            raise InvalidParameterError(f"Trim.start must be <= Trim.end (got start={start:g}, end={end:g})")
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)


@dataclass(frozen=True)
class Merge:
    inputs: tuple[ArtifactHandle, ...]

    def __post_init__(self) -> None:
        inputs = tuple(self.inputs)
        if not inputs:
            raise InvalidParameterError("Merge.inputs must not be empty")
        object.__setattr__(self, "inputs", inputs)


@dataclass(frozen=True)
class Transcode:
    target_format: AudioFormat

    def __post_init__(self) -> None:
        object.__setattr__(self, "target_format", AudioFormat.parse(self.target_format))


@dataclass(frozen=True)
class AdjustVolume:
    factor: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "factor", _positive_factor(self.factor, "AdjustVolume.factor"))


@dataclass(frozen=True)
class ChangeSpeed:
    factor: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "factor", _positive_factor(self.factor, "ChangeSpeed.factor"))


@dataclass(frozen=True)
class ApplyEffect:
    effect: AudioEffect


@dataclass(frozen=True)
class Reverse:
    pass


@dataclass(frozen=True)
class Normalize:
    """Loudness normalisation; unset targets keep the engine defaults."""

    target_lufs: float | None = None
    true_peak_db: float | None = None
    loudness_range: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "target_lufs", _optional_in_range(self.target_lufs, "Normalize.target_lufs", -70.0, -5.0)
        )
        object.__setattr__(
            self, "true_peak_db", _optional_in_range(self.true_peak_db, "Normalize.true_peak_db", -9.0, 0.0)
        )
        object.__setattr__(
            self,
            "loudness_range",
            _optional_in_range(self.loudness_range, "Normalize.loudness_range", 1.0, 50.0),
        )


@dataclass(frozen=True)
class Overlay:
    overlay: ArtifactHandle
    start_at: Seconds = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "start_at", _non_negative_seconds(self.start_at, "Overlay.start_at"))


Operation = Seek | Trim | Merge | Transcode | AdjustVolume | ChangeSpeed | ApplyEffect | Reverse | Normalize | Overlay
