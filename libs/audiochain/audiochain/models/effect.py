"""Audio effects and their engine filter fragments.

Each effect is a frozen dataclass validated on construction, plus one builder
registered with `register_effect` that renders it as an ffmpeg audio filter.
Adding an effect means adding a class and a builder; nothing else changes.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from audiochain.exceptions import InvalidParameterError
from audiochain.utils.timecode import Seconds, format_factor, format_number, to_millis, to_number, to_seconds

_E = TypeVar("_E")

_FILTER_BUILDERS: dict[type, Callable[[Any], str]] = {}


def register_effect(effect_type: type[_E]) -> Callable[[Callable[[_E], str]], Callable[[_E], str]]:
    def _decorator(builder: Callable[[_E], str]) -> Callable[[_E], str]:
        if effect_type in _FILTER_BUILDERS:
            raise ValueError(f"filter builder already registered for {effect_type.__name__}")
        _FILTER_BUILDERS[effect_type] = builder
        return builder

    return _decorator


def effect_to_filter(effect: "AudioEffect") -> str:
    builder = _FILTER_BUILDERS.get(type(effect))
    if builder is None:
        raise InvalidParameterError(f"unsupported audio effect: {effect!r}")
    return builder(effect)


def _positive_seconds(value: Seconds, name: str) -> float:
    seconds = to_seconds(value, name=name)
    if seconds <= 0:
        raise InvalidParameterError(f"{name} must be > 0 (got {value!r})")
    return seconds


@dataclass(frozen=True)
class FadeIn:
    duration: Seconds

    def __post_init__(self) -> None:
        object.__setattr__(self, "duration", _positive_seconds(self.duration, "FadeIn.duration"))


@dataclass(frozen=True)
class FadeOut:
    duration: Seconds
    start_at: Seconds | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "duration", _positive_seconds(self.duration, "FadeOut.duration"))
        if self.start_at is not None:
            start = to_seconds(self.start_at, name="FadeOut.start_at")
            if start < 0:
                raise InvalidParameterError(f"FadeOut.start_at must be >= 0 (got {self.start_at!r})")
            object.__setattr__(self, "start_at", start)


@dataclass(frozen=True)
class Echo:
    delay: Seconds
    decay: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "delay", _positive_seconds(self.delay, "Echo.delay"))
        if to_millis(self.delay) < 1:
            raise InvalidParameterError(f"Echo.delay must be at least 1ms (got {self.delay!r})")
        decay = to_number(self.decay, name="Echo.decay")
        if not 0 < decay <= 1:
            raise InvalidParameterError(f"Echo.decay must be in (0, 1] (got {self.decay!r})")
        object.__setattr__(self, "decay", decay)


@dataclass(frozen=True)
class LowPass:
    cutoff_hz: float

    def __post_init__(self) -> None:
        cutoff = to_number(self.cutoff_hz, name="LowPass.cutoff_hz")
        if cutoff <= 0:
            raise InvalidParameterError(f"LowPass.cutoff_hz must be > 0 (got {self.cutoff_hz!r})")
        object.__setattr__(self, "cutoff_hz", cutoff)


@dataclass(frozen=True)
class HighPass:
    cutoff_hz: float

    def __post_init__(self) -> None:
        cutoff = to_number(self.cutoff_hz, name="HighPass.cutoff_hz")
        if cutoff <= 0:
            raise InvalidParameterError(f"HighPass.cutoff_hz must be > 0 (got {self.cutoff_hz!r})")
        object.__setattr__(self, "cutoff_hz", cutoff)


AudioEffect = FadeIn | FadeOut | Echo | LowPass | HighPass


@register_effect(FadeIn)
def _fade_in(effect: FadeIn) -> str:
    return f"afade=t=in:st=0:d={format_number(effect.duration)}"


@register_effect(FadeOut)
def _fade_out(effect: FadeOut) -> str:
    duration = format_number(effect.duration)
    if effect.start_at is not None:
        return f"afade=t=out:st={format_number(effect.start_at)}:d={duration}"
    # Track length is unknown here: fade in the reversed signal instead.
    return f"areverse,afade=t=in:st=0:d={duration},areverse"


@register_effect(Echo)
def _echo(effect: Echo) -> str:
    # aecho=in_gain:out_gain:delays(ms):decays
    return f"aecho=0.8:0.9:{to_millis(effect.delay)}:{format_factor(effect.decay)}"


@register_effect(LowPass)
def _lowpass(effect: LowPass) -> str:
    return f"lowpass=f={format_factor(effect.cutoff_hz)}"


@register_effect(HighPass)
def _highpass(effect: HighPass) -> str:
    return f"highpass=f={format_factor(effect.cutoff_hz)}"
