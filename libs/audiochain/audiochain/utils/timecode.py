"""Time and number helpers for engine arguments."""

from __future__ import annotations

import math
from datetime import timedelta
from decimal import Decimal

from audiochain.exceptions import InvalidParameterError

Seconds = float | int | timedelta


def to_seconds(value: Seconds, *, name: str = "value") -> float:
    """Normalise seconds (int/float) or a timedelta to float seconds."""
    if isinstance(value, timedelta):
        seconds = value.total_seconds()
    elif isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidParameterError(f"{name} must be seconds or a timedelta (got {value!r})")
    else:
        seconds = float(value)
    if not math.isfinite(seconds):
        raise InvalidParameterError(f"{name} must be finite (got {value!r})")
    return seconds


def to_number(value: float | int, *, name: str = "value") -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidParameterError(f"{name} must be a number (got {value!r})")
    number = float(value)
    if not math.isfinite(number):
        raise InvalidParameterError(f"{name} must be finite (got {value!r})")
    return number


def format_number(value: float) -> str:
    """Render a number for the engine: `30`, `1.5`, `0.125`.

    Fixed precision (microseconds for times) keeps output locale-free and
    identical across calls.
    """
    text = f"{float(value):.6f}".rstrip("0").rstrip(".")
    if text in {"", "-0"}:
        return "0"
    return text


def format_factor(value: float) -> str:
    """Render a gain, ratio or frequency without rounding: `1.5`, `0.0000001`.

    Shortest round-trip digits in plain notation, so a small positive factor
    never collapses to `0`.
    """
    text = format(Decimal(repr(float(value))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in {"", "-0"}:
        return "0"
    return text


def to_millis(seconds: float) -> int:
    return int(round(float(seconds) * 1000))
