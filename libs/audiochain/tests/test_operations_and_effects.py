from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta

import pytest

from audiochain.exceptions import InvalidParameterError
from audiochain.formats import AudioFormat
from audiochain.models.artifact import ArtifactHandle
from audiochain.models.effect import Echo, FadeIn, FadeOut, HighPass, LowPass, effect_to_filter, register_effect
from audiochain.models.operation import (
    AdjustVolume,
    ChangeSpeed,
    Merge,
    Normalize,
    Overlay,
    Seek,
    Transcode,
    Trim,
)


def test_trim_requires_start_before_end() -> None:
    with pytest.raises(InvalidParameterError, match="Trim.start"):
        Trim(20, 10)
    op = Trim(timedelta(seconds=1), timedelta(milliseconds=1500))
    assert (op.start, op.end) == (1.0, 1.5)
    assert Trim(5, 5).end == 5.0


@pytest.mark.parametrize("factor", [0, -1, 0.0, math.inf, math.nan])
def test_factors_must_be_positive_and_finite(factor: float) -> None:
    with pytest.raises(InvalidParameterError):
        AdjustVolume(factor)
    with pytest.raises(InvalidParameterError):
        ChangeSpeed(factor)


def test_time_values_reject_non_numbers() -> None:
    with pytest.raises(InvalidParameterError):
        Seek("30")  # type: ignore[arg-type]
    with pytest.raises(InvalidParameterError):
        Seek(True)  # type: ignore[arg-type]
    with pytest.raises(InvalidParameterError):
        Seek(-1)


def test_merge_rejects_empty_inputs() -> None:
    with pytest.raises(InvalidParameterError, match="Merge.inputs"):
        Merge(())
    handles = [ArtifactHandle.user_supplied("a.wav"), ArtifactHandle.user_supplied("b.wav")]
    assert Merge(handles).inputs == tuple(handles)


def test_overlay_start_must_not_be_negative() -> None:
    with pytest.raises(InvalidParameterError, match="Overlay.start_at"):
        Overlay(ArtifactHandle.user_supplied("a.wav"), start_at=-0.5)


def test_transcode_resolves_format_names() -> None:
    assert Transcode("MP3").target_format is AudioFormat.MP3
    with pytest.raises(InvalidParameterError, match="unknown audio format"):
        Transcode("aiff")


def test_normalize_targets_are_range_checked() -> None:
    assert Normalize().target_lufs is None
    assert Normalize(target_lufs=-16).target_lufs == -16.0
    with pytest.raises(InvalidParameterError, match="Normalize.target_lufs"):
        Normalize(target_lufs=3)
    with pytest.raises(InvalidParameterError, match="Normalize.true_peak_db"):
        Normalize(true_peak_db=1)


def test_fade_filters_use_seconds() -> None:
    assert effect_to_filter(FadeIn(timedelta(milliseconds=2500))) == "afade=t=in:st=0:d=2.5"
    assert effect_to_filter(FadeOut(3, start_at=7)) == "afade=t=out:st=7:d=3"
    assert effect_to_filter(FadeOut(3)) == "areverse,afade=t=in:st=0:d=3,areverse"


def test_echo_is_validated_and_rendered_in_millis() -> None:
    assert effect_to_filter(Echo(delay=timedelta(milliseconds=250), decay=0.4)) == "aecho=0.8:0.9:250:0.4"
    with pytest.raises(InvalidParameterError, match="Echo.delay"):
        Echo(delay=0, decay=0.5)
    with pytest.raises(InvalidParameterError, match="Echo.decay"):
        Echo(delay=0.1, decay=0)
    with pytest.raises(InvalidParameterError, match="Echo.decay"):
        Echo(delay=0.1, decay=1.5)


def test_fades_require_positive_duration() -> None:
    with pytest.raises(InvalidParameterError):
        FadeIn(0)
    with pytest.raises(InvalidParameterError):
        FadeOut(-2)


def test_filter_effects() -> None:
    assert effect_to_filter(LowPass(3000)) == "lowpass=f=3000"
    assert effect_to_filter(HighPass(80.5)) == "highpass=f=80.5"
    with pytest.raises(InvalidParameterError):
        LowPass(0)


def test_registry_accepts_new_effects_and_rejects_unknown_ones() -> None:
    @dataclass(frozen=True)
    class Tremolo:
        frequency_hz: float

    with pytest.raises(InvalidParameterError, match="unsupported audio effect"):
        effect_to_filter(Tremolo(5))

    @register_effect(Tremolo)
    def _tremolo(effect: Tremolo) -> str:
        return f"tremolo=f={effect.frequency_hz}"

    assert effect_to_filter(Tremolo(5)) == "tremolo=f=5"

    with pytest.raises(ValueError, match="already registered"):
        register_effect(Tremolo)(_tremolo)
