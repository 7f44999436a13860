"""Core data models for audiochain."""

from audiochain.models.artifact import ArtifactHandle, ArtifactOrigin
from audiochain.models.effect import (
    AudioEffect,
    Echo,
    FadeIn,
    FadeOut,
    HighPass,
    LowPass,
    effect_to_filter,
    register_effect,
)
from audiochain.models.operation import (
    AdjustVolume,
    ApplyEffect,
    ChangeSpeed,
    Merge,
    Normalize,
    Operation,
    Overlay,
    Reverse,
    Seek,
    Transcode,
    Trim,
)

__all__ = [
    "AdjustVolume",
    "ApplyEffect",
    "ArtifactHandle",
    "ArtifactOrigin",
    "AudioEffect",
    "ChangeSpeed",
    "Echo",
    "FadeIn",
    "FadeOut",
    "HighPass",
    "LowPass",
    "Merge",
    "Normalize",
    "Operation",
    "Overlay",
    "Reverse",
    "Seek",
    "Transcode",
    "Trim",
    "effect_to_filter",
    "register_effect",
]
