"""Canonical error codes attached to audiochain errors."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    UNKNOWN = "UNKNOWN"
    INVALID_PARAMETER = "INVALID_PARAMETER"
    CONFIGURATION = "CONFIGURATION"

    IO_FAILURE = "IO_FAILURE"
    ARTIFACT_RELEASED = "ARTIFACT_RELEASED"

    ENGINE_FAILED = "ENGINE_FAILED"
    ENGINE_KILLED = "ENGINE_KILLED"
    ENGINE_TIMEOUT = "ENGINE_TIMEOUT"
    ENGINE_UNAVAILABLE = "ENGINE_UNAVAILABLE"
