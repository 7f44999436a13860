"""Audio engine abstractions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from audiochain.utils.subprocess import RunResult


class AudioEngine(ABC):
    """External audio codec/filter engine.

    `execute` runs one blocking invocation and reports the raw outcome; it
    raises `EngineUnavailableError` only when the engine cannot be started.
    """

    name: str

    @abstractmethod
    def execute(self, args: Sequence[str], *, timeout_s: float | None = None) -> RunResult:
        raise NotImplementedError

    def describe(self, args: Sequence[str]) -> list[str]:
        """Full command line for logs and error reports."""
        return [self.name, *args]
