from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

from audiochain.config import EngineConfig, Settings, WorkspaceConfig
from audiochain.engines.base import AudioEngine
from audiochain.pipeline.processor import ChainRuntime
from audiochain.utils.subprocess import RunResult


class StubEngine(AudioEngine):
    """Records invocations; on success writes a marker file at the output path."""

    name = "stub"

    def __init__(
        self,
        *,
        returncode: int = 0,
        stderr: bytes = b"",
        timed_out: bool = False,
        write_output: bool = True,
    ) -> None:
        self.returncode = returncode
        self.stderr = stderr
        self.timed_out = timed_out
        self.write_output = write_output
        self.calls: list[list[str]] = []
        self.timeouts: list[float | None] = []

    def execute(self, args: Sequence[str], *, timeout_s: float | None = None) -> RunResult:
        self.calls.append(list(args))
        self.timeouts.append(timeout_s)
        if self.write_output:
            Path(args[-1]).write_bytes(f"marker:{len(self.calls)}".encode("utf-8"))
        return RunResult(
            returncode=self.returncode,
            stdout=b"",
            stderr=self.stderr,
            timed_out=self.timed_out,
        )

    @staticmethod
    def input_of(args: Sequence[str]) -> str:
        return args[list(args).index("-i") + 1]


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        log_dir=str(tmp_path / "logs"),
        engine=EngineConfig(provider="ffmpeg", loglevel="error"),
        workspace=WorkspaceConfig(temp_dir=str(tmp_path / "work")),
    )


@pytest.fixture()
def stub_engine() -> StubEngine:
    return StubEngine()


@pytest.fixture()
def runtime(settings: Settings, stub_engine: StubEngine) -> ChainRuntime:
    return ChainRuntime.from_settings(settings, engine=stub_engine)


@pytest.fixture()
def work_dir(settings: Settings) -> Path:
    return Path(str(settings.workspace.temp_dir))


@pytest.fixture()
def source_wav(tmp_path) -> Path:
    path = tmp_path / "src.wav"
    path.write_bytes(b"RIFF-source")
    return path
