"""Blocking subprocess helper.

Every engine call is a single `subprocess.run()`; the caller's thread waits for
it. A timeout kills the child and is reported through `RunResult.timed_out`
rather than raised, so the engine layer decides how to surface it.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class RunResult:
    returncode: int
    stdout: bytes
    stderr: bytes
    timed_out: bool = False

    @property
    def diagnostics(self) -> str:
        return self.stderr.decode("utf-8", errors="replace")


def run_subprocess(
    args: Sequence[str],
    *,
    capture_output: bool = True,
    timeout_s: float | None = None,
) -> RunResult:
    try:
        cp = subprocess.run(
            list(args),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE if capture_output else subprocess.DEVNULL,
            stderr=subprocess.PIPE if capture_output else subprocess.DEVNULL,
            check=False,
            timeout=timeout_s,
        )
    except subprocess.TimeoutExpired as exc:
        # subprocess.run() has already killed and reaped the child.
        return RunResult(
            returncode=-9,
            stdout=_as_bytes(exc.stdout),
            stderr=_as_bytes(exc.stderr),
            timed_out=True,
        )
    return RunResult(
        returncode=int(cp.returncode),
        stdout=cp.stdout or b"",
        stderr=cp.stderr or b"",
    )


def _as_bytes(value: bytes | str | None) -> bytes:
    if value is None:
        return b""
    if isinstance(value, str):
        return value.encode("utf-8")
    return value
