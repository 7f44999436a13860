"""Engine invocation and outcome mapping."""

from __future__ import annotations

import logging
import shlex
from collections.abc import Sequence

from audiochain.engines.base import AudioEngine
from audiochain.error_codes import ErrorCode
from audiochain.exceptions import EngineFailureError
from audiochain.utils.subprocess import RunResult

logger = logging.getLogger(__name__)


class EngineInvoker:
    """Run built argument lists through an engine, one blocking call each.

    Failures are raised as `EngineFailureError` with the engine's diagnostic
    stream attached verbatim. Nothing is retried.
    """

    def __init__(self, engine: AudioEngine, *, timeout_s: float | None = None) -> None:
        self.engine = engine
        self.timeout_s = timeout_s

    def run(self, args: Sequence[str]) -> RunResult:
        command = self.engine.describe(args)
        logger.debug("engine run: %s", shlex.join(command))
        result = self.engine.execute(list(args), timeout_s=self.timeout_s)

        if result.timed_out:
            raise EngineFailureError(
                self.engine.name,
                f"timed out after {self.timeout_s}s and was killed",
                diagnostics=result.diagnostics,
                returncode=result.returncode,
                command=command,
                terminated=True,
                error_code=ErrorCode.ENGINE_TIMEOUT,
            )
        if result.returncode < 0:
            raise EngineFailureError(
                self.engine.name,
                f"terminated by signal {-result.returncode}",
                diagnostics=result.diagnostics,
                returncode=result.returncode,
                command=command,
                terminated=True,
                error_code=ErrorCode.ENGINE_KILLED,
            )
        if result.returncode != 0:
            raise EngineFailureError(
                self.engine.name,
                f"failed (code={result.returncode})",
                diagnostics=result.diagnostics,
                returncode=result.returncode,
                command=command,
                error_code=ErrorCode.ENGINE_FAILED,
            )
        return result
