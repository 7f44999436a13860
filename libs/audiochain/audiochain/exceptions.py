"""audiochain exception hierarchy."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from audiochain.error_codes import ErrorCode


class AudioChainError(Exception):
    """Base error for audiochain."""

    default_code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(self, message: str, *, error_code: ErrorCode | str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code


class ConfigurationError(AudioChainError):
    """Raised when settings or engine selection are invalid."""

    default_code = ErrorCode.CONFIGURATION


class InvalidParameterError(AudioChainError, ValueError):
    """Raised for malformed operation arguments, before any subprocess is spawned."""

    default_code = ErrorCode.INVALID_PARAMETER


class IoFailureError(AudioChainError, OSError):
    """Raised when a temp file, source file or destination cannot be accessed."""

    default_code = ErrorCode.IO_FAILURE

    def __init__(
        self,
        message: str,
        *,
        path: str | Path | None = None,
        error_code: ErrorCode | str | None = None,
    ) -> None:
        super().__init__(message, error_code=error_code)
        self.path = str(path) if path is not None else None


class ArtifactReleasedError(AudioChainError):
    """Raised when a processor is used after its artifact reference was released."""

    default_code = ErrorCode.ARTIFACT_RELEASED


class EngineUnavailableError(AudioChainError):
    """Raised when the engine executable cannot be located or started."""

    default_code = ErrorCode.ENGINE_UNAVAILABLE

    def __init__(self, engine: str, message: str, *, error_code: ErrorCode | str | None = None) -> None:
        super().__init__(f"{engine}: {message}", error_code=error_code)
        self.engine = engine


class EngineFailureError(AudioChainError):
    """Raised when the engine exits non-zero or is terminated.

    `diagnostics` holds the engine's captured diagnostic stream verbatim.
    """

    default_code = ErrorCode.ENGINE_FAILED

    def __init__(
        self,
        engine: str,
        message: str,
        *,
        diagnostics: str = "",
        returncode: int | None = None,
        command: Sequence[str] = (),
        terminated: bool = False,
        error_code: ErrorCode | str | None = None,
    ) -> None:
        super().__init__(f"{engine}: {message}", error_code=error_code)
        self.engine = engine
        self.diagnostics = diagnostics
        self.returncode = returncode
        self.command = list(command)
        self.terminated = bool(terminated)
        self.artifact_path: str | None = None
