"""Artifact handle model."""

from __future__ import annotations

import logging
import threading
from enum import Enum
from pathlib import Path

from audiochain.exceptions import ArtifactReleasedError

logger = logging.getLogger(__name__)


class ArtifactOrigin(str, Enum):
    USER_SUPPLIED = "user_supplied"
    GENERATED = "generated"


class ArtifactHandle:
    """A single audio file on disk plus a shared reference count.

    Processors that share a file (clones, merge/overlay inputs kept alive by
    siblings) each hold one reference. A temporary file is removed once, when
    the last reference is released; non-temporary files are never touched.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        origin: ArtifactOrigin,
        temporary: bool,
        preexisting: bool = False,
    ) -> None:
        self.path = Path(path)
        self.origin = ArtifactOrigin(origin)
        self.temporary = bool(temporary)
        # True when a caller-owned destination already held a file before the run.
        self.preexisting = bool(preexisting)
        self._refs = 1
        self._lock = threading.Lock()

    @classmethod
    def user_supplied(cls, path: str | Path) -> "ArtifactHandle":
        return cls(path, origin=ArtifactOrigin.USER_SUPPLIED, temporary=False)

    @classmethod
    def generated(
        cls, path: str | Path, *, temporary: bool = True, preexisting: bool = False
    ) -> "ArtifactHandle":
        return cls(path, origin=ArtifactOrigin.GENERATED, temporary=temporary, preexisting=preexisting)

    @property
    def refs(self) -> int:
        with self._lock:
            return self._refs

    @property
    def released(self) -> bool:
        with self._lock:
            return self._refs <= 0

    def acquire(self) -> "ArtifactHandle":
        with self._lock:
            if self._refs <= 0:
                raise ArtifactReleasedError(f"artifact already released: {self.path}")
            self._refs += 1
        return self

    def release(self) -> bool:
        """Drop one reference; return True when this call removed the file."""
        with self._lock:
            if self._refs <= 0:
                return False
            self._refs -= 1
            if self._refs > 0 or not self.temporary:
                return False
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            # Runs from finalizers too, where raising would only print a warning.
            logger.warning("failed to remove temp artifact %s (%s)", self.path, exc)
            return False
        logger.debug("removed temp artifact %s", self.path)
        return True

    def __fspath__(self) -> str:
        return str(self.path)

    def __repr__(self) -> str:
        return (
            f"ArtifactHandle(path={str(self.path)!r}, origin={self.origin.value}, "
            f"temporary={self.temporary}, refs={self.refs})"
        )
