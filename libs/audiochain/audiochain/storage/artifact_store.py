"""Local temp artifact store for chain intermediates."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import threading
import weakref
from pathlib import Path

from audiochain.exceptions import IoFailureError
from audiochain.models.artifact import ArtifactHandle

logger = logging.getLogger(__name__)


class TempArtifactStore:
    """Allocates, persists and purges files under one managed directory.

    With no `base_dir` a fresh `audiochain-*` directory is created under the
    system temp dir on first use; the store removes it on `close()`, when it
    is garbage collected, or at interpreter exit. A configured directory is
    never removed.
    """

    def __init__(self, base_dir: str | None = None) -> None:
        self._configured_dir = Path(base_dir) if base_dir else None
        self._base_dir: Path | None = None
        self._remover: weakref.finalize | None = None
        self._lock = threading.Lock()

    @property
    def base_dir(self) -> Path:
        with self._lock:
            if self._base_dir is None:
                try:
                    if self._configured_dir is not None:
                        self._configured_dir.mkdir(parents=True, exist_ok=True)
                        self._base_dir = self._configured_dir
                    else:
                        created = Path(tempfile.mkdtemp(prefix="audiochain-"))
                        self._remover = weakref.finalize(self, shutil.rmtree, str(created), ignore_errors=True)
                        self._base_dir = created
                except OSError as exc:
                    raise IoFailureError(
                        f"cannot create temp directory: {exc}", path=self._configured_dir
                    ) from exc
                logger.debug("temp artifact dir: %s", self._base_dir)
            return self._base_dir

    def close(self) -> None:
        """Remove the directory this store created; the next allocation makes a new one."""
        with self._lock:
            remover, self._remover = self._remover, None
            if remover is None:
                return
            created, self._base_dir = self._base_dir, None
        remover()
        logger.debug("removed temp artifact dir %s", created)

    def allocate(self, suffix: str, *, stage: str = "artifact") -> ArtifactHandle:
        """Reserve a new temp file; the engine overwrites it."""
        ext = suffix.strip().lstrip(".")
        safe_stage = stage.strip().replace("/", "_") or "artifact"
        try:
            fd, name = tempfile.mkstemp(
                prefix=f"{safe_stage}_",
                suffix=f".{ext}" if ext else "",
                dir=self.base_dir,
            )
            os.close(fd)
        except OSError as exc:
            raise IoFailureError(f"cannot create temp artifact: {exc}", path=self.base_dir) from exc
        return ArtifactHandle.generated(name)

    def adopt(self, path: str | Path) -> ArtifactHandle:
        """Wrap a caller's source file; it is read, never deleted."""
        p = Path(path)
        if not p.is_file():
            raise IoFailureError(f"source audio not found: {p}", path=p)
        try:
            with p.open("rb"):
                pass
        except OSError as exc:
            raise IoFailureError(f"source audio not readable: {p} ({exc})", path=p) from exc
        return ArtifactHandle.user_supplied(p)

    def destination(self, path: str | Path) -> ArtifactHandle:
        """Handle for engine output written straight to a caller-owned path.

        The handle records whether a file was already there, so a failed run
        never deletes something it did not create.
        """
        p = Path(path)
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise IoFailureError(f"cannot create output directory: {p.parent} ({exc})", path=p) from exc
        return ArtifactHandle.generated(p, temporary=False, preexisting=p.exists())

    def write_manifest(self, text: str, *, stage: str = "concat") -> ArtifactHandle:
        handle = self.allocate("txt", stage=stage)
        try:
            handle.path.write_text(text, encoding="utf-8")
        except OSError as exc:
            handle.release()
            raise IoFailureError(f"cannot write manifest: {exc}", path=handle.path) from exc
        return handle

    def persist(self, handle: ArtifactHandle, destination: str | Path) -> Path:
        """Copy the artifact's bytes to `destination`; the handle stays valid."""
        dst = Path(destination)
        try:
            dst.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(handle.path, dst)
        except shutil.SameFileError:
            return dst
        except OSError as exc:
            raise IoFailureError(f"cannot save {handle.path} to {dst}: {exc}", path=dst) from exc
        logger.info("saved %s -> %s", handle.path, dst)
        return dst

    def list(self) -> list[str]:
        base = self._base_dir or self._configured_dir
        if base is None or not base.exists():
            return []
        return sorted(str(p) for p in base.iterdir() if p.is_file())

    def purge(self) -> int:
        """Remove every file left in the managed directory; return the count."""
        deleted = 0
        for name in self.list():
            try:
                os.remove(name)
            except FileNotFoundError:
                continue
            deleted += 1
        if deleted:
            logger.info("purged %d leftover artifacts from %s", deleted, self._base_dir)
        return deleted
