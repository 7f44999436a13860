"""Chainable audio processor.

Every editing method runs exactly one engine invocation and returns a new
`AudioProcessor` over a new artifact; the receiver is never modified. Calls
execute strictly in call order.

Each processor holds one reference on its `ArtifactHandle`. `close()` (or
garbage collection) drops it, and a temporary artifact is deleted once its last
reference is gone, so clones and merge/overlay inputs never free a file that a
sibling still uses.
"""

from __future__ import annotations

import logging
import os
import weakref
from collections.abc import Iterable, Iterator, Sequence
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from pathlib import Path

from audiochain.config import Settings
from audiochain.engines import AudioEngine, get_audio_engine
from audiochain.exceptions import ArtifactReleasedError, EngineFailureError, InvalidParameterError, IoFailureError
from audiochain.formats import AudioFormat, lookup_format
from audiochain.models.artifact import ArtifactHandle
from audiochain.models.effect import AudioEffect
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
from audiochain.pipeline.commands import CommandBuilder, concat_manifest
from audiochain.pipeline.invoker import EngineInvoker
from audiochain.storage import TempArtifactStore, get_artifact_store
from audiochain.utils.timecode import Seconds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChainRuntime:
    """Collaborators shared by every node of a chain."""

    invoker: EngineInvoker
    builder: CommandBuilder
    store: TempArtifactStore
    cleanup_on_error: bool = True

    @classmethod
    def from_settings(cls, settings: Settings | None = None, *, engine: AudioEngine | None = None) -> "ChainRuntime":
        settings = settings or Settings()
        if engine is None:
            engine = get_audio_engine(settings.engine_config())
        return cls(
            invoker=EngineInvoker(engine, timeout_s=settings.engine.timeout_s),
            builder=CommandBuilder(
                overwrite=settings.engine.overwrite,
                loglevel=settings.engine.loglevel,
            ),
            store=get_artifact_store(settings),
            cleanup_on_error=bool(settings.workspace.cleanup_on_error),
        )

    def execute(
        self,
        op: Operation,
        inputs: Sequence[ArtifactHandle],
        *,
        suffix: str,
        stage: str,
        output_path: str | Path | None = None,
        manifest: ArtifactHandle | None = None,
    ) -> ArtifactHandle:
        """Run `op` into a new artifact; a failed step never yields a handle."""
        if output_path is not None:
            _check_destination(output_path, inputs)
            output = self.store.destination(output_path)
        else:
            output = self.store.allocate(suffix, stage=stage)

        try:
            args = self.builder.build(op, inputs, output, manifest=manifest)
        except BaseException:
            output.release()
            raise

        try:
            self.invoker.run(args)
        except EngineFailureError as exc:
            if self.cleanup_on_error:
                _discard(output)
            else:
                exc.artifact_path = str(output.path)
                logger.warning("%s failed; kept partial output at %s", stage, output.path)
            raise
        except BaseException:
            _discard(output)
            raise

        if not _has_output(output):
            _discard(output)
            raise IoFailureError(f"{stage}: engine reported success but wrote no output", path=output.path)
        return output


def _check_destination(output_path: str | Path, inputs: Sequence[ArtifactHandle]) -> None:
    target = Path(output_path)
    resolved = os.path.realpath(target)
    for handle in inputs:
        same = os.path.realpath(handle.path) == resolved
        if not same and target.exists() and handle.path.exists():
            same = os.path.samefile(target, handle.path)
        if same:
            raise InvalidParameterError(f"output path is also an input of this step: {target}")


def _has_output(output: ArtifactHandle) -> bool:
    # Temp outputs are pre-created empty; real audio is never zero bytes.
    try:
        return output.path.stat().st_size > 0
    except OSError:
        return False


def _discard(output: ArtifactHandle) -> None:
    if output.temporary:
        output.release()
        return
    if output.preexisting:
        # The file was there before this run; whatever the engine left is the caller's.
        logger.warning("failed run left existing destination %s in place", output.path)
    else:
        try:
            output.path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("failed to remove partial output %s (%s)", output.path, exc)
    output.release()


class AudioProcessor:
    def __init__(self, handle: ArtifactHandle, runtime: ChainRuntime) -> None:
        # Takes over one reference on `handle`.
        self._handle = handle
        self._runtime = runtime
        self._finalizer = weakref.finalize(self, handle.release)

    @classmethod
    def open(
        cls,
        path: str | Path,
        *,
        settings: Settings | None = None,
        engine: AudioEngine | None = None,
        runtime: ChainRuntime | None = None,
    ) -> "AudioProcessor":
        """Start a chain from an existing audio file (never modified or deleted)."""
        if runtime is None:
            runtime = ChainRuntime.from_settings(settings, engine=engine)
        return cls(runtime.store.adopt(path), runtime)

    @property
    def handle(self) -> ArtifactHandle:
        return self._handle

    @property
    def path(self) -> Path:
        return self._handle.path

    @property
    def runtime(self) -> ChainRuntime:
        return self._runtime

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    @contextmanager
    def _borrow(self) -> Iterator[ArtifactHandle]:
        # Pin the file for the duration of an engine call, even if another
        # thread closes this processor meanwhile.
        if self.closed:
            raise ArtifactReleasedError(f"processor is closed: {self._handle.path}")
        handle = self._handle.acquire()
        try:
            yield handle
        finally:
            handle.release()

    def _derive(
        self,
        op: Operation,
        *,
        stage: str,
        suffix: str | None = None,
        output_path: str | Path | None = None,
        also_reads: Sequence[ArtifactHandle] = (),
    ) -> "AudioProcessor":
        with self._borrow() as handle:
            out = self._runtime.execute(
                op,
                [handle, *also_reads],
                suffix=suffix if suffix is not None else handle.path.suffix,
                stage=stage,
                output_path=output_path,
            )
            logger.info("%s: %s -> %s", stage, handle.path, out.path)
        return AudioProcessor(out, self._runtime)

    def seek(self, at: Seconds) -> "AudioProcessor":
        return self._derive(Seek(at), stage="seek")

    def trim(self, start: Seconds, end: Seconds) -> "AudioProcessor":
        return self._derive(Trim(start, end), stage="trim")

    def transcode(
        self,
        target_format: AudioFormat | str | None = None,
        output_path: str | Path | None = None,
    ) -> "AudioProcessor":
        """Re-encode; with `output_path` the engine writes there directly (caller-owned).

        Without `target_format` the format is taken from `output_path`'s extension.
        """
        if target_format is None:
            if output_path is None:
                raise InvalidParameterError("transcode needs a target format or an output path")
            target_format = AudioFormat.from_path(output_path)
        op = Transcode(target_format)
        spec = lookup_format(op.target_format)
        return self._derive(op, stage="transcode", suffix=spec.container_ext, output_path=output_path)

    def adjust_volume(self, factor: float) -> "AudioProcessor":
        return self._derive(AdjustVolume(factor), stage="volume")

    def change_speed(self, factor: float) -> "AudioProcessor":
        return self._derive(ChangeSpeed(factor), stage="speed")

    def apply_effect(self, effect: AudioEffect) -> "AudioProcessor":
        return self._derive(ApplyEffect(effect), stage="effect")

    def reverse(self) -> "AudioProcessor":
        return self._derive(Reverse(), stage="reverse")

    def normalize(
        self,
        *,
        target_lufs: float | None = None,
        true_peak_db: float | None = None,
        loudness_range: float | None = None,
    ) -> "AudioProcessor":
        op = Normalize(target_lufs=target_lufs, true_peak_db=true_peak_db, loudness_range=loudness_range)
        return self._derive(op, stage="normalize")

    def overlay(self, other: "AudioProcessor", start_at: Seconds = 0.0) -> "AudioProcessor":
        """Mix `other` over this track from `start_at`; `other` stays usable."""
        with other._borrow() as overlay_handle:
            return self._derive(Overlay(overlay_handle, start_at), stage="overlay", also_reads=(overlay_handle,))

    @staticmethod
    def merge(
        processors: Iterable["AudioProcessor"],
        output_path: str | Path | None = None,
    ) -> "AudioProcessor":
        """Concatenate processors in the given order into a new chain root.

        Inputs are only read; each remains independently usable.
        """
        items = list(processors)
        if not items:
            raise InvalidParameterError("merge requires at least one processor")
        runtime = items[0]._runtime

        with ExitStack() as stack:
            handles = tuple(stack.enter_context(p._borrow()) for p in items)
            op = Merge(handles)
            manifest = runtime.store.write_manifest(concat_manifest(op.inputs))
            stack.callback(manifest.release)
            out = runtime.execute(
                op,
                op.inputs,
                suffix=handles[0].path.suffix,
                stage="merge",
                output_path=output_path,
                manifest=manifest,
            )
            logger.info("merge: %d inputs -> %s", len(handles), out.path)
        return AudioProcessor(out, runtime)

    def save(self, destination: str | Path) -> Path:
        """Copy the current audio to `destination`; this processor stays usable."""
        with self._borrow() as handle:
            return self._runtime.store.persist(handle, destination)

    def clone(self) -> "AudioProcessor":
        """Second processor over the same file; the file lives until both are closed."""
        if self.closed:
            raise ArtifactReleasedError(f"processor is closed: {self._handle.path}")
        return AudioProcessor(self._handle.acquire(), self._runtime)

    def close(self) -> None:
        self._finalizer()

    def __enter__(self) -> "AudioProcessor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"AudioProcessor({str(self._handle.path)!r}, {state})"
