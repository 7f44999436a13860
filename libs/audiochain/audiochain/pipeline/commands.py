"""Engine command construction.

`CommandBuilder.build` turns one operation into the exact ffmpeg argument list
(without the binary itself). It performs no I/O and is deterministic: the same
operation, inputs and output always produce the same list.

`Merge` reads its inputs through the concat demuxer, so the caller writes
`concat_manifest(op.inputs)` to a file and passes it as `manifest`.
"""

from __future__ import annotations

import os
from collections.abc import Sequence

from audiochain.exceptions import InvalidParameterError
from audiochain.formats import lookup_format
from audiochain.models.artifact import ArtifactHandle
from audiochain.models.effect import effect_to_filter
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
from audiochain.utils.timecode import format_factor, format_number, to_millis

# atempo accepts 0.5..2.0 on every ffmpeg release still in use.
_ATEMPO_MIN = 0.5
_ATEMPO_MAX = 2.0


def concat_manifest(inputs: Sequence[ArtifactHandle]) -> str:
    """Render a concat demuxer list, one `file '...'` line per input, in order."""
    if not inputs:
        raise InvalidParameterError("merge requires at least one input")
    lines = []
    for handle in inputs:
        path = os.path.abspath(os.fspath(handle.path))
        lines.append("file '{}'".format(path.replace("'", "'\\''")))
    return "\n".join(lines) + "\n"


def atempo_chain(factor: float) -> str:
    """Split a speed factor into atempo stages that each stay within engine limits."""
    if factor <= 0:
        raise InvalidParameterError(f"speed factor must be > 0 (got {factor!r})")
    stages: list[float] = []
    remaining = float(factor)
    while remaining > _ATEMPO_MAX:
        stages.append(_ATEMPO_MAX)
        remaining /= _ATEMPO_MAX
    while remaining < _ATEMPO_MIN:
        stages.append(_ATEMPO_MIN)
        remaining /= _ATEMPO_MIN
    stages.append(remaining)
    return ",".join(f"atempo={format_number(stage)}" for stage in stages)


def loudnorm_filter(op: Normalize) -> str:
    params = []
    if op.target_lufs is not None:
        params.append(f"I={format_number(op.target_lufs)}")
    if op.true_peak_db is not None:
        params.append(f"TP={format_number(op.true_peak_db)}")
    if op.loudness_range is not None:
        params.append(f"LRA={format_number(op.loudness_range)}")
    if not params:
        return "loudnorm"
    return "loudnorm=" + ":".join(params)


def overlay_filter(start_at: float) -> str:
    delay_ms = to_millis(start_at)
    return f"[1:a]adelay=delays={delay_ms}:all=1[ovl];[0:a][ovl]amix=inputs=2:duration=first"


class CommandBuilder:
    def __init__(self, *, overwrite: bool = True, loglevel: str = "error") -> None:
        self.overwrite = bool(overwrite)
        self.loglevel = str(loglevel)

    def _global_args(self) -> list[str]:
        args = ["-hide_banner", "-nostdin"]
        if self.overwrite:
            args.append("-y")
        args += ["-loglevel", self.loglevel]
        return args

    def build(
        self,
        op: Operation,
        inputs: Sequence[ArtifactHandle],
        output: ArtifactHandle,
        *,
        manifest: ArtifactHandle | None = None,
    ) -> list[str]:
        """Return the ordered engine arguments for `op` reading `inputs` into `output`.

        `inputs` lists every audio file the step reads: one source, `[base,
        overlay]` for `Overlay`, or `Merge.inputs` in order for `Merge`, whose
        engine input is the concat list in `manifest`.
        """
        _check_inputs(op, inputs, manifest)
        srcs = [os.fspath(handle.path) for handle in inputs]
        out = os.fspath(output.path)

        args = self._global_args()
        match op:
            case Seek(at=at):
                # Seek before the input declaration: fast input-side seek.
                args += ["-ss", format_number(at), "-i", srcs[0], "-c", "copy"]
            case Trim(start=start, end=end):
                args += ["-ss", format_number(start), "-to", format_number(end), "-i", srcs[0], "-c", "copy"]
            case Merge():
                args += ["-f", "concat", "-safe", "0", "-i", os.fspath(manifest.path), "-c", "copy"]
            case Transcode(target_format=target_format):
                spec = lookup_format(target_format)
                args += ["-i", srcs[0], "-vn", *spec.codec_args]
            case AdjustVolume(factor=factor):
                args += ["-i", srcs[0], "-af", f"volume={format_factor(factor)}"]
            case ChangeSpeed(factor=factor):
                args += ["-i", srcs[0], "-filter:a", atempo_chain(factor)]
            case ApplyEffect(effect=effect):
                args += ["-i", srcs[0], "-af", effect_to_filter(effect)]
            case Reverse():
                args += ["-i", srcs[0], "-af", "areverse"]
            case Normalize():
                args += ["-i", srcs[0], "-af", loudnorm_filter(op)]
            case Overlay(start_at=start_at):
                args += ["-i", srcs[0], "-i", srcs[1], "-filter_complex", overlay_filter(start_at)]
            case _:
                raise InvalidParameterError(f"unsupported operation: {op!r}")
        args.append(out)
        return args


def _check_inputs(op: Operation, inputs: Sequence[ArtifactHandle], manifest: ArtifactHandle | None) -> None:
    name = type(op).__name__
    paths = [handle.path for handle in inputs]
    match op:
        case Merge():
            if paths != [handle.path for handle in op.inputs]:
                raise InvalidParameterError("Merge inputs must be Merge.inputs in the same order")
            if manifest is None:
                raise InvalidParameterError("Merge requires the concat manifest of its inputs")
            return
        case Overlay():
            if len(paths) != 2:
                raise InvalidParameterError(f"Overlay expects exactly two inputs (got {len(paths)})")
            if paths[1] != op.overlay.path:
                raise InvalidParameterError("Overlay's second input must be its overlay track")
        case _:
            if len(paths) != 1:
                raise InvalidParameterError(f"{name} expects exactly one input (got {len(paths)})")
    if manifest is not None:
        raise InvalidParameterError(f"{name} does not read a manifest")
