from __future__ import annotations

import threading
from pathlib import Path

import pytest

from audiochain.exceptions import ArtifactReleasedError
from audiochain.models.artifact import ArtifactHandle, ArtifactOrigin


def test_generated_handle_is_removed_on_last_release(tmp_path: Path) -> None:
    p = tmp_path / "tmp.wav"
    p.write_bytes(b"x")
    handle = ArtifactHandle.generated(p)
    assert handle.origin is ArtifactOrigin.GENERATED
    assert handle.temporary

    handle.acquire()
    assert handle.refs == 2
    assert handle.release() is False
    assert p.exists()

    assert handle.release() is True
    assert not p.exists()
    assert handle.released


def test_release_after_last_reference_is_a_noop(tmp_path: Path) -> None:
    p = tmp_path / "tmp.wav"
    p.write_bytes(b"x")
    handle = ArtifactHandle.generated(p)
    assert handle.release() is True
    # Someone else now owns a file at the same path; a double release must not touch it.
    p.write_bytes(b"new owner")
    assert handle.release() is False
    assert p.read_bytes() == b"new owner"
    with pytest.raises(ArtifactReleasedError):
        handle.acquire()


def test_user_supplied_and_persistent_files_are_never_deleted(tmp_path: Path) -> None:
    src = tmp_path / "src.wav"
    src.write_bytes(b"x")
    out = tmp_path / "out.mp3"
    out.write_bytes(b"y")

    user = ArtifactHandle.user_supplied(src)
    kept = ArtifactHandle.generated(out, temporary=False)
    assert user.origin is ArtifactOrigin.USER_SUPPLIED and not user.temporary
    assert user.release() is False
    assert kept.release() is False
    assert src.exists() and out.exists()


def test_concurrent_releases_delete_exactly_once(tmp_path: Path) -> None:
    p = tmp_path / "shared.wav"
    p.write_bytes(b"x")
    handle = ArtifactHandle.generated(p)
    for _ in range(31):
        handle.acquire()

    results: list[bool] = []
    lock = threading.Lock()

    def _release() -> None:
        deleted = handle.release()
        with lock:
            results.append(deleted)

    threads = [threading.Thread(target=_release) for _ in range(32)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count(True) == 1
    assert not p.exists()
