"""Artifact storage for chain intermediates."""

import tempfile
from functools import lru_cache

from audiochain.config import Settings
from audiochain.storage.artifact_store import TempArtifactStore


@lru_cache(maxsize=None)
def _shared_store(temp_dir: str | None, system_tmp: str) -> TempArtifactStore:
    # `system_tmp` only keys the cache: a changed TMPDIR gets its own store.
    return TempArtifactStore(temp_dir)


def get_artifact_store(settings: Settings) -> TempArtifactStore:
    """Return the process-wide store for the configured temp dir."""
    return _shared_store(settings.workspace.temp_dir, tempfile.gettempdir())


__all__ = ["TempArtifactStore", "get_artifact_store"]
