"""Pipeline construction: command building, engine invocation and chaining."""

from audiochain.pipeline.commands import CommandBuilder, atempo_chain, concat_manifest
from audiochain.pipeline.invoker import EngineInvoker
from audiochain.pipeline.processor import AudioProcessor, ChainRuntime

__all__ = [
    "AudioProcessor",
    "ChainRuntime",
    "CommandBuilder",
    "EngineInvoker",
    "atempo_chain",
    "concat_manifest",
]
