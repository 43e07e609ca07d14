"""luadeob — best-effort cleanup of obfuscated Lua source."""

from luadeob.models import TransformResult
from luadeob.stages import TransformPipeline, build_pipeline, transform

__version__ = "0.1.0"

__all__ = [
    "TransformPipeline",
    "TransformResult",
    "build_pipeline",
    "transform",
]
