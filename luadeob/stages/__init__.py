"""Rewrite stages for cleaning up obfuscated Lua source."""

from .base import Stage
from .concat import ConcatFolder
from .decoding import Base64Decoder, EscapeNormalizer, HexDecoder
from .formatting import Reindenter
from .pipeline import STAGE_NAMES, TransformPipeline, build_pipeline, default_stages, transform
from .renaming import FunctionRenamer, VariableRenamer
from .whitespace import WhitespaceNormalizer

__all__ = [
    "STAGE_NAMES",
    "Base64Decoder",
    "ConcatFolder",
    "EscapeNormalizer",
    "FunctionRenamer",
    "HexDecoder",
    "Reindenter",
    "Stage",
    "TransformPipeline",
    "VariableRenamer",
    "WhitespaceNormalizer",
    "build_pipeline",
    "default_stages",
    "transform",
]
