"""TransformPipeline: runs the cleanup stages in order and collects technique labels."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from luadeob.config.models import DeobConfig
from luadeob.models import TransformResult

from .base import Stage
from .concat import ConcatFolder
from .decoding import Base64Decoder, EscapeNormalizer, HexDecoder
from .formatting import Reindenter
from .renaming import FunctionRenamer, VariableRenamer
from .whitespace import WhitespaceNormalizer

logger = logging.getLogger(__name__)

StageCallback = Callable[[Stage, int], None]

STAGE_NAMES = (
    "whitespace",
    "concat",
    "variables",
    "functions",
    "base64",
    "hex",
    "escapes",
    "formatting",
)


class TransformPipeline:
    def __init__(self, stages: list[Stage]):
        self.stages = stages

    def run(self, text: str, on_stage: StageCallback | None = None) -> TransformResult:
        content = text
        techniques: list[str] = []
        metadata: dict = {"source": text, "renamed": {}}
        for stage in self.stages:
            content, hits = stage.apply(content, metadata)
            if hits and stage.label:
                techniques.extend([stage.label] * hits)
            logger.debug("stage %s: %d hit(s)", stage.name, hits)
            if on_stage is not None:
                on_stage(stage, hits)
        return TransformResult(text=content, techniques=techniques)


def default_stages(config: DeobConfig) -> list[Stage]:
    """All stages in their fixed order, configured from ``config``."""
    return [
        WhitespaceNormalizer(),
        ConcatFolder(),
        VariableRenamer(config.rename.min_length, config.rename.variable_prefix),
        FunctionRenamer(config.rename.min_length, config.rename.function_prefix),
        Base64Decoder(),
        HexDecoder(),
        EscapeNormalizer(),
        Reindenter(config.formatting.indent_width),
    ]


def build_pipeline(config: DeobConfig | None = None, skip: Iterable[str] = ()) -> TransformPipeline:
    """Build the pipeline, leaving out stages disabled in config or named in ``skip``.

    Raises ValueError for a stage name that does not exist.
    """
    config = config or DeobConfig()
    skipped = set(skip)
    unknown = sorted(skipped - set(STAGE_NAMES))
    if unknown:
        raise ValueError(
            f"Unknown stage(s): {', '.join(unknown)}. "
            f"Known stages: {', '.join(STAGE_NAMES)}"
        )
    enabled = config.stages.model_dump()
    stages = [
        stage for stage in default_stages(config)
        if enabled.get(stage.name, True) and stage.name not in skipped
    ]
    return TransformPipeline(stages)


def transform(text: str, config: DeobConfig | None = None) -> TransformResult:
    """Run every enabled stage over ``text``. Never raises for str input."""
    return build_pipeline(config).run(text)
