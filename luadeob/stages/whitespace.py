"""Collapses whitespace runs into single spaces."""

import re

from .base import Stage

_LONG_RUN_RE = re.compile(r"\s{3,}")
_RUN_RE = re.compile(r"\s+")


class WhitespaceNormalizer(Stage):
    name = "whitespace"
    label = "Whitespace normalization"
    description = "Collapse whitespace runs to one space and trim the ends"

    def apply(self, content: str, metadata: dict) -> tuple[str, int]:
        if not _LONG_RUN_RE.search(content):
            return content, 0
        return _RUN_RE.sub(" ", content).strip(), 1
