"""Stage: one rewrite rule in the cleanup pipeline."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod

# Characters a decoded byte may turn into and still be substituted. U+00A0 is
# whitespace for this purpose even though re.ASCII keeps it out of \s.
PRINTABLE_RE = re.compile(r"[a-zA-Z0-9\s\xa0.,!?;:(){}\[\]\"'-]", re.ASCII)

IDENTIFIER_RE = re.compile(r"\b[a-zA-Z_][a-zA-Z0-9_]*\b", re.ASCII)


class Stage(ABC):
    name: str = ""
    label: str | None = None
    description: str = ""

    @abstractmethod
    def apply(self, content: str, metadata: dict) -> tuple[str, int]:
        """Rewrite content. Returns the new text and how many times the label fires.

        metadata carries ``source`` (the untouched input) and ``renamed``
        (identifier renames made by earlier stages).
        """
        ...


def rename_identifiers(content: str, mapping: dict[str, str]) -> str:
    """Swap every whole identifier found in ``mapping`` in a single pass.

    Replacements are not rescanned, so a new name is never renamed again.
    """
    return IDENTIFIER_RE.sub(lambda m: mapping.get(m.group(0), m.group(0)), content)
