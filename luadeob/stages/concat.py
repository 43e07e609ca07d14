"""Folds `'a' .. 'b'` concatenations into a single literal."""

import re

from .base import Stage

# Two literals sharing one quote character, joined by the `..` operator.
_CONCAT_RE = re.compile(r"""(['"])(.*?)\1\s*\.\.\s*\1(.*?)\1""")


class ConcatFolder(Stage):
    name = "concat"
    label = "String concatenation simplification"
    description = "Merge adjacent same-quote string literals joined by '..'"

    def apply(self, content: str, metadata: dict) -> tuple[str, int]:
        # Fires on any `..`, folded or not.
        if ".." not in content:
            return content, 0
        return _CONCAT_RE.sub(_fold, content), 1


def _fold(m: re.Match) -> str:
    quote = m.group(1)
    return f"{quote}{m.group(2)}{m.group(3)}{quote}"
