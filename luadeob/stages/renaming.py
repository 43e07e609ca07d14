"""Identifier renaming stages.

Both stages swap long, machine-generated names for short numbered ones, but
they number differently:

* ``VariableRenamer`` numbers by token position. Every long token in the
  scan writes ``var_<index>`` into the map, so a name that repeats ends up
  with the index of its *last* occurrence. Names that only ever occur inside
  quoted literals (base64 payloads, mostly) are left for the decoding stage.
* ``FunctionRenamer`` numbers distinct declared function names in the order
  they are first declared in the untouched input.

Function names are long identifiers too, so the variable stage renames them
first; the function stage then renames that ``var_<N>`` alias.
"""

from __future__ import annotations

import logging
import re
from bisect import bisect_right

from .base import IDENTIFIER_RE, Stage, rename_identifiers

logger = logging.getLogger(__name__)

_FUNCTION_DECL_RE = re.compile(r"function\s+([a-zA-Z_][a-zA-Z0-9_]*)\s*\(")
_STRING_LITERAL_RE = re.compile(r""""(?:\\.|[^"\\\n])*"|'(?:\\.|[^'\\\n])*'""")


class _LiteralSpans:
    """Quoted-literal extents of a text, searchable by position."""

    def __init__(self, content: str) -> None:
        spans = [m.span() for m in _STRING_LITERAL_RE.finditer(content)]
        self._starts = [start for start, _ in spans]
        self._ends = [end for _, end in spans]

    def __contains__(self, pos: int) -> bool:
        # Literals never overlap, so only the last one opening before pos matters.
        i = bisect_right(self._starts, pos) - 1
        return i >= 0 and self._starts[i] < pos < self._ends[i]


class VariableRenamer(Stage):
    name = "variables"
    label = "Variable name simplification"
    description = "Rename identifiers longer than the threshold to var_<N>"

    def __init__(self, min_length: int = 10, prefix: str = "var_") -> None:
        self.min_length = min_length
        self.prefix = prefix

    def apply(self, content: str, metadata: dict) -> tuple[str, int]:
        literals = _LiteralSpans(content)
        var_map: dict[str, str] = {}
        in_code: set[str] = set()
        for index, m in enumerate(IDENTIFIER_RE.finditer(content), start=1):
            name = m.group(0)
            if len(name) <= self.min_length:
                continue
            var_map[name] = f"{self.prefix}{index}"
            if m.start() not in literals:
                in_code.add(name)

        var_map = {old: new for old, new in var_map.items() if old in in_code}
        if not var_map:
            return content, 0

        content = rename_identifiers(content, var_map)
        metadata.setdefault("renamed", {}).update(var_map)
        logger.debug("renamed %d variable(s)", len(var_map))
        return content, 1


class FunctionRenamer(Stage):
    name = "functions"
    label = "Function name simplification"
    description = "Rename declared functions with long names to func_<k>"

    def __init__(self, min_length: int = 10, prefix: str = "func_") -> None:
        self.min_length = min_length
        self.prefix = prefix

    def apply(self, content: str, metadata: dict) -> tuple[str, int]:
        source = metadata.get("source", content)
        func_map: dict[str, str] = {}
        for name in _FUNCTION_DECL_RE.findall(source):
            if len(name) > self.min_length and name not in func_map:
                func_map[name] = f"{self.prefix}{len(func_map) + 1}"

        if not func_map:
            return content, 0

        renamed = metadata.get("renamed", {})
        mapping = dict(func_map)
        for old, new in func_map.items():
            alias = renamed.get(old)
            if alias is not None:
                mapping[alias] = new
        content = rename_identifiers(content, mapping)
        logger.debug("renamed %d function(s)", len(func_map))
        return content, 1
