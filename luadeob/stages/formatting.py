"""Re-indents lines with a keyword/brace counter."""

from .base import Stage

_DEDENT_TOKENS = ("end", "}")
_INDENT_TOKENS = ("function", "if", "for", "while", "do", "{")


class Reindenter(Stage):
    name = "formatting"
    label = "Code formatting"
    description = "Re-indent lines by counting block keywords and braces"

    def __init__(self, indent_width: int = 2) -> None:
        self.indent = " " * indent_width

    def apply(self, content: str, metadata: dict) -> tuple[str, int]:
        level = 0
        lines: list[str] = []
        for line in content.split("\n"):
            trimmed = line.strip()
            # Dedent applies to this line, indent to the next one.
            if any(tok in trimmed for tok in _DEDENT_TOKENS):
                level = max(0, level - 1)
            lines.append(self.indent * level + trimmed)
            if any(tok in trimmed for tok in _INDENT_TOKENS):
                level += 1

        formatted = "\n".join(lines)
        return formatted, int(formatted != content)
