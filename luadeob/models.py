"""Pydantic models for pipeline results."""

from __future__ import annotations

from pydantic import BaseModel


class TransformResult(BaseModel):
    """Transformed text plus the technique labels recorded while producing it.

    Labels are in stage execution order and may repeat: decoding stages
    record one label per substitution.
    """

    text: str
    techniques: list[str] = []

    @property
    def fired(self) -> bool:
        return bool(self.techniques)

    def technique_counts(self) -> dict[str, int]:
        """Count labels, keeping first-seen order."""
        counts: dict[str, int] = {}
        for label in self.techniques:
            counts[label] = counts.get(label, 0) + 1
        return counts
