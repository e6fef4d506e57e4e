"""Core types."""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Match:
    """A single claimed span."""
    category: str          # e.g. "CPF", "EMAIL", "PESSOA"
    start: int
    end: int
    placeholder: str       # e.g. "[CPF]", "[PESSOA 2]"
    source: str            # "pattern" | "name"
    index: int | None = None            # person index, name matches only
    text: str = field(default="", repr=False)  # never shown in logs


@dataclass(slots=True)
class AnonymizationResult:
    """Result of anonymizing a text."""
    text: str                                   # text with placeholders
    matches: list[Match] = field(default_factory=list)

    def counts(self) -> dict[str, int]:
        """Number of replacements per category, in first-seen order."""
        return dict(Counter(m.category for m in self.matches))
