"""Structured redactor — category placeholders for document numbers.

Usage:
    from anonimizador import AnonymizationConfig
    from anonimizador.redactor import StructuredRedactor

    redactor = StructuredRedactor(AnonymizationConfig())
    redactor.run("CPF: 123.456.789-00")     # "CPF: [CPF]"
"""

from __future__ import annotations
import logging
import re

from .config import AnonymizationConfig
from .patterns import candidates
from .ranges import RangeTracker
from .types import Match

logger = logging.getLogger(__name__)

# A line break inside a number, e.g. "123.456.\n789-00" from a PDF
_SPLIT_DIGITS = re.compile(r"(?<=\d)[^\S\n]*\n\s*(?=\d)")


def join_split_digits(text: str) -> str:
    return _SPLIT_DIGITS.sub("", text)


def apply_matches(text: str, matches: list[Match]) -> str:
    """Rebuild ``text`` with each (disjoint) match replaced by its placeholder."""
    if not matches:
        return text
    parts: list[str] = []
    pos = 0
    for m in sorted(matches, key=lambda m: m.start):
        parts.append(text[pos:m.start])
        parts.append(m.placeholder)
        pos = m.end
    parts.append(text[pos:])
    return "".join(parts)


class StructuredRedactor:
    """Runs the pattern registry over a text with first-fit span claims."""

    def __init__(self, config: AnonymizationConfig) -> None:
        self.config = config

    def prepare(self, text: str) -> str:
        """Text as the rules will see it."""
        if self.config.join_split_digits:
            return join_split_digits(text)
        return text

    def scan(self, text: str) -> list[Match]:
        """Winning matches, in position order.

        Candidates arrive highest priority first, so the first claim on
        a span wins and any overlapping lower-priority candidate is dropped.
        """
        tracker = RangeTracker()
        won = [m for m in candidates(text, self.config) if tracker.try_claim(m.start, m.end)]
        return sorted(won, key=lambda m: m.start)

    def run(self, text: str) -> str:
        return self.redact(text)[0]

    def redact(self, text: str) -> tuple[str, list[Match]]:
        """Return the redacted text and the matches that produced it.

        Offsets refer to ``prepare(text)``.
        """
        if not text:
            return text, []
        text = self.prepare(text)
        matches = self.scan(text)
        if matches:
            logger.debug("structured pass: %d spans in %d chars", len(matches), len(text))
        return apply_matches(text, matches), matches
