"""Name pass — user-supplied names become ``[PESSOA n]`` placeholders.

Names come from the user, so they are treated as untrusted pattern
input: every name is escaped and capped at MAX_NAME_LENGTH characters
before a regex is built from it. Repetition in the built pattern is
limited to whitespace next to literal characters and, for a name cut by
the cap, one trailing ``\\w*``.

Indexes follow the order the names were supplied in. The same name
(case-insensitive, annotation stripped) always gets the same index:

    >>> NameIndexer().run("João Silva e JOÃO SILVA", ["João Silva", "joão silva (autor)"])
    '[PESSOA 1] e [PESSOA 1]'
"""

from __future__ import annotations
import logging
import re
import unicodedata
from collections.abc import Iterable
from functools import lru_cache

from .patterns import CATEGORIES
from .ranges import RangeTracker
from .redactor import apply_matches
from .types import Match

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 200
MAX_NAME_WORDS = 10

_PLACEHOLDER_FMT = "[PESSOA {idx}]"
_AMPERSANDS = ("&", "＆")
_AMP_PATTERN = r"\s{0,3}[&＆]\s{0,3}"
_SPLIT_ACCENTS = frozenset("ÁÀÂÃÉÈÊÍÌÎÓÒÔÕÚÙÛÇ")

# Placeholders already in the text are never touched by a name
_EXISTING_PLACEHOLDER = re.compile(
    r"\[(?:" + "|".join(CATEGORIES) + r"|PESSOA \d{1,6})\]"
)


def _strip_annotation(name: str) -> str:
    """Drop a trailing "(...)" note: "EMPRESA LTDA (1ª reclamada)" → "EMPRESA LTDA"."""
    if not name.endswith(")"):
        return name
    open_at = name.rfind("(")
    if open_at == -1 or ")" in name[open_at + 1:-1]:
        return name
    return name[:open_at]


def _cut_name(raw: str) -> tuple[str, bool] | None:
    """``(core name, open_end)``; ``open_end`` is set when the cap split a word."""
    if not raw:
        return None
    name = _strip_annotation(raw.strip()).strip()
    if len(name) < MIN_NAME_LENGTH:
        return None
    if len(name) <= MAX_NAME_LENGTH:
        return name, False
    logger.debug("name truncated from %d to %d chars", len(name), MAX_NAME_LENGTH)
    split_word = not name[MAX_NAME_LENGTH].isspace() and not name[MAX_NAME_LENGTH - 1].isspace()
    return name[:MAX_NAME_LENGTH].rstrip(), split_word


def core_name(raw: str) -> str | None:
    """The part of a supplied name that is matched, or None to skip it."""
    cut = _cut_name(raw)
    return cut[0] if cut else None


@lru_cache(maxsize=4096)
def _fold_char(ch: str) -> str:
    return unicodedata.normalize("NFD", ch)[0]


def fold_accents(text: str) -> str:
    """Remove diacritics one character at a time, so offsets are preserved."""
    if text.isascii():
        return text
    return "".join(ch if ch.isascii() else _fold_char(ch) for ch in text)


def _piece_pattern(piece: str, fold: bool) -> str:
    # PDF extraction often leaves a space before an accented letter: "Concei ção"
    out = []
    for i, ch in enumerate(piece):
        accented = ch.upper() in _SPLIT_ACCENTS
        literal = re.escape(_fold_char(ch) if fold else ch)
        out.append(r"\s{0,2}" + literal if accented and i else literal)
    return "".join(out)


def _word_pattern(word: str, fold: bool = False) -> str:
    # "W.P" also matches "W. P"; a trailing dot stays literal
    body = word.rstrip(".")
    tail = re.escape(word[len(body):])
    return r"\.\s{0,2}".join(_piece_pattern(piece, fold) for piece in body.split(".")) + tail


def build_name_pattern(name: str, *, fold: bool = False, open_end: bool = False) -> re.Pattern[str]:
    """Case-insensitive pattern for ``name`` (already capped by core_name).

    ``fold`` builds the accent-free variant used against folded text.
    ``open_end`` marks a name whose last word was cut by the length cap:
    the rest of that word is matched instead of requiring a boundary.
    """
    all_words = name.split()
    words = all_words[:MAX_NAME_WORDS]
    open_end = open_end and len(all_words) <= MAX_NAME_WORDS
    pattern = ""
    after_separator = True
    for word in words:
        if word in _AMPERSANDS:
            pattern += _AMP_PATTERN
            after_separator = True
            continue
        if not after_separator:
            pattern += r"\s+"
        pattern += _word_pattern(word, fold)
        after_separator = False

    # No match may begin or end inside a word
    first, last = words[0][0], words[-1][-1]
    if first.isalnum() or first == "_":
        pattern = r"(?<!\w)" + pattern
    if open_end:
        pattern += r"\w*"
    elif last.isalnum() or last == "_":
        pattern += r"(?!\w)"
    return re.compile(pattern, re.IGNORECASE)


class NameIndex:
    """Core name → 1-based index, assigned on first sight."""

    __slots__ = ("_by_key", "_names", "_open_ended")

    def __init__(self) -> None:
        self._by_key: dict[str, int] = {}
        self._names: list[str] = []        # index - 1 → first spelling seen
        self._open_ended: set[int] = set()

    def get_or_create(self, name: str, open_end: bool = False) -> tuple[int, bool]:
        """Return ``(index, created)``."""
        key = name.casefold()
        if key in self._by_key:
            idx = self._by_key[key]
            if open_end:
                self._open_ended.add(idx)
            return idx, False
        self._names.append(name)
        idx = self._by_key[key] = len(self._names)
        if open_end:
            self._open_ended.add(idx)
        return idx, True

    def is_open_ended(self, index: int) -> bool:
        return index in self._open_ended

    def items(self) -> list[tuple[int, str]]:
        return list(enumerate(self._names, start=1))

    @staticmethod
    def placeholder(index: int) -> str:
        return _PLACEHOLDER_FMT.format(idx=index)

    def __len__(self) -> int:
        return len(self._names)


class NameIndexer:
    """Replaces every occurrence of each supplied name with its placeholder."""

    def index_names(self, names: Iterable[str]) -> NameIndex:
        index = NameIndex()
        skipped = 0
        for raw in names:
            cut = _cut_name(raw) if isinstance(raw, str) else None
            if cut is None:
                skipped += 1
                continue
            index.get_or_create(*cut)
        if skipped:
            logger.debug("skipped %d names shorter than %d chars", skipped, MIN_NAME_LENGTH)
        return index

    def run(self, text: str, names: Iterable[str]) -> str:
        return self.redact(text, names)[0]

    def redact(self, text: str, names: Iterable[str]) -> tuple[str, list[Match]]:
        """Return the text with names replaced and the matches (offsets into ``text``)."""
        index = self.index_names(names)
        if not text or not len(index):
            return text, []

        tracker = RangeTracker()
        for m in _EXISTING_PLACEHOLDER.finditer(text):
            tracker.try_claim(m.start(), m.end())

        folded: str | None = None
        matches: list[Match] = []
        # Longer names claim first so "João Silva" beats a separate "Silva"
        for idx, name in sorted(index.items(), key=lambda item: -len(item[1])):
            placeholder = index.placeholder(idx)
            open_end = index.is_open_ended(idx)
            spans, seen = self._claim(build_name_pattern(name, open_end=open_end), text, tracker)
            if not seen:
                # Retry without accents: "Jose" finds "José" and vice versa
                if folded is None:
                    folded = fold_accents(text)
                if folded != text or fold_accents(name) != name:
                    pattern = build_name_pattern(name, fold=True, open_end=open_end)
                    spans, _ = self._claim(pattern, folded, tracker)
            matches.extend(
                Match(
                    category="PESSOA",
                    start=start,
                    end=end,
                    placeholder=placeholder,
                    source="name",
                    index=idx,
                    text=text[start:end],
                )
                for start, end in spans
            )

        logger.debug("name pass: %d names, %d spans", len(index), len(matches))
        return apply_matches(text, matches), sorted(matches, key=lambda m: m.start)

    @staticmethod
    def _claim(pattern: re.Pattern[str], text: str, tracker: RangeTracker) -> tuple[list[tuple[int, int]], bool]:
        spans: list[tuple[int, int]] = []
        seen = False
        for m in pattern.finditer(text):
            seen = True
            if tracker.try_claim(m.start(), m.end()):
                spans.append((m.start(), m.end()))
        return spans, seen
