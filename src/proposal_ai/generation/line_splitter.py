"""Splits an over-long bullet into several shorter bullets.

Strategies are tried in order and the first that succeeds wins:

1. connector   split on ``, and``/``while``/``with``/... , semicolons and dashes
2. sentence    split on ``. `` boundaries and regroup sentences
3. parenthetical  move a ``(...)`` aside into its own bullet
4. word-wrap   pack words, breaking after a connector or comma when possible

Fragments still longer than the limit are split again, so every fragment
returned is within ``max_length`` or is a single word that cannot be split.
"""

from __future__ import annotations

import re

DEFAULT_MAX_LENGTH = 150
DEFAULT_TOLERANCE = 10

_CONNECTOR_WORDS = r"(and|while|with|including|through|via|by|using|ensuring)"

# (pattern, carries a connector word that moves to the next fragment)
_CONNECTOR_PATTERNS: tuple[tuple[re.Pattern[str], bool], ...] = (
    (re.compile(rf",\s+{_CONNECTOR_WORDS}\s+", re.IGNORECASE), True),
    (re.compile(rf"\s+{_CONNECTOR_WORDS}\s+", re.IGNORECASE), True),
    (re.compile(r";\s+"), False),
    (re.compile(r"\s+[—–]\s+"), False),
    (re.compile(r"\s+-\s+"), False),
)

_SENTENCE_RE = re.compile(r"\.\s+")
_PARENTHETICAL_RE = re.compile(r"^(.*?)\s*\((.*?)\)(.*)$", re.DOTALL)

BREAK_WORDS = ("and", "or", "but", "while", "with", "through", "by", "for", "in", "on", "at", "to")
_WINDOW_START = 0.3
_WINDOW_END = 0.7

# Each pass strictly shortens fragments; this only bounds pathological input
_MAX_DEPTH = 16


class LineSplitter:
    """Splits text longer than ``max_length`` into bullet-sized fragments."""

    def __init__(self, max_length: int = DEFAULT_MAX_LENGTH, tolerance: int = DEFAULT_TOLERANCE) -> None:
        if max_length <= 0:
            raise ValueError("max_length must be positive")
        self.max_length = max_length
        self.tolerance = tolerance

    def split(self, text: str) -> list[str]:
        """Return ``text`` as one or more fragments, each within the limit where possible."""
        return self._split(text.strip(), 0)

    def _split(self, text: str, depth: int) -> list[str]:
        if len(text) <= self.max_length or len(text.split()) <= 1:
            return [text]

        fragments = self.split_once(text)
        if depth >= _MAX_DEPTH or fragments == [text]:
            return fragments

        result: list[str] = []
        for fragment in fragments:
            result.extend(self._split(fragment, depth + 1))
        return result

    def split_once(self, text: str) -> list[str]:
        """Apply the first successful strategy without re-splitting its output."""
        for strategy in (
            self.connector_split,
            self.sentence_split,
            self.parenthetical_split,
        ):
            fragments = strategy(text)
            if fragments is not None:
                return fragments
        return self.word_wrap(text)

    # ── Strategies ──────────────────────────────────────────────────

    def connector_split(self, text: str) -> list[str] | None:
        """Split on connectors, regrouping greedily; the connector starts the next fragment."""
        limit = self.max_length + self.tolerance
        for pattern, has_word in _CONNECTOR_PATTERNS:
            matches = list(pattern.finditer(text))
            if not matches:
                continue

            fragments: list[str] = []
            current = text[: matches[0].start()].strip()
            for i, match in enumerate(matches):
                end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
                part = text[match.end() : end].strip()
                joined = f"{current}{match.group(0)}{part}" if current else part
                if current and len(joined) > self.max_length:
                    fragments.append(current)
                    current = f"{match.group(1)} {part}" if has_word else part
                else:
                    current = joined
            if current:
                fragments.append(current)

            fragments = [f.strip() for f in fragments if f.strip()]
            if len(fragments) > 1 and all(len(f) <= limit for f in fragments):
                return fragments
        return None

    def sentence_split(self, text: str) -> list[str] | None:
        """Split on sentence boundaries and regroup sentences up to the limit."""
        parts = _SENTENCE_RE.split(text)
        sentences: list[str] = []
        for index, part in enumerate(parts):
            part = part.strip()
            if not part:
                continue
            # every part but the last lost its period to the split
            if index < len(parts) - 1:
                part += "."
            sentences.append(part)
        if len(sentences) <= 1:
            return None

        fragments: list[str] = []
        current = ""
        for sentence in sentences:
            if current and len(f"{current} {sentence}") > self.max_length:
                fragments.append(current)
                current = sentence
            else:
                current = f"{current} {sentence}" if current else sentence
        if current:
            fragments.append(current)

        return fragments if len(fragments) > 1 else None

    def parenthetical_split(self, text: str) -> list[str] | None:
        """Move a parenthetical into its own fragment when both halves fit."""
        match = _PARENTHETICAL_RE.match(text)
        if match is None:
            return None
        before, inside, after = match.groups()
        main = f"{before}{after}".strip()
        aside = f"({inside})"
        if main and len(main) <= self.max_length and len(aside) <= self.max_length:
            return [main, aside]
        return None

    def word_wrap(self, text: str) -> list[str]:
        """Greedy word packing, breaking at a natural point inside the fragment."""
        fragments: list[str] = []
        current = ""
        for word in text.split():
            if current and len(f"{current} {word}") > self.max_length:
                break_at = find_break_point(current)
                if break_at > 0:
                    head = current[:break_at].strip()
                    tail = current[break_at:].strip()
                    fragments.append(head)
                    current = f"{tail} {word}" if tail else word
                else:
                    fragments.append(current)
                    current = word
            else:
                current = f"{current} {word}" if current else word
        if current:
            fragments.append(current)
        return [f for f in fragments if f]


def find_break_point(text: str) -> int:
    """Index just after the last break word or comma in the 30%-70% window, else 0."""
    lowered = text.lower()
    window_start = len(text) * _WINDOW_START
    window_end = int(len(text) * _WINDOW_END)

    best = -1
    best_end = 0
    for word in BREAK_WORDS:
        needle = f" {word} "
        index = lowered.rfind(needle, 0, window_end + len(needle))
        if index > window_start and index > best:
            best = index
            best_end = index + len(needle)
    if best_end:
        return best_end

    comma = text.rfind(", ", 0, window_end + 2)
    if comma > window_start:
        return comma + 2
    return 0
