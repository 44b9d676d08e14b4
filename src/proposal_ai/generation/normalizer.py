"""Post-processing of raw generated slide text.

Each stage is toggled by the configuration's ``global_formatting`` block;
whitespace cleanup always runs. Normalizing already-normalized content
returns it unchanged.
"""

from __future__ import annotations

import logging
import re

from proposal_ai.generation.line_splitter import LineSplitter
from proposal_ai.slides.models import GlobalFormatting

log = logging.getLogger(__name__)

DEFAULT_BULLET_CHAR = "•"

KNOWN_SECTION_TITLES = (
    "Overview",
    "Solution & Approach",
    "Expected Outcomes",
    "Next Steps",
    "Problem Statement",
    "Assumptions",
    "Client Responsibilities",
)

_MARKDOWN_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\*\*(.+?)\*\*"), r"\1"),
    (re.compile(r"__(.+?)__"), r"\1"),
    # single-star emphasis, leaving "* " bullets alone
    (re.compile(r"(?<![\w*])\*(?=\S)(.+?)(?<=\S)\*(?![\w*])"), r"\1"),
    # underscore emphasis, leaving snake_case alone
    (re.compile(r"(?<![\w_])_(?=\S)(.+?)(?<=\S)_(?![\w_])"), r"\1"),
    (re.compile(r"^[ \t]*#{1,6}[ \t]+", re.MULTILINE), ""),
    (re.compile(r"`([^`\n]*)`"), r"\1"),
    (re.compile(r"\[([^\]\n]*)\]\([^)\n]*\)"), r"\1"),
)

_BULLET_PREFIX_RE = re.compile(r"^[ \t]*(?:(?:[-*]|\d+\.)(?=[ \t])|[·•])[ \t]*", re.MULTILINE)
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")
_LEADING_WS_RE = re.compile(r"^[ \t]+", re.MULTILINE)


class ContentNormalizer:
    """Applies the formatting pipeline for one configuration snapshot."""

    def __init__(self, formatting: GlobalFormatting | None = None) -> None:
        self._formatting = formatting or GlobalFormatting()
        self._splitter: LineSplitter | None = None
        if self._formatting.max_line_length:
            self._splitter = LineSplitter(
                self._formatting.max_line_length,
                self._formatting.split_tolerance,
            )

    @property
    def bullet_char(self) -> str:
        return self._formatting.bullet_char or DEFAULT_BULLET_CHAR

    def normalize(self, content: str, title: str | None = None) -> str:
        fmt = self._formatting
        text = content.replace("\r\n", "\n")
        if fmt.remove_markdown:
            text = self.remove_markdown(text)
        if fmt.remove_section_headers:
            text = self.remove_section_header(text, title)
        if fmt.bullet_char:
            text = self.standardize_bullets(text, fmt.bullet_char)
        text = self.collapse_whitespace(text)
        if self._splitter is not None:
            text = self.split_long_lines(text)
        return text

    # ── Stages ──────────────────────────────────────────────────────

    @staticmethod
    def remove_markdown(text: str) -> str:
        """Strip emphasis, headings, inline code and links, keeping the text."""
        for pattern, replacement in _MARKDOWN_RULES:
            text = pattern.sub(replacement, text)
        return text

    @staticmethod
    def remove_section_header(text: str, title: str | None = None) -> str:
        """Drop a leading echoed header standing on its own line or followed by a colon."""
        titles = ((title,) if title else ()) + KNOWN_SECTION_TITLES
        alternatives = "|".join(re.escape(t) for t in sorted(set(titles), key=len, reverse=True))
        header_re = re.compile(
            rf"\A\s*(?:{alternatives})[ \t]*(?::[ \t]*\n?|\n|\Z)",
            re.IGNORECASE,
        )
        return header_re.sub("", text, count=1)

    @staticmethod
    def standardize_bullets(text: str, bullet_char: str) -> str:
        return _BULLET_PREFIX_RE.sub(lambda _m: f"{bullet_char} ", text)

    @staticmethod
    def collapse_whitespace(text: str) -> str:
        text = _EXCESS_NEWLINES_RE.sub("\n\n", text)
        text = _LEADING_WS_RE.sub("", text)
        return text.strip()

    def split_long_lines(self, text: str) -> str:
        """Split over-long bullet lines and cap the bullet count."""
        assert self._splitter is not None
        bullet = self.bullet_char
        max_bullets = self._formatting.max_bullets

        lines: list[str] = []
        bullets = 0
        dropped = 0
        for line in text.split("\n"):
            if not line.startswith(bullet):
                lines.append(line)
                continue

            body = line[len(bullet) :].strip()
            fragments = self._splitter.split(body) if len(body) > self._splitter.max_length else [body]
            for fragment in fragments:
                if max_bullets is not None and bullets >= max_bullets:
                    dropped += 1
                    continue
                lines.append(f"{bullet} {fragment}")
                bullets += 1

        if dropped:
            log.debug("Dropped %d bullet(s) over the cap of %s", dropped, max_bullets)
        return self.collapse_whitespace("\n".join(lines))
