"""Logic-less prompt template renderer.

Supports the subset of mustache that slide prompts use::

    {{name}}  {{ a.b }}  {{{name}}}  {{&name}}   variables (never escaped)
    {{#flag}}...{{/flag}}                        body once when truthy
    {{^flag}}...{{/flag}}                        body when falsy or absent
    {{! comment }}

Output is plain text destined for a slide, so no HTML escaping is applied.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from proposal_ai.exceptions import PromptRenderError
from proposal_ai.models import IntakeData

log = logging.getLogger(__name__)

DEFAULT_DOCUMENT_CONTEXT_CHARS = 1500

_TAG_RE = re.compile(
    r"\{\{\{\s*(?P<triple>.+?)\s*\}\}\}"
    r"|\{\{\s*(?P<sigil>[#^/!&]?)\s*(?P<name>.*?)\s*\}\}",
    re.DOTALL,
)
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")
_TRAILING_WS_RE = re.compile(r"[ \t]+$", re.MULTILINE)

_MISSING = object()


# ── Parse tree ──────────────────────────────────────────────────────


@dataclass
class _Text:
    text: str


@dataclass
class _Variable:
    name: str


@dataclass
class _Section:
    name: str
    inverted: bool
    children: list[_Node] = field(default_factory=list)


_Node = Union[_Text, _Variable, _Section]


def _parse(template: str) -> list[_Node]:
    """Parse ``template`` into a node tree.

    Raises:
        PromptRenderError: On unclosed or mismatched sections.
    """
    root: list[_Node] = []
    stack: list[_Section] = []
    current = root
    pos = 0

    for match in _TAG_RE.finditer(template):
        if match.start() > pos:
            current.append(_Text(template[pos : match.start()]))
        pos = match.end()

        if match.group("triple") is not None:
            current.append(_Variable(match.group("triple")))
            continue

        sigil = match.group("sigil")
        name = match.group("name")
        if sigil == "!":
            continue
        if not name:
            raise PromptRenderError(f"Empty tag at offset {match.start()}")

        if sigil in ("#", "^"):
            section = _Section(name=name, inverted=sigil == "^")
            current.append(section)
            stack.append(section)
            current = section.children
        elif sigil == "/":
            if not stack:
                raise PromptRenderError(f"Unopened section {name!r} at offset {match.start()}")
            opened = stack.pop()
            if opened.name != name:
                raise PromptRenderError(
                    f"Unclosed section {opened.name!r} (found closing tag {name!r})"
                )
            current = stack[-1].children if stack else root
        else:
            current.append(_Variable(name))

    if stack:
        raise PromptRenderError(f"Unclosed section {stack[-1].name!r}")
    if pos < len(template):
        current.append(_Text(template[pos:]))
    return root


# ── Evaluation ──────────────────────────────────────────────────────


def _lookup(context: Mapping[str, Any], name: str) -> Any:
    """Resolve a possibly dotted name; return ``_MISSING`` when any segment is absent."""
    current: Any = context
    for part in name.split("."):
        if isinstance(current, Mapping) and part in current:
            current = current[part]
        else:
            return _MISSING
    return current


def _to_text(value: Any) -> str:
    if value is _MISSING or value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ",".join(_to_text(v) for v in value)
    return str(value)


def _render_nodes(nodes: list[_Node], context: Mapping[str, Any], out: list[str]) -> None:
    for node in nodes:
        if isinstance(node, _Text):
            out.append(node.text)
        elif isinstance(node, _Variable):
            out.append(_to_text(_lookup(context, node.name)))
        else:
            value = _lookup(context, node.name)
            truthy = value is not _MISSING and bool(value)
            if truthy != node.inverted:
                _render_nodes(node.children, context, out)


def _cleanup(text: str) -> str:
    text = _EXCESS_NEWLINES_RE.sub("\n\n", text)
    text = _TRAILING_WS_RE.sub("", text)
    return text.strip()


# ── Public API ──────────────────────────────────────────────────────


class PromptRenderer:
    """Builds generation contexts and expands prompt templates against them."""

    def __init__(self, document_context_chars: int = DEFAULT_DOCUMENT_CONTEXT_CHARS) -> None:
        self._document_context_chars = document_context_chars

    def build_context(
        self,
        intake: IntakeData,
        document_context: str = "",
        variables: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Merge intake fields, the truncated attachment excerpt and slide variables.

        Slide variables win on key collision.
        """
        context: dict[str, Any] = dict(intake.resolved())
        context["document_context"] = (document_context or "")[: self._document_context_chars]
        if variables:
            context.update(variables)
        return context

    def render(self, template: str, context: Mapping[str, Any]) -> str:
        """Expand ``template`` against ``context``.

        Raises:
            PromptRenderError: If the template is malformed.
        """
        out: list[str] = []
        _render_nodes(_parse(template), context, out)
        return _cleanup("".join(out))

    def render_with_conditions(
        self,
        template: str,
        context: Mapping[str, Any],
        conditions: Mapping[str, bool] | None = None,
    ) -> str:
        """Render with boolean flags merged into the context for section blocks."""
        merged = dict(context)
        if conditions:
            merged.update(conditions)
        return self.render(template, merged)

    def extract_variables(self, template: str) -> list[str]:
        """Return referenced variable names in first-seen order, section tags excluded."""
        names: list[str] = []
        for match in _TAG_RE.finditer(template):
            if match.group("triple") is not None:
                name = match.group("triple")
            elif match.group("sigil") in ("", "&"):
                name = match.group("name")
            else:
                continue
            if name and name not in names:
                names.append(name)
        return names

    def find_unresolved(self, template: str, context: Mapping[str, Any]) -> list[str]:
        """Return variables in ``template`` whose dotted path is absent from ``context``."""
        unresolved = [
            name for name in self.extract_variables(template) if _lookup(context, name) is _MISSING
        ]
        if unresolved:
            log.debug("Unresolved prompt variables: %s", unresolved)
        return unresolved
