"""Placeholder engine for notification templates.

Templates use a deliberately small marker language:

    {{name}}                          scalar substitution
    {{#if name}} ... {{/if}}          conditional block
    {{#if name}} ... {{else}} ... {{/if}}

Raw text is parsed into a flat tree of Literal, Scalar and Conditional nodes.
Conditionals are resolved first against the context, then every remaining
scalar is substituted in a single pass. Substituted values are never scanned
again, so a value containing ``{{...}}`` is emitted as-is.
"""

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, List, Mapping, Optional, Tuple, Union

from markupsafe import Markup, escape

from .formatting import ValueFormatter
from .models import MalformedTemplate

_MARKER = re.compile(r"\{\{\s*(#if\b[^}]*|else|/if|[A-Za-z_][A-Za-z0-9_]*)\s*\}\}")
_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Scalar:
    name: str


@dataclass(frozen=True)
class Conditional:
    name: str
    when_true: Tuple["Node", ...]
    when_false: Tuple["Node", ...] = ()


Node = Union[Literal, Scalar, Conditional]


@dataclass
class _OpenBlock:
    name: str
    line: int
    when_true: List[Node] = field(default_factory=list)
    when_false: Optional[List[Node]] = None

    def close(self) -> Conditional:
        return Conditional(self.name, tuple(self.when_true), tuple(self.when_false or ()))


@lru_cache(maxsize=64)
def parse_template(raw: str) -> Tuple[Node, ...]:
    """Parse template text into nodes.

    Conditional blocks may not contain other conditional blocks.

    Raises:
        MalformedTemplate: On unbalanced, nested or unnamed block markers
    """
    root: List[Node] = []
    current = root
    block: Optional[_OpenBlock] = None
    position = 0

    for match in _MARKER.finditer(raw):
        if match.start() > position:
            current.append(Literal(raw[position:match.start()]))
        position = match.end()
        token = match.group(1).strip()
        line = raw.count("\n", 0, match.start()) + 1

        if token.startswith("#if"):
            name = token[3:].strip()
            if not _NAME.fullmatch(name):
                raise MalformedTemplate("{{#if}} requires a single condition name", line)
            if block is not None:
                raise MalformedTemplate(
                    f"Conditional '{name}' cannot be nested inside '{block.name}'", line
                )
            block = _OpenBlock(name, line)
            current = block.when_true
        elif token == "else":
            if block is None:
                raise MalformedTemplate("{{else}} outside of a conditional block", line)
            if block.when_false is not None:
                raise MalformedTemplate(f"Duplicate {{{{else}}}} in '{block.name}'", line)
            block.when_false = []
            current = block.when_false
        elif token == "/if":
            if block is None:
                raise MalformedTemplate("{{/if}} without a matching {{#if}}", line)
            root.append(block.close())
            block = None
            current = root
        else:
            current.append(Scalar(token))

    if position < len(raw):
        current.append(Literal(raw[position:]))

    if block is not None:
        raise MalformedTemplate(f"Conditional '{block.name}' is never closed", block.line)

    return tuple(root)


def is_truthy(value: Any) -> bool:
    """Condition semantics: None, False, blank strings and empty values are falsy."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return bool(value)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class PlaceholderEngine:
    """Renders templates against a flat context mapping."""

    def __init__(self, formatter: Optional[ValueFormatter] = None, autoescape: bool = True):
        """Initialize the engine.

        Args:
            formatter: Formats scalar values by type (amounts, dates, ...)
            autoescape: HTML-escape plain values; Markup values pass through
        """
        self.formatter = formatter or ValueFormatter()
        self.autoescape = autoescape

    def render(
        self,
        raw: str,
        context: Mapping[str, Any],
        defaults: Optional[Mapping[str, Any]] = None,
        autoescape: Optional[bool] = None,
    ) -> str:
        """Render raw template text.

        Args:
            raw: Template text
            context: Placeholder values and condition flags
            defaults: Values used when a scalar is missing or blank in context
            autoescape: Per-call override of the engine setting (subjects
                render unescaped)

        Returns:
            Rendered text with no markers left

        Raises:
            MalformedTemplate: If the template's block markers are malformed
        """
        escape_values = self.autoescape if autoescape is None else autoescape
        defaults = defaults or {}
        parts = []

        for node in self._resolve_blocks(parse_template(raw), context):
            if isinstance(node, Literal):
                parts.append(node.text)
            else:
                parts.append(self._substitute(node.name, context, defaults, escape_values))

        return "".join(parts)

    def _resolve_blocks(self, nodes, context):
        for node in nodes:
            if isinstance(node, Conditional):
                branch = node.when_true if is_truthy(context.get(node.name)) else node.when_false
                yield from branch
            else:
                yield node

    def _substitute(self, name, context, defaults, escape_values) -> str:
        value = context.get(name)
        if _is_blank(value) and name in defaults:
            value = defaults[name]

        if isinstance(value, Markup):
            return str(value)

        text = self.formatter.format(value)
        return str(escape(text)) if escape_values else text
