"""
CSS selector specificity.

Specificity is computed by lexically scanning the selector text; no selector
tree is built. The result is an ``(ids, classes, types)`` triplet compared
id first, so a single id outranks any number of classes.

Examples:
    >>> calculate_specificity("#nav .item:hover")
    Specificity(ids=1, classes=2, types=0)
    >>> calculate_specificity("ul li::before")
    Specificity(ids=0, classes=0, types=3)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class Specificity:
    """Specificity triplet, ordered id first."""

    ids: int = 0
    classes: int = 0
    types: int = 0

    def __post_init__(self) -> None:
        if self.ids < 0 or self.classes < 0 or self.types < 0:
            raise ValueError(f"Specificity counts must be non-negative: {self!r}")

    def __add__(self, other: Specificity) -> Specificity:
        if not isinstance(other, Specificity):
            return NotImplemented
        return Specificity(
            self.ids + other.ids,
            self.classes + other.classes,
            self.types + other.types,
        )

    def __str__(self) -> str:
        return f"({self.ids}, {self.classes}, {self.types})"

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.ids, self.classes, self.types)


ZERO_SPECIFICITY = Specificity()

# Identifiers may contain backslash escapes such as the ":" in ".md\:p-4"
_IDENT = re.compile(r"-?(?:[a-zA-Z_]|\\.)(?:[a-zA-Z0-9_-]|\\.)*|--(?:[a-zA-Z0-9_-]|\\.)*")

# Pseudo-elements that are still accepted with the CSS2 single-colon syntax
LEGACY_PSEUDO_ELEMENTS = frozenset({"before", "after", "first-line", "first-letter"})

# Functional pseudo-classes that take the specificity of their argument
_FORWARDING_PSEUDO_CLASSES = frozenset({"is", "not", "has", "matches", "-webkit-any", "-moz-any"})


def compare_specificity(a: Specificity, b: Specificity) -> int:
    """Compare two specificities field by field, id first.

    Returns:
        Negative if ``a`` ranks below ``b``, zero if equal, positive if above.
    """
    for left, right in zip(a.as_tuple(), b.as_tuple(), strict=True):
        if left != right:
            return left - right
    return 0


def is_higher_specificity(a: Specificity, b: Specificity) -> bool:
    return compare_specificity(a, b) > 0


def max_specificity(specs: Iterable[Specificity]) -> Specificity:
    """Return the highest of ``specs``, or zero for an empty iterable."""
    return max(specs, default=ZERO_SPECIFICITY)


def descendant_specificity(
    parent_kind: Literal["class", "element"],
    target_kind: Literal["class", "element"],
) -> Specificity:
    """Specificity of a two-part descendant selector such as ``.card p``."""
    parts = (parent_kind, target_kind)
    return Specificity(
        classes=sum(1 for kind in parts if kind == "class"),
        types=sum(1 for kind in parts if kind == "element"),
    )


def _find_closing(text: str, start: int, opener: str, closer: str) -> int:
    """Return the index of the delimiter closing ``text[start]``.

    Quoted strings are skipped. Returns ``len(text)`` when unbalanced.
    """
    depth = 0
    quote: str | None = None
    i = start
    while i < len(text):
        ch = text[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return len(text)


def split_selector_list(selector: str) -> list[str]:
    """Split a selector list on top-level commas."""
    parts: list[str] = []
    depth = 0
    quote: str | None = None
    current: list[str] = []
    for ch in selector:
        if quote:
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch in "([":
            depth += 1
        elif ch in ")]":
            depth = max(0, depth - 1)
        elif ch == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(ch)
    parts.append("".join(current).strip())
    return [part for part in parts if part]


def _scan_compound(text: str) -> Specificity:
    ids = classes = types = 0
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]

        if ch == "#":
            match = _IDENT.match(text, i + 1)
            if match:
                ids += 1
                i = match.end()
                continue
            i += 1

        elif ch == ".":
            match = _IDENT.match(text, i + 1)
            if match:
                classes += 1
                i = match.end()
                continue
            i += 1

        elif ch == "[":
            classes += 1
            i = _find_closing(text, i, "[", "]") + 1

        elif ch == ":":
            is_element = text.startswith("::", i)
            name_start = i + (2 if is_element else 1)
            match = _IDENT.match(text, name_start)
            if not match:
                i = name_start
                continue
            name = match.group(0).lower()
            i = match.end()

            argument: str | None = None
            if i < n and text[i] == "(":
                close = _find_closing(text, i, "(", ")")
                argument = text[i + 1 : close]
                i = close + 1

            if is_element or name in LEGACY_PSEUDO_ELEMENTS:
                types += 1
            elif name == "where":
                pass
            elif name in _FORWARDING_PSEUDO_CLASSES and argument is not None:
                inner = calculate_specificity(argument)
                ids += inner.ids
                classes += inner.classes
                types += inner.types
            else:
                classes += 1

        elif ch.isalpha() or ch == "_":
            match = _IDENT.match(text, i)
            if match:
                types += 1
                i = match.end()
                continue
            i += 1

        else:
            # Combinators, whitespace, universal selector, namespace bars
            i += 1

    return Specificity(ids, classes, types)


def calculate_specificity(selector: str) -> Specificity:
    """Compute the specificity of ``selector``.

    Selector lists yield the specificity of their most specific member.
    An empty selector has zero specificity.
    """
    trimmed = selector.strip()
    if not trimmed:
        return ZERO_SPECIFICITY

    members = split_selector_list(trimmed)
    if len(members) > 1:
        return max_specificity(calculate_specificity(member) for member in members)

    spec = _scan_compound(trimmed)
    logger.debug("Specificity of %r is %s", trimmed, spec)
    return spec


__all__ = [
    "LEGACY_PSEUDO_ELEMENTS",
    "Specificity",
    "ZERO_SPECIFICITY",
    "calculate_specificity",
    "compare_specificity",
    "descendant_specificity",
    "is_higher_specificity",
    "max_specificity",
    "split_selector_list",
]
