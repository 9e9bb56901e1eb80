"""
Pseudo selector to variant resolution.

Only the simplest shape converts: a single class with at most one supported
pseudo-class or pseudo-element, e.g. ``.button:hover`` -> class ``button``
under variant ``hover``. Anything else is reported as complex with a reason
and left as plain CSS.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from .specificity import split_selector_list

logger = logging.getLogger(__name__)

PSEUDO_TO_VARIANT: dict[str, str] = {
    "hover": "hover",
    "focus": "focus",
    "active": "active",
    "disabled": "disabled",
    "visited": "visited",
    "first-child": "first",
    "last-child": "last",
    "before": "before",
    "after": "after",
}

SUPPORTED_PSEUDOS = frozenset(PSEUDO_TO_VARIANT)

UNSUPPORTED_PATTERNS: tuple[str, ...] = (
    ":nth-child",
    ":nth-of-type",
    ":not(",
    ":has(",
    ":is(",
    ":where(",
    ":first-of-type",
    ":last-of-type",
    ":only-child",
    ":only-of-type",
    ":empty",
    ":checked",
    ":indeterminate",
    ":default",
    ":required",
    ":valid",
    ":invalid",
    ":in-range",
    ":out-of-range",
    ":placeholder-shown",
    ":autofill",
    ":read-only",
    ":target",
    ":root",
    ":scope",
    ":lang(",
    ":dir(",
)

_PSEUDO = re.compile(r"::?([a-zA-Z-]+)")
_BASE_CLASS = re.compile(r"\.([a-zA-Z_-][a-zA-Z0-9_-]*)")


@dataclass(frozen=True)
class ParsedSelector:
    base_class: str = ""
    pseudos: list[str] = field(default_factory=list)
    is_complex: bool = False
    reason: str | None = None


@dataclass(frozen=True)
class PseudoMatch:
    """Result of mapping a selector onto a class plus variants."""

    base_class: str | None
    variants: list[str] = field(default_factory=list)
    skipped: bool = False
    reason: str | None = None


def _complex(reason: str) -> ParsedSelector:
    return ParsedSelector(is_complex=True, reason=reason)


def parse_selector(selector: str) -> ParsedSelector:
    """Split ``.class:pseudo`` into its class and variant."""
    trimmed = selector.strip()

    if not trimmed.startswith("."):
        return _complex(f"Not a class selector: {selector}")

    lowered = trimmed.lower()
    for pattern in UNSUPPORTED_PATTERNS:
        if pattern in lowered:
            return _complex(f"Unsupported pseudo selector pattern: {pattern}")

    pseudos = [name.lower() for name in _PSEUDO.findall(trimmed)]
    if len(pseudos) > 1:
        return _complex(f"Skipped complex pseudo chain ({selector})")

    unsupported = next((p for p in pseudos if p not in SUPPORTED_PSEUDOS), None)
    if unsupported:
        return _complex(f"Unsupported pseudo selector :{unsupported}")

    base = _BASE_CLASS.match(trimmed)
    if not base:
        return _complex(f"Invalid class name in selector: {selector}")

    remainder = _PSEUDO.sub("", trimmed[base.end() :])
    if remainder:
        if re.search(r"[\s>+~]", remainder):
            return _complex(f"Complex selector with combinators: {selector}")
        return _complex(f"Compound selector: {selector}")

    return ParsedSelector(
        base_class=base.group(1),
        pseudos=[PSEUDO_TO_VARIANT[p] for p in pseudos],
    )


def map_pseudo_to_variant(pseudo: str) -> str | None:
    """Map ``:hover`` / ``::before`` / ``first-child`` to its variant name."""
    return PSEUDO_TO_VARIANT.get(pseudo.lower().lstrip(":"))


def process_pseudo_selector(selector: str) -> PseudoMatch:
    parsed = parse_selector(selector)

    if parsed.is_complex:
        logger.debug(parsed.reason or f"Skipped complex selector: {selector}")
        return PseudoMatch(base_class=None, skipped=True, reason=parsed.reason)

    if parsed.pseudos:
        logger.debug("Converted pseudo selector %s -> %s:", selector, ":".join(parsed.pseudos))

    return PseudoMatch(base_class=parsed.base_class, variants=list(parsed.pseudos))


def parse_multiple_selectors(selector: str) -> list[ParsedSelector]:
    """Parse each member of a comma-separated selector list."""
    return [parse_selector(part) for part in split_selector_list(selector)]


__all__ = [
    "PSEUDO_TO_VARIANT",
    "ParsedSelector",
    "PseudoMatch",
    "SUPPORTED_PSEUDOS",
    "UNSUPPORTED_PATTERNS",
    "map_pseudo_to_variant",
    "parse_multiple_selectors",
    "parse_selector",
    "process_pseudo_selector",
]
