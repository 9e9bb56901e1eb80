"""
Variant (qualifier) ordering and utility assembly.

A utility such as ``flex`` takes effect under qualifiers like ``md`` or
``hover``; the rendered token is ``md:hover:flex``. Qualifiers are always
rendered in one canonical order: responsive breakpoints by increasing
width, then pseudo states and pseudo elements, then colour-scheme
variants. Unknown qualifiers go last in the order they were given.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

RESPONSIVE_VARIANTS: tuple[str, ...] = ("sm", "md", "lg", "xl", "2xl")

PSEUDO_VARIANTS: tuple[str, ...] = (
    "hover",
    "focus",
    "active",
    "disabled",
    "visited",
    "first",
    "last",
    "before",
    "after",
)

SCHEME_VARIANTS: tuple[str, ...] = ("dark", "light")

VARIANT_ORDER: tuple[str, ...] = RESPONSIVE_VARIANTS + PSEUDO_VARIANTS + SCHEME_VARIANTS

_RESPONSIVE = frozenset(RESPONSIVE_VARIANTS)
_PSEUDO = frozenset(PSEUDO_VARIANTS)


@dataclass(frozen=True)
class UtilityEntry:
    """A bare utility token and the qualifiers it applies under."""

    value: str
    qualifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.qualifiers, tuple):
            object.__setattr__(self, "qualifiers", tuple(self.qualifiers))


@dataclass
class MergedUtility:
    """A utility value with the union of qualifiers seen for it."""

    value: str
    qualifiers: list[str] = field(default_factory=list)


def is_responsive_variant(variant: str) -> bool:
    return variant in _RESPONSIVE


def is_pseudo_variant(variant: str) -> bool:
    return variant in _PSEUDO


def build_variant_order(
    breakpoints: Sequence[str] = RESPONSIVE_VARIANTS,
    extra: Sequence[str] = (),
) -> tuple[str, ...]:
    """Build a variant order for custom breakpoint names.

    Args:
        breakpoints: Breakpoint names, already sorted by increasing width
        extra: Additional known variants appended after the built-ins

    Returns:
        Ordered tuple of known variant names
    """
    order = list(dict.fromkeys(breakpoints))
    for variant in (*PSEUDO_VARIANTS, *SCHEME_VARIANTS, *extra):
        if variant not in order:
            order.append(variant)
    return tuple(order)


def deduplicate_variants(variants: Iterable[str]) -> list[str]:
    """Remove repeats; first occurrence wins and order is kept."""
    return list(dict.fromkeys(variants))


def sort_variants(variants: Iterable[str], order: Sequence[str] = VARIANT_ORDER) -> list[str]:
    """Stable sort by ``order``; unknown variants keep their relative order at the end."""
    rank = {variant: index for index, variant in enumerate(order)}
    unknown = len(rank)
    return sorted(variants, key=lambda variant: rank.get(variant, unknown))


def normalize_variant_order(
    variants: Iterable[str], order: Sequence[str] = VARIANT_ORDER
) -> list[str]:
    """Deduplicate then sort variants into canonical order.

    Examples:
        >>> normalize_variant_order(["active", "lg", "hover", "md"])
        ['md', 'lg', 'hover', 'active']
    """
    return sort_variants(deduplicate_variants(variants), order)


def validate_variant_order(variants: Iterable[str]) -> bool:
    """Check that no responsive variant follows a pseudo variant."""
    seen_pseudo = False
    for variant in variants:
        if is_pseudo_variant(variant):
            seen_pseudo = True
        elif is_responsive_variant(variant) and seen_pseudo:
            return False
    return True


def assemble_utility(
    value: str,
    qualifiers: Iterable[str] | None = None,
    order: Sequence[str] = VARIANT_ORDER,
) -> str:
    """Render ``value`` prefixed with its normalized qualifiers.

    Examples:
        >>> assemble_utility("flex", ["hover", "hover", "md"])
        'md:hover:flex'
        >>> assemble_utility("flex")
        'flex'
    """
    if not qualifiers:
        return value
    normalized = normalize_variant_order(qualifiers, order)
    if not normalized:
        return value
    return ":".join([*normalized, value])


def assemble_utilities(
    entries: Iterable[UtilityEntry], order: Sequence[str] = VARIANT_ORDER
) -> list[str]:
    return [assemble_utility(entry.value, entry.qualifiers, order) for entry in entries]


def merge_utilities(entries: Iterable[UtilityEntry]) -> list[MergedUtility]:
    """Group entries by value and union their qualifiers.

    Distinct values appear in order of first appearance; each value's
    qualifiers are deduplicated in order of first appearance.
    """
    merged: dict[str, MergedUtility] = {}
    for entry in entries:
        target = merged.setdefault(entry.value, MergedUtility(entry.value))
        for qualifier in entry.qualifiers:
            if qualifier not in target.qualifiers:
                target.qualifiers.append(qualifier)
    return list(merged.values())


__all__ = [
    "MergedUtility",
    "PSEUDO_VARIANTS",
    "RESPONSIVE_VARIANTS",
    "SCHEME_VARIANTS",
    "UtilityEntry",
    "VARIANT_ORDER",
    "assemble_utilities",
    "assemble_utility",
    "build_variant_order",
    "deduplicate_variants",
    "is_pseudo_variant",
    "is_responsive_variant",
    "merge_utilities",
    "normalize_variant_order",
    "sort_variants",
    "validate_variant_order",
]
