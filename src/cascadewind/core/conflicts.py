"""
Utility conflict resolution.

When several rules target the same element, more than one utility can set
the same CSS property under the same variants (``p-2`` from ``.card`` and
``p-4`` from ``.card.large``). Only the cascade winner is kept: highest
specificity, then latest source order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from .specificity import Specificity
from .variants import normalize_variant_order

logger = logging.getLogger(__name__)

BASE_VARIANT_KEY = "(base)"


@dataclass(frozen=True)
class UtilityWithMeta:
    """A utility plus the cascade data of the rule that produced it.

    Variants are stored in canonical order whatever order they arrive in.
    """

    value: str
    variants: tuple[str, ...]
    css_property: str
    specificity: Specificity
    source_order: int
    original_selector: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "variants", tuple(normalize_variant_order(self.variants)))


@dataclass(frozen=True)
class ResolvedUtility:
    value: str
    variants: tuple[str, ...]
    css_property: str

    def __str__(self) -> str:
        return ":".join([*self.variants, self.value])


@dataclass
class ConflictInfo:
    winner: UtilityWithMeta
    losers: list[UtilityWithMeta]
    css_property: str
    variant_key: str


@dataclass
class ConflictResult:
    resolved: list[ResolvedUtility] = field(default_factory=list)
    conflicts: list[ConflictInfo] = field(default_factory=list)


def build_utility(
    value: str,
    variants: Iterable[str],
    css_property: str,
    specificity: Specificity,
    source_order: int,
    original_selector: str,
) -> UtilityWithMeta:
    """Create a ``UtilityWithMeta`` from any iterable of variants."""
    return UtilityWithMeta(
        value=value,
        variants=tuple(variants),
        css_property=css_property,
        specificity=specificity,
        source_order=source_order,
        original_selector=original_selector,
    )


def group_utilities(
    utilities: Iterable[UtilityWithMeta],
) -> dict[str, dict[str, list[UtilityWithMeta]]]:
    """Group by CSS property, then by normalized variant key."""
    groups: dict[str, dict[str, list[UtilityWithMeta]]] = {}
    for utility in utilities:
        key = ":".join(utility.variants) or BASE_VARIANT_KEY
        groups.setdefault(utility.css_property, {}).setdefault(key, []).append(utility)
    return groups


def _cascade_rank(utility: UtilityWithMeta) -> tuple[int, int, int, int]:
    return (*utility.specificity.as_tuple(), utility.source_order)


def resolve_conflicts(utilities: Iterable[UtilityWithMeta]) -> ConflictResult:
    """Keep one winner per (property, variants) group."""
    result = ConflictResult()

    for css_property, by_variant in group_utilities(utilities).items():
        for variant_key, candidates in by_variant.items():
            ranked = sorted(candidates, key=_cascade_rank, reverse=True)
            winner, losers = ranked[0], ranked[1:]
            result.resolved.append(
                ResolvedUtility(winner.value, winner.variants, winner.css_property)
            )
            if not losers:
                continue

            result.conflicts.append(ConflictInfo(winner, losers, css_property, variant_key))
            logger.debug(
                "Conflict in %s (%s): kept %s (specificity %s, order %d), discarded %s",
                css_property,
                variant_key,
                winner.value,
                winner.specificity,
                winner.source_order,
                ", ".join(loser.value for loser in losers),
            )

    return result


def resolve_conflicts_by_element(
    utilities_by_element: dict[str, list[UtilityWithMeta]],
) -> dict[str, ConflictResult]:
    return {key: resolve_conflicts(utilities) for key, utilities in utilities_by_element.items()}


def sort_utilities_for_output(utilities: Iterable[ResolvedUtility]) -> list[ResolvedUtility]:
    """Base utilities first, then by variant prefix, then by value."""
    return sorted(utilities, key=lambda u: (bool(u.variants), ":".join(u.variants), u.value))


def resolved_utilities_to_strings(utilities: Iterable[ResolvedUtility]) -> list[str]:
    return [str(utility) for utility in sort_utilities_for_output(utilities)]


__all__ = [
    "BASE_VARIANT_KEY",
    "ConflictInfo",
    "ConflictResult",
    "ResolvedUtility",
    "UtilityWithMeta",
    "build_utility",
    "group_utilities",
    "resolve_conflicts",
    "resolve_conflicts_by_element",
    "resolved_utilities_to_strings",
    "sort_utilities_for_output",
]
