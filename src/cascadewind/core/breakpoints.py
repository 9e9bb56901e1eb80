"""
Media query to breakpoint qualifier resolution.

Only ``min-width`` queries map onto breakpoint tiers. Everything else
(``max-width``, ``screen and ...``, orientation, print) is skipped and the
rule is left as plain CSS.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum

logger = logging.getLogger(__name__)

# Pixels per rem/em when converting breakpoint values
ROOT_FONT_SIZE_PX = 16.0

# Relative distance at which a min-width still snaps to the closest breakpoint
MATCH_TOLERANCE = 0.05


@dataclass(frozen=True)
class Breakpoint:
    """A named responsive tier starting at ``min_width`` pixels."""

    name: str
    min_width: float


DEFAULT_BREAKPOINTS: tuple[Breakpoint, ...] = (
    Breakpoint("sm", 640),
    Breakpoint("md", 768),
    Breakpoint("lg", 1024),
    Breakpoint("xl", 1280),
    Breakpoint("2xl", 1536),
)


class MediaQueryKind(StrEnum):
    MIN_WIDTH = "min-width"
    MAX_WIDTH = "max-width"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class MediaQueryInfo:
    kind: MediaQueryKind
    raw: str
    value: float | None = None


@dataclass(frozen=True)
class BreakpointMatch:
    """Result of mapping a media query onto a breakpoint."""

    breakpoint: str | None
    skipped: bool
    reason: str | None = None


_LENGTH = re.compile(r"^([\d.]+)(px|rem|em)$")
_MIN_WIDTH = re.compile(r"\(\s*min-width\s*:\s*([\d.]+)(px|rem|em)\s*\)")
_MAX_WIDTH = re.compile(r"\(\s*max-width\s*:\s*([\d.]+)(px|rem|em)\s*\)")


def _to_pixels(amount: str, unit: str) -> float | None:
    try:
        number = float(amount)
    except ValueError:
        return None
    if unit in ("rem", "em"):
        return number * ROOT_FONT_SIZE_PX
    return number


def parse_length(value: str) -> float | None:
    """Convert ``"640px"`` / ``"40rem"`` / ``"40em"`` to pixels."""
    match = _LENGTH.match(value.strip())
    if not match:
        return None
    return _to_pixels(match.group(1), match.group(2))


def resolve_breakpoints(
    screens: Mapping[str, str | Sequence[str]] | None,
) -> list[Breakpoint]:
    """Build breakpoints from a Tailwind-style ``screens`` mapping.

    List values use their first element. Entries whose width cannot be
    parsed are ignored; if nothing usable remains the defaults are returned.
    """
    if not screens:
        return list(DEFAULT_BREAKPOINTS)

    breakpoints: list[Breakpoint] = []
    for name, value in screens.items():
        raw = value if isinstance(value, str) else (value[0] if value else "")
        width = parse_length(raw)
        if width is None:
            logger.debug("Ignoring screen %s with unsupported width %r", name, value)
            continue
        breakpoints.append(Breakpoint(name, width))

    breakpoints.sort(key=lambda bp: bp.min_width)
    return breakpoints or list(DEFAULT_BREAKPOINTS)


def parse_media_query(params: str) -> MediaQueryInfo:
    """Classify the parameters of an ``@media`` rule."""
    normalized = params.strip().lower()

    if "screen" in normalized and "and" in normalized:
        return MediaQueryInfo(MediaQueryKind.UNSUPPORTED, params)
    if "orientation" in normalized or "print" in normalized:
        return MediaQueryInfo(MediaQueryKind.UNSUPPORTED, params)

    match = _MIN_WIDTH.search(normalized)
    if match:
        return MediaQueryInfo(
            MediaQueryKind.MIN_WIDTH, params, _to_pixels(match.group(1), match.group(2))
        )

    if _MAX_WIDTH.search(normalized):
        return MediaQueryInfo(MediaQueryKind.MAX_WIDTH, params)

    return MediaQueryInfo(MediaQueryKind.UNSUPPORTED, params)


def find_breakpoint_for_min_width(
    min_width: float, breakpoints: Sequence[Breakpoint]
) -> str | None:
    """Exact match first, otherwise the closest breakpoint within tolerance."""
    for bp in breakpoints:
        if bp.min_width == min_width:
            return bp.name

    if not breakpoints:
        return None

    closest = min(breakpoints, key=lambda bp: abs(bp.min_width - min_width))
    if abs(closest.min_width - min_width) <= min_width * MATCH_TOLERANCE:
        logger.debug(
            "Matched min-width %spx to closest breakpoint %s (%spx)",
            min_width,
            closest.name,
            closest.min_width,
        )
        return closest.name
    return None


def process_media_query(
    params: str, breakpoints: Sequence[Breakpoint] = DEFAULT_BREAKPOINTS
) -> BreakpointMatch:
    """Map ``@media`` parameters to a breakpoint qualifier."""
    info = parse_media_query(params)

    if info.kind != MediaQueryKind.MIN_WIDTH or info.value is None:
        if info.kind == MediaQueryKind.MAX_WIDTH:
            reason = "Skipped media query (max-width: ...) - unsupported"
        else:
            reason = f"Skipped media query ({info.raw}) - unsupported"
        logger.debug(reason)
        return BreakpointMatch(None, True, reason)

    name = find_breakpoint_for_min_width(info.value, breakpoints)
    if name is None:
        reason = f"No matching breakpoint for min-width: {info.value:g}px"
        logger.debug(reason)
        return BreakpointMatch(None, True, reason)

    logger.debug("Converted media query (min-width: %gpx) -> %s", info.value, name)
    return BreakpointMatch(name, False)


def prefix_with_breakpoint(class_name: str, breakpoint: str) -> str:
    return f"{breakpoint}:{class_name}"


__all__ = [
    "Breakpoint",
    "BreakpointMatch",
    "DEFAULT_BREAKPOINTS",
    "MediaQueryInfo",
    "MediaQueryKind",
    "find_breakpoint_for_min_width",
    "parse_length",
    "parse_media_query",
    "prefix_with_breakpoint",
    "process_media_query",
    "resolve_breakpoints",
]
