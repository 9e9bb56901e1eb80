"""
Custom-property registry and cascade resolution.

The registry stores every ``--name: value`` declaration discovered while
scanning and resolves ``var(--name, fallback)`` references at a use site.
Resolution applies a bounded subset of the CSS cascade:

1. Only definitions applicable to the use site are considered (scope and
   responsive/pseudo qualifiers, see ``VariableRegistry.is_applicable``).
2. The applicable definition with the highest specificity wins; ties go to
   the later source order.
3. References inside the winning value are substituted recursively.
4. Self-referential definitions are reported as circular instead of being
   followed.

Callers must register every definition before resolving any reference:
rankings are computed against the complete, globally source-ordered set.

Usage::

    registry = VariableRegistry()
    registry.register(VariableDefinition.from_declaration("--gap", "1rem"))
    ctx = ResolutionContext(selector=".card")
    registry.resolve_value("var(--gap) 0", ctx).value  # "1rem 0"
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from .errors import InvalidVariableError
from .specificity import ZERO_SPECIFICITY, Specificity, calculate_specificity

if TYPE_CHECKING:
    from .reporter import Reporter

logger = logging.getLogger(__name__)

CUSTOM_PROPERTY_PREFIX = "--"

# Maximum number of var() occurrences processed for a single value
MAX_SUBSTITUTIONS = 10

_VAR_OPEN = re.compile(r"(?<![\w-])var\s*\(", re.IGNORECASE)
_CUSTOM_PROPERTY_NAME = re.compile(r"--[a-zA-Z0-9_-]+")
_CLASS_TOKEN = re.compile(r"\.(?:[a-zA-Z_-]|\\.)(?:[a-zA-Z0-9_-]|\\.)*")


# =============================================================================
# Data model
# =============================================================================


class ScopeKind(StrEnum):
    """Where a custom property was declared."""

    GLOBAL = "global"  # :root / html, applies everywhere
    SELECTOR = "selector"  # declared inside a rule for a specific selector


class ResolutionSource(StrEnum):
    """How a resolution outcome was reached."""

    CACHE = "cache"
    FALLBACK = "fallback"
    UNDEFINED = "undefined"
    NO_MATCH = "no-match"
    CIRCULAR = "circular"
    UNRESOLVED = "unresolved"
    RESOLVED = "resolved"


@dataclass(frozen=True)
class VariableScope:
    """Scope of a custom-property definition."""

    kind: ScopeKind = ScopeKind.GLOBAL
    selector: str | None = None

    @classmethod
    def global_scope(cls) -> VariableScope:
        return cls(ScopeKind.GLOBAL)

    @classmethod
    def for_selector(cls, selector: str) -> VariableScope:
        return cls(ScopeKind.SELECTOR, selector.strip())

    @property
    def is_global(self) -> bool:
        return self.kind == ScopeKind.GLOBAL


@dataclass(frozen=True)
class VariableDefinition:
    """One custom-property declaration.

    Attributes:
        name: Property name including the ``--`` sigil
        value: Raw declared value, may contain further ``var()`` references
        scope: Global or selector scope
        specificity: Specificity of the declaring rule
        source_order: Run-wide position of the declaration
        qualifiers: Breakpoint/pseudo conditions gating the declaration
    """

    name: str
    value: str
    scope: VariableScope = field(default_factory=VariableScope.global_scope)
    specificity: Specificity = ZERO_SPECIFICITY
    source_order: int = 0
    qualifiers: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        if not is_custom_property(self.name):
            raise InvalidVariableError(
                f"Custom property name must start with '{CUSTOM_PROPERTY_PREFIX}': {self.name!r}"
            )
        if self.source_order < 0:
            raise InvalidVariableError(
                f"Source order must be non-negative for {self.name}: {self.source_order}"
            )
        if not isinstance(self.qualifiers, frozenset):
            object.__setattr__(self, "qualifiers", frozenset(self.qualifiers))

    @classmethod
    def from_declaration(
        cls,
        name: str,
        value: str,
        selector: str | None = None,
        source_order: int = 0,
        qualifiers: Iterable[str] = (),
    ) -> VariableDefinition:
        """Build a definition from a declaration found under ``selector``.

        ``None``, ``:root`` and ``html`` produce a global definition with zero
        specificity; any other selector produces a selector-scoped definition
        ranked by that selector's specificity.
        """
        if selector is None or selector.strip() in (":root", "html"):
            scope = VariableScope.global_scope()
            specificity = ZERO_SPECIFICITY
        else:
            scope = VariableScope.for_selector(selector)
            specificity = calculate_specificity(selector)
        return cls(
            name=name.strip(),
            value=value.strip(),
            scope=scope,
            specificity=specificity,
            source_order=source_order,
            qualifiers=frozenset(qualifiers),
        )


@dataclass(frozen=True)
class ResolutionContext:
    """Use site of a variable reference."""

    selector: str
    qualifiers: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        if not isinstance(self.qualifiers, frozenset):
            object.__setattr__(self, "qualifiers", frozenset(self.qualifiers))

    def cache_key(self, name: str) -> tuple[str, str, tuple[str, ...]]:
        return (name, self.selector, tuple(sorted(self.qualifiers)))


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a single variable name."""

    value: str
    resolved: bool
    source: ResolutionSource


@dataclass(frozen=True)
class ValueResolution:
    """Outcome of substituting every reference inside a raw value."""

    value: str
    has_unresolved: bool = False
    is_circular: bool = False


@dataclass(frozen=True)
class VarReference:
    """A ``var()`` occurrence located inside a value string."""

    name: str
    fallback: str | None
    start: int
    end: int  # exclusive


@dataclass(frozen=True)
class VarExpression:
    """A value consisting of exactly one ``var()`` call."""

    name: str
    fallback: str | None
    raw_value: str


# =============================================================================
# Reference scanning
# =============================================================================


def is_custom_property(prop: str) -> bool:
    """Check whether a declaration property is a custom property."""
    return prop.startswith(CUSTOM_PROPERTY_PREFIX)


def _match_reference(value: str, start: int, open_end: int) -> VarReference | None:
    """Parse a ``var(`` call whose opening parenthesis ends at ``open_end``."""
    i = open_end
    n = len(value)
    while i < n and value[i].isspace():
        i += 1

    name_match = _CUSTOM_PROPERTY_NAME.match(value, i)
    if not name_match:
        return None
    name = name_match.group(0)
    i = name_match.end()
    while i < n and value[i].isspace():
        i += 1
    if i >= n:
        return None

    if value[i] == ")":
        return VarReference(name=name, fallback=None, start=start, end=i + 1)
    if value[i] != ",":
        return None

    # Fallback runs to the parenthesis balancing the var( opener
    fallback_start = i + 1
    depth = 1
    quote: str | None = None
    i = fallback_start
    while i < n:
        ch = value[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return VarReference(
                    name=name,
                    fallback=value[fallback_start:i].strip(),
                    start=start,
                    end=i + 1,
                )
        i += 1
    return None


def find_var_references(value: str, start: int = 0) -> Iterator[VarReference]:
    """Yield well-formed ``var()`` occurrences left to right.

    Fallbacks may contain nested parentheses and further ``var()`` calls;
    they are captured up to the matching closing parenthesis. Malformed
    occurrences are skipped.
    """
    pos = start
    while True:
        opener = _VAR_OPEN.search(value, pos)
        if opener is None:
            return
        ref = _match_reference(value, opener.start(), opener.end())
        if ref is None:
            pos = opener.end()
            continue
        yield ref
        pos = ref.end


def contains_var_reference(value: str) -> bool:
    return next(find_var_references(value), None) is not None


def parse_var_expression(value: str) -> VarExpression | None:
    """Parse a value that is exactly one ``var()`` call.

    Returns ``None`` when the value is not a single ``var()`` expression.
    An empty fallback (``var(--x,)``) is reported as no fallback.
    """
    stripped = value.strip()
    ref = next(find_var_references(stripped), None)
    if ref is None or ref.start != 0 or ref.end != len(stripped):
        return None
    return VarExpression(name=ref.name, fallback=ref.fallback or None, raw_value=value)


def class_tokens(selector: str) -> set[str]:
    return set(_CLASS_TOKEN.findall(selector))


def selector_contains(context_selector: str, scope_selector: str) -> bool:
    """Approximate "``context_selector`` is at or under ``scope_selector``".

    Uses class-token containment: the context must carry every class token
    of the scope. This is not ancestry matching. Two unrelated selectors
    with the same class tokens are treated as nested, and a scope without
    class tokens contains every context.
    """
    return class_tokens(scope_selector) <= class_tokens(context_selector)


def qualifiers_match(required: frozenset[str], active: frozenset[str]) -> bool:
    """Every required qualifier must be active; no requirement always matches."""
    if not required:
        return True
    if not active:
        return False
    return required <= active


def _definition_rank(definition: VariableDefinition) -> tuple[int, int, int, int]:
    return (*definition.specificity.as_tuple(), definition.source_order)


# =============================================================================
# Registry
# =============================================================================


class VariableRegistry:
    """Run-scoped store of custom-property definitions.

    Not safe for concurrent mutation; use one instance per run and finish
    every ``register`` call before the first ``resolve``.
    """

    def __init__(
        self,
        max_substitutions: int = MAX_SUBSTITUTIONS,
        reporter: Reporter | None = None,
    ):
        """
        Initialize an empty registry.

        Args:
            max_substitutions: Cap on var() occurrences processed per value
            reporter: Optional reporter that tallies resolution warnings
        """
        if max_substitutions < 1:
            raise ValueError("max_substitutions must be at least 1")
        self.max_substitutions = max_substitutions
        self.reporter = reporter
        self._variables: dict[str, list[VariableDefinition]] = {}
        self._cache: dict[tuple[str, str, tuple[str, ...]], str] = {}
        self._in_flight: set[str] = set()

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(self, definition: VariableDefinition) -> None:
        """Add a definition and invalidate every cached resolution."""
        definitions = self._variables.setdefault(definition.name, [])
        definitions.append(definition)
        definitions.sort(key=_definition_rank, reverse=True)
        self._cache.clear()
        logger.debug(
            "Registered %s = %r (scope=%s, specificity=%s, order=%d)",
            definition.name,
            definition.value,
            definition.scope.selector or ":root",
            definition.specificity,
            definition.source_order,
        )

    def register_all(self, definitions: Iterable[VariableDefinition]) -> None:
        for definition in definitions:
            self.register(definition)

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    @contextmanager
    def _resolving(self, name: str) -> Iterator[None]:
        self._in_flight.add(name)
        try:
            yield
        finally:
            self._in_flight.discard(name)

    def _warn(self, kind: str, message: str) -> None:
        logger.warning(message)
        if self.reporter is not None:
            self.reporter.record_warning(kind, message)

    def resolve(
        self,
        name: str,
        context: ResolutionContext,
        fallback: str | None = None,
    ) -> Resolution:
        """Resolve ``name`` to a literal value at the use site ``context``.

        Args:
            name: Custom property name, including ``--``
            context: Use-site selector and active qualifiers
            fallback: Fallback text from ``var(--name, fallback)``, if any

        Returns:
            Resolution describing the value and how it was reached
        """
        resolution = self._resolve(name, context, fallback)
        if self.reporter is not None:
            self.reporter.record_resolution(resolution)
        return resolution

    def _resolve(
        self, name: str, context: ResolutionContext, fallback: str | None
    ) -> Resolution:
        cache_key = context.cache_key(name)
        cached = self._cache.get(cache_key)
        if cached is not None:
            return Resolution(cached, True, ResolutionSource.CACHE)

        if name in self._in_flight:
            self._warn("circular", f"Circular reference detected for variable: {name}")
            return Resolution(fallback or "", False, ResolutionSource.CIRCULAR)

        with self._resolving(name):
            definitions = self._variables.get(name)
            if not definitions:
                if fallback is not None:
                    return self._resolve_fallback(fallback, context)
                self._warn("undefined", f"Undefined CSS variable: {name}")
                return Resolution("", False, ResolutionSource.UNDEFINED)

            winner = next((d for d in definitions if self.is_applicable(d, context)), None)
            if winner is None:
                if fallback is not None:
                    return self._resolve_fallback(fallback, context)
                self._warn(
                    "no-match",
                    f"No applicable definition for variable: {name} in context: {context.selector}",
                )
                return Resolution("", False, ResolutionSource.NO_MATCH)

            nested = self.resolve_value(winner.value, context)
            if nested.is_circular:
                return Resolution(nested.value, False, ResolutionSource.CIRCULAR)
            if nested.has_unresolved:
                return Resolution(nested.value, False, ResolutionSource.UNRESOLVED)

            self._cache[cache_key] = nested.value
            return Resolution(nested.value, True, ResolutionSource.RESOLVED)

    def _resolve_fallback(self, fallback: str, context: ResolutionContext) -> Resolution:
        # A supplied fallback always counts as resolved, even if it still holds references
        nested = self.resolve_value(fallback, context)
        return Resolution(nested.value, True, ResolutionSource.FALLBACK)

    def resolve_value(self, value: str, context: ResolutionContext) -> ValueResolution:
        """Substitute every ``var()`` reference inside ``value``.

        Scanning resumes at the start of each substitution, so references
        inside the substituted text are picked up. Text before it holds only
        occurrences already found unresolved and is not scanned again. An
        occurrence that cannot be resolved is left in place and scanning
        continues after it. Processing stops after ``max_substitutions``
        occurrences.
        """
        result = value
        has_unresolved = False
        search_from = 0
        iterations = 0

        while True:
            ref = next(find_var_references(result, search_from), None)
            if ref is None:
                break

            iterations += 1
            if iterations > self.max_substitutions:
                self._warn("depth", f"Max variable resolution depth reached for: {value}")
                has_unresolved = True
                break

            outcome = self.resolve(ref.name, context, ref.fallback)

            if outcome.source == ResolutionSource.CIRCULAR:
                return ValueResolution(outcome.value, has_unresolved=True, is_circular=True)

            if outcome.resolved:
                result = result[: ref.start] + outcome.value + result[ref.end :]
                search_from = ref.start
            else:
                has_unresolved = True
                search_from = ref.end

        return ValueResolution(result, has_unresolved=has_unresolved)

    # -------------------------------------------------------------------------
    # Applicability
    # -------------------------------------------------------------------------

    def is_applicable(self, definition: VariableDefinition, context: ResolutionContext) -> bool:
        """Check whether ``definition`` can take effect at ``context``."""
        if definition.scope.is_global:
            return qualifiers_match(definition.qualifiers, context.qualifiers)

        scope_selector = definition.scope.selector or ""
        if scope_selector == context.selector or selector_contains(
            context.selector, scope_selector
        ):
            return qualifiers_match(definition.qualifiers, context.qualifiers)
        return False

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    def has_variable(self, name: str) -> bool:
        return name in self._variables

    def get_variable_definitions(self, name: str) -> list[VariableDefinition]:
        """Definitions for ``name``, highest ranking first."""
        return list(self._variables.get(name, []))

    def get_registered_variables(self) -> list[str]:
        return list(self._variables)

    def clear(self) -> None:
        """Drop every definition, cached value and in-flight marker."""
        self._variables.clear()
        self._cache.clear()
        self._in_flight.clear()

    def __len__(self) -> int:
        return len(self._variables)

    def __contains__(self, name: object) -> bool:
        return name in self._variables


__all__ = [
    "CUSTOM_PROPERTY_PREFIX",
    "MAX_SUBSTITUTIONS",
    "Resolution",
    "ResolutionContext",
    "ResolutionSource",
    "ScopeKind",
    "ValueResolution",
    "VarExpression",
    "VarReference",
    "VariableDefinition",
    "VariableRegistry",
    "VariableScope",
    "class_tokens",
    "contains_var_reference",
    "find_var_references",
    "is_custom_property",
    "parse_var_expression",
    "qualifiers_match",
    "selector_contains",
]
