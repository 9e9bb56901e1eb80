"""
cascadewind - CSS cascade resolution for utility-class conversion.

Resolves custom properties with cascade semantics and assembles
variant-prefixed utility classes for components converted from plain CSS.
"""

from __future__ import annotations

from ._version import get_version
from .core import (
    ResolutionContext,
    VariableDefinition,
    VariableRegistry,
    assemble_utility,
    calculate_specificity,
    merge_utilities,
    normalize_variant_order,
)
from .core.errors import CascadewindError, ConfigError, InvalidVariableError

__version__ = get_version()

__all__ = [
    "__version__",
    "CascadewindError",
    "ConfigError",
    "InvalidVariableError",
    "ResolutionContext",
    "VariableDefinition",
    "VariableRegistry",
    "assemble_utility",
    "calculate_specificity",
    "merge_utilities",
    "normalize_variant_order",
]
