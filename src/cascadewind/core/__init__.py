"""
Resolution engine: specificity, custom-property cascade, variant assembly.
"""

from .breakpoints import DEFAULT_BREAKPOINTS, Breakpoint, process_media_query, resolve_breakpoints
from .config import EngineConfig, load_config
from .conflicts import UtilityWithMeta, build_utility, resolve_conflicts
from .errors import CascadewindError, ConfigError, InvalidVariableError
from .pseudo import parse_selector, process_pseudo_selector
from .reporter import Reporter, SummaryStats
from .specificity import (
    ZERO_SPECIFICITY,
    Specificity,
    calculate_specificity,
    compare_specificity,
)
from .variables import (
    Resolution,
    ResolutionContext,
    ResolutionSource,
    ValueResolution,
    VariableDefinition,
    VariableRegistry,
    VariableScope,
    parse_var_expression,
)
from .variants import (
    MergedUtility,
    UtilityEntry,
    assemble_utility,
    merge_utilities,
    normalize_variant_order,
)

__all__ = [
    "Breakpoint",
    "CascadewindError",
    "ConfigError",
    "DEFAULT_BREAKPOINTS",
    "EngineConfig",
    "InvalidVariableError",
    "MergedUtility",
    "Reporter",
    "Resolution",
    "ResolutionContext",
    "ResolutionSource",
    "Specificity",
    "SummaryStats",
    "UtilityEntry",
    "UtilityWithMeta",
    "ValueResolution",
    "VariableDefinition",
    "VariableRegistry",
    "VariableScope",
    "ZERO_SPECIFICITY",
    "assemble_utility",
    "build_utility",
    "calculate_specificity",
    "compare_specificity",
    "load_config",
    "merge_utilities",
    "normalize_variant_order",
    "parse_selector",
    "parse_var_expression",
    "process_media_query",
    "process_pseudo_selector",
    "resolve_breakpoints",
    "resolve_conflicts",
]
