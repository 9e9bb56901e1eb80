"""
Engine configuration.

Settings are read from an explicit file path; finding that file is the
caller's job. Supported layouts:

* ``cascadewind.toml`` with a ``[cascadewind]`` table
* ``pyproject.toml`` with a ``[tool.cascadewind]`` table
* ``cascadewind.yaml`` / ``.yml`` with a top-level ``cascadewind`` mapping

Example ``cascadewind.toml``::

    [cascadewind]
    max_substitutions = 12
    extra_variants = ["print"]

    [cascadewind.screens]
    tablet = "640px"
    laptop = "1024px"
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .breakpoints import Breakpoint, resolve_breakpoints
from .errors import make_config_error
from .reporter import Reporter
from .variables import MAX_SUBSTITUTIONS, VariableRegistry
from .variants import build_variant_order

logger = logging.getLogger(__name__)

CONFIG_SECTION = "cascadewind"


class EngineConfig(BaseModel):
    """Tunable settings for the resolution engine."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_substitutions: int = Field(
        default=MAX_SUBSTITUTIONS,
        ge=1,
        le=1000,
        description="Cap on var() occurrences processed for a single value",
    )
    screens: dict[str, str | list[str]] | None = Field(
        default=None,
        description="Custom breakpoints, e.g. {'tablet': '640px'}",
    )
    extra_variants: list[str] = Field(
        default_factory=list,
        description="Variants ordered after the built-in ones",
    )
    strict_mode: bool = Field(
        default=False,
        description="Treat unresolved variables as failures in reports",
    )
    verbose: bool = Field(default=False, description="Log debug diagnostics")
    silent: bool = Field(default=False, description="Only log errors")

    def breakpoints(self) -> list[Breakpoint]:
        return resolve_breakpoints(self.screens)

    def variant_order(self) -> tuple[str, ...]:
        return build_variant_order([bp.name for bp in self.breakpoints()], self.extra_variants)

    def create_registry(self, reporter: Reporter | None = None) -> VariableRegistry:
        return VariableRegistry(max_substitutions=self.max_substitutions, reporter=reporter)


def _read_file(path: Path) -> dict[str, Any]:
    content = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise make_config_error(f"Invalid YAML: {e}", path) from e
    else:
        try:
            data = tomllib.loads(content)
        except tomllib.TOMLDecodeError as e:
            raise make_config_error(f"Invalid TOML: {e}", path) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise make_config_error("Configuration root must be a mapping", path)
    return data


def _extract_section(data: dict[str, Any], path: Path) -> tuple[dict[str, Any], str]:
    if path.name == "pyproject.toml":
        return data.get("tool", {}).get(CONFIG_SECTION, {}), f"tool.{CONFIG_SECTION}"
    return data.get(CONFIG_SECTION, {}), CONFIG_SECTION


def load_config(path: Path) -> EngineConfig:
    """Load an ``EngineConfig`` from ``path``.

    A file without a cascadewind section yields the defaults.

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid settings.
    """
    try:
        data = _read_file(path)
    except OSError as e:
        raise make_config_error(f"Cannot read configuration: {e}", path) from e

    section, key = _extract_section(data, path)
    if not section:
        logger.debug("No [%s] settings in %s, using defaults", key, path)
        return EngineConfig()

    try:
        return EngineConfig.model_validate(section)
    except ValidationError as e:
        raise make_config_error(f"Invalid settings: {e}", path, key) from e


__all__ = ["CONFIG_SECTION", "EngineConfig", "load_config"]
