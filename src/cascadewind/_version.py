"""Version lookup for cascadewind."""

from __future__ import annotations

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"
_UNKNOWN_VERSION = "0.0.0"


def get_version() -> str:
    """Return the cascadewind version.

    A source checkout reads ``[project].version`` from its pyproject.toml so
    edits show up without reinstalling. Otherwise the installed distribution
    metadata is used.
    """
    if _PYPROJECT.is_file():
        with _PYPROJECT.open("rb") as f:
            project = tomllib.load(f).get("project", {})
        if project.get("name") == "cascadewind" and "version" in project:
            return str(project["version"])
    try:
        return version("cascadewind")
    except PackageNotFoundError:
        return _UNKNOWN_VERSION
