"""
cascadewind developer CLI.

Thin commands over the resolution engine for inspecting how selectors,
media queries and custom properties resolve:

- specificity: rank one or more selectors
- assemble: render a utility with its variants in canonical order
- media: map @media parameters to a breakpoint
- pseudo: map a pseudo selector to class + variant
- resolve: substitute var() references against a definitions file
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import typer

from cascadewind._version import get_version
from cascadewind.core.breakpoints import process_media_query
from cascadewind.core.config import EngineConfig, load_config
from cascadewind.core.errors import CascadewindError
from cascadewind.core.pseudo import process_pseudo_selector
from cascadewind.core.reporter import Reporter
from cascadewind.core.specificity import calculate_specificity
from cascadewind.core.variables import ResolutionContext, VariableDefinition, VariableRegistry
from cascadewind.core.variants import assemble_utility
from cascadewind.log import setup_logging

app = typer.Typer(
    help="cascadewind - inspect CSS cascade resolution for utility-class conversion",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"cascadewind {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug diagnostics"),
    silent: bool = typer.Option(False, "--silent", "-s", help="Only log errors"),
) -> None:
    """cascadewind CLI main callback for global options."""
    setup_logging(verbose=verbose, silent=silent)


@app.command(name="specificity")
def specificity_command(
    selectors: list[str] = typer.Argument(..., help="Selectors to rank"),
) -> None:
    """Print the (id, class, type) specificity of each selector."""
    for selector in selectors:
        typer.echo(f"{calculate_specificity(selector)}  {selector}")


@app.command(name="assemble")
def assemble_command(
    value: str = typer.Argument(..., help="Bare utility, e.g. 'flex'"),
    qualifiers: list[str] | None = typer.Option(
        None, "--qualifier", "-q", help="Variant to apply (repeatable)"
    ),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Engine config file"),
) -> None:
    """Render a utility with its variants in canonical order."""
    config = _load_config_or_exit(config_path)
    typer.echo(assemble_utility(value, qualifiers or [], config.variant_order()))


@app.command(name="media")
def media_command(
    params: str = typer.Argument(..., help="@media parameters, e.g. '(min-width: 768px)'"),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Engine config file"),
) -> None:
    """Map @media parameters to a breakpoint variant."""
    config = _load_config_or_exit(config_path)
    match = process_media_query(params, config.breakpoints())
    if match.skipped:
        typer.echo(match.reason, err=True)
        raise typer.Exit(code=1)
    typer.echo(match.breakpoint)


@app.command(name="pseudo")
def pseudo_command(
    selector: str = typer.Argument(..., help="Selector such as '.button:hover'"),
) -> None:
    """Map a pseudo selector to its class and variants."""
    match = process_pseudo_selector(selector)
    if match.skipped:
        typer.echo(match.reason, err=True)
        raise typer.Exit(code=1)
    typer.echo(f"{match.base_class} {':'.join(match.variants) or '(base)'}")


@app.command(name="resolve")
def resolve_command(
    definitions_path: Path = typer.Argument(..., help="JSON file listing custom properties"),
    value: str = typer.Argument(..., help="Value to resolve, e.g. 'var(--gap) 0'"),
    selector: str = typer.Option(":root", "--selector", help="Use-site selector"),
    qualifiers: list[str] | None = typer.Option(
        None, "--qualifier", "-q", help="Active variant at the use site (repeatable)"
    ),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Engine config file"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """Resolve var() references in VALUE.

    The definitions file is a JSON list of objects with ``name``, ``value``
    and optional ``selector`` and ``qualifiers`` keys. List order is the
    source order.
    """
    config = _load_config_or_exit(config_path)
    reporter = Reporter(silent=as_json or config.silent)
    registry = config.create_registry(reporter)

    try:
        _register_from_file(registry, definitions_path)
    except (OSError, ValueError, KeyError, TypeError, CascadewindError) as e:
        typer.echo(f"Error loading definitions: {e}", err=True)
        raise typer.Exit(code=1)

    context = ResolutionContext(selector=selector, qualifiers=frozenset(qualifiers or []))
    result = registry.resolve_value(value, context)
    failed = result.has_unresolved and config.strict_mode

    if as_json:
        payload: dict[str, Any] = {
            "value": result.value,
            "has_unresolved": result.has_unresolved,
            "is_circular": result.is_circular,
            "report": reporter.to_dict(),
        }
        typer.echo(json.dumps(payload, indent=2))
    else:
        typer.echo(result.value)
        reporter.print_summary()

    if failed:
        raise typer.Exit(code=1)


def _register_from_file(registry: VariableRegistry, path: Path) -> None:
    entries = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(entries, list):
        raise ValueError("expected a JSON list of definitions")
    for order, entry in enumerate(entries):
        registry.register(
            VariableDefinition.from_declaration(
                name=entry["name"],
                value=entry["value"],
                selector=entry.get("selector"),
                source_order=order,
                qualifiers=entry.get("qualifiers", []),
            )
        )


def _load_config_or_exit(path: Path | None) -> EngineConfig:
    if path is None:
        return EngineConfig()
    try:
        return load_config(path)
    except CascadewindError as e:
        typer.echo(f"Error loading config: {e}", err=True)
        raise typer.Exit(code=1)


def main(argv: list[str] | None = None) -> None:
    app(args=argv if argv is not None else sys.argv[1:], standalone_mode=True)


if __name__ == "__main__":
    main()
