"""
Run statistics for a conversion run.

The reporter tallies non-fatal outcomes (unresolved variables, skipped
selectors, discarded conflict losers) so the caller can summarise a run
without aborting on any single warning.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from rich.console import Console
from rich.table import Table

from .conflicts import ConflictResult
from .variables import Resolution


@dataclass
class SummaryStats:
    """Counters accumulated over one run."""

    variables_resolved: int = 0
    variables_unresolved: int = 0
    utilities_generated: int = 0
    conflicts_resolved: int = 0
    unsupported_selectors: int = 0
    warnings: int = 0
    warnings_by_kind: Counter[str] = field(default_factory=Counter)

    def to_dict(self) -> dict[str, Any]:
        return {
            "variables_resolved": self.variables_resolved,
            "variables_unresolved": self.variables_unresolved,
            "utilities_generated": self.utilities_generated,
            "conflicts_resolved": self.conflicts_resolved,
            "unsupported_selectors": self.unsupported_selectors,
            "warnings": self.warnings,
            "warnings_by_kind": dict(self.warnings_by_kind),
        }


class Reporter:
    """Collects warnings and counters for a run."""

    def __init__(self, console: Console | None = None, silent: bool = False):
        self.console = console or Console(stderr=True)
        self.silent = silent
        self.messages: list[tuple[str, str]] = []
        self._stats = SummaryStats()

    def record_warning(self, kind: str, message: str) -> None:
        self._stats.warnings += 1
        self._stats.warnings_by_kind[kind] += 1
        self.messages.append((kind, message))

    def record_resolution(self, resolution: Resolution) -> None:
        if resolution.resolved:
            self._stats.variables_resolved += 1
        else:
            self._stats.variables_unresolved += 1

    def record_utilities(self, count: int = 1) -> None:
        self._stats.utilities_generated += count

    def record_conflicts(self, result: ConflictResult) -> None:
        self._stats.conflicts_resolved += len(result.conflicts)

    def record_unsupported_selector(self, count: int = 1) -> None:
        self._stats.unsupported_selectors += count

    def get_stats(self) -> SummaryStats:
        """Return a copy of the current counters."""
        stats = self._stats
        return SummaryStats(
            variables_resolved=stats.variables_resolved,
            variables_unresolved=stats.variables_unresolved,
            utilities_generated=stats.utilities_generated,
            conflicts_resolved=stats.conflicts_resolved,
            unsupported_selectors=stats.unsupported_selectors,
            warnings=stats.warnings,
            warnings_by_kind=Counter(stats.warnings_by_kind),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self._stats.variables_unresolved == 0,
            "summary": self._stats.to_dict(),
            "warnings": [{"kind": kind, "message": msg} for kind, msg in self.messages],
        }

    def print_summary(self) -> None:
        if self.silent:
            return

        stats = self._stats
        table = Table(title="Summary", show_header=False, box=None)
        table.add_column("Metric", style="bright_black")
        table.add_column("Count", justify="right")
        table.add_row("Variables resolved", f"[green]{stats.variables_resolved}[/green]")
        if stats.variables_unresolved:
            table.add_row("Variables unresolved", f"[yellow]{stats.variables_unresolved}[/yellow]")
        table.add_row("Utilities generated", str(stats.utilities_generated))
        table.add_row("Conflicts resolved", str(stats.conflicts_resolved))
        if stats.unsupported_selectors:
            table.add_row(
                "Unsupported selectors", f"[yellow]{stats.unsupported_selectors}[/yellow]"
            )
        for kind, count in sorted(stats.warnings_by_kind.items()):
            table.add_row(f"Warnings ({kind})", f"[yellow]{count}[/yellow]")
        self.console.print(table)


__all__ = ["Reporter", "SummaryStats"]
