"""
Terminal output for marketbed commands, built on rich.

Colour follows the terminal: NO_COLOR disables it and FORCE_COLOR turns
it on for pipes and CI logs.
"""

from __future__ import annotations

import os
from typing import Iterable, Mapping

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

MARKETBED_THEME = Theme(
    {
        "success": "#A3BE8C",
        "heading": "#88C0D0 bold",
        "kind": "#B48EAD",
        "muted": "#D8DEE9",
    }
)

console = Console(
    theme=MARKETBED_THEME,
    force_terminal=os.environ.get("FORCE_COLOR") is not None,
    no_color=os.environ.get("NO_COLOR") is not None,
)


def success(message: str) -> None:
    console.print(f"[success]✓ {message}[/success]")


def header(title: str) -> None:
    console.print()
    console.rule(f"[heading]{title}[/heading]")


def resource_kind(name: str) -> str:
    """Registry prefix of a resource name; core contracts have none."""
    return name.split(":", 1)[0] if ":" in name else "contract"


def print_resource_groups(resources: Mapping[str, str], verbose: bool = False) -> None:
    """Print how many resources of each kind are registered."""
    counts: dict[str, int] = {}
    for name in resources:
        kind = resource_kind(name)
        counts[kind] = counts.get(kind, 0) + 1

    for kind, count in counts.items():
        console.print(f"  [success]✓[/success] [kind]{kind:<12}[/kind] {count} registered")

    if verbose:
        console.print()
        for name, handle in resources.items():
            console.print(f"  [muted]•[/muted] {name} [muted]{handle}[/muted]")


def print_table(title: str, columns: Iterable[str], rows: Iterable[Iterable[str]]) -> None:
    table = Table(title=title, title_style="heading")
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*row)
    console.print(table)
