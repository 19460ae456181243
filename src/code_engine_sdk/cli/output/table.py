"""Tables for CLI output."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from rich.table import Table as RichTable

from code_engine_sdk.code_engine_v2.models import Project


class Table(RichTable):
    """Rich table whose columns fold long values such as GUIDs onto several lines."""

    def add_column(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("overflow", "fold")
        super().add_column(*args, **kwargs)


def projects_table(projects: Iterable[Project], title: str = "Code Engine Projects") -> Table:
    """Render projects as name, GUID, region, status and resource group."""
    table = Table(title=title)
    table.add_column("Name", style="cyan")
    table.add_column("GUID", style="dim", no_wrap=True)
    table.add_column("Region")
    table.add_column("Status")
    table.add_column("Resource Group", style="dim")
    for project in projects:
        status = project.status or "-"
        if project.is_active:
            status = f"[green]{status}[/green]"
        table.add_row(
            project.name or "-",
            project.id or "-",
            project.region or "-",
            status,
            project.resource_group_id or "-",
        )
    return table
