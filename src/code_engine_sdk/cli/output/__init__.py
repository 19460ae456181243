"""Rendering helpers for CLI output."""

from code_engine_sdk.cli.output.table import Table, projects_table

__all__ = ["Table", "projects_table"]
