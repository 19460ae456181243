"""Tests for the main CLI module."""

from __future__ import annotations

import pytest
import typer
from typer.testing import CliRunner

from code_engine_sdk import __version__


class TestCLIMain:
    """Test main CLI entry point."""

    @pytest.mark.unit
    def test_help_lists_commands(self, cli_runner: CliRunner, cli_app: typer.Typer) -> None:
        result = cli_runner.invoke(cli_app, ["--help"])
        assert result.exit_code == 0
        for command in ("kubeconfig", "projects", "status"):
            assert command in result.stdout

    @pytest.mark.unit
    def test_version_option(self, cli_runner: CliRunner, cli_app: typer.Typer) -> None:
        result = cli_runner.invoke(cli_app, ["--version"])
        assert result.exit_code == 0
        assert f"code-engine version {__version__}" in result.stdout

    @pytest.mark.unit
    def test_verbose_and_debug_flags_accepted(
        self, cli_runner: CliRunner, cli_app: typer.Typer
    ) -> None:
        result = cli_runner.invoke(cli_app, ["--verbose", "--debug", "status"])
        assert result.exit_code == 0
