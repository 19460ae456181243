"""Shared pytest fixtures for code_engine_sdk tests."""

from __future__ import annotations

import logging
import os
import threading
import time
from collections.abc import Generator
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any

import pytest
import typer
from typer.testing import CliRunner

from code_engine_sdk.cli.main import app

ENV_PREFIXES = ("CE_", "CODE_ENGINE_", "IBM_CLOUD_CODE_ENGINE_")
ENV_NAMES = ("IAM_ENDPOINT", "RESOURCECONTROLLER_ENDPOINT")


@dataclass
class CannedResponse:
    """What the local server answers, and what it saw."""

    status: int = 200
    body: bytes = b"OperationResponse"
    content_type: str = "text/plain"
    delay: float = 0.0
    requests: list[dict[str, Any]] = field(default_factory=list)


class LocalServer:
    """Threaded HTTP server on 127.0.0.1 serving one canned response."""

    def __init__(self) -> None:
        self.canned = CannedResponse()
        canned = self.canned

        class Handler(BaseHTTPRequestHandler):
            def _respond(self) -> None:
                length = int(self.headers.get("Content-Length") or 0)
                canned.requests.append(
                    {
                        "method": self.command,
                        "path": self.path,
                        "headers": dict(self.headers.items()),
                        "body": self.rfile.read(length) if length else b"",
                    }
                )
                if canned.delay:
                    time.sleep(canned.delay)
                self.send_response(canned.status)
                self.send_header("Content-Type", canned.content_type)
                self.send_header("Content-Length", str(len(canned.body)))
                self.end_headers()
                self.wfile.write(canned.body)

            do_GET = _respond
            do_POST = _respond
            do_PATCH = _respond
            do_DELETE = _respond

            def log_message(self, format: str, *args: Any) -> None:
                return None

        self._server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
        self._server.daemon_threads = True
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)

    @property
    def url(self) -> str:
        host, port = self._server.server_address[:2]
        return f"http://{host}:{port}"

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._server.shutdown()
        self._server.server_close()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_app() -> typer.Typer:
    """Return the CLI app for testing."""
    return app


@pytest.fixture
def local_server() -> Generator[LocalServer]:
    """Start a local HTTP server for the duration of a test."""
    server = LocalServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove Code Engine configuration from the environment for each test."""
    for key in list(os.environ.keys()):
        if key.startswith(ENV_PREFIXES) or key in ENV_NAMES:
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def isolated_logging(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Keep log files in a temporary directory and restore root handlers."""
    monkeypatch.setattr("code_engine_sdk.logging.config.LOG_DIR", tmp_path / "logs")
    monkeypatch.setattr(
        "code_engine_sdk.logging.config.LOG_FILE", tmp_path / "logs" / "code-engine.log"
    )
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    yield
    for handler in root.handlers:
        if handler not in original_handlers:
            handler.close()
    root.handlers = original_handlers


@pytest.fixture
def capture_logs(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Fixture to capture log output."""
    caplog.set_level(logging.DEBUG)
    return caplog
