"""Command line tests using typer's CliRunner against a mocked HTTP layer."""

from __future__ import annotations

import json
import os
from pathlib import Path

import httpx
import pytest
from typer.testing import CliRunner

from pbclient import __version__, app as app_module, config
from pbclient.app import app
from pbclient.client import Client
from pbclient.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONFIG_ERROR,
    EXIT_CONNECTION_ERROR,
    EXIT_NOT_FOUND,
)

runner = CliRunner()

_QUIET = ["--json", "--quiet", "--no-color"]


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Point the config lookup at an empty directory and drop PBCLIENT_* variables."""
    monkeypatch.setattr(config, "_is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    for name in list(os.environ):
        if name.startswith("PBCLIENT_"):
            monkeypatch.delenv(name)


@pytest.fixture
def use_handler(monkeypatch: pytest.MonkeyPatch):
    """Route every client the CLI builds to *handler* through MockTransport."""

    def _install(handler) -> None:
        monkeypatch.setattr(
            app_module,
            "Client",
            lambda options: Client(options, http_transport=httpx.MockTransport(handler)),
        )

    return _install


class TestVersion:
    def test_version_flag(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"pbclient {__version__}" in result.output


class TestRequests:
    def test_get_prints_json_body(self, use_handler, make_recorder) -> None:
        recorder = make_recorder(json={"data": [{"id": "f1"}]})
        use_handler(recorder)

        result = runner.invoke(app, [*_QUIET, "get", "/features"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"data": [{"id": "f1"}]}
        assert recorder.last.method == "GET"
        assert str(recorder.last.url) == "https://api.productboard.com/features"

    def test_status_line_is_shown_without_quiet(self, use_handler, make_recorder) -> None:
        use_handler(make_recorder(json={"ok": True}))
        result = runner.invoke(app, ["--json", "--no-color", "get", "/features"])
        assert result.exit_code == 0
        assert "HTTP 200 OK" in result.output

    def test_site_flag(self, use_handler, make_recorder) -> None:
        recorder = make_recorder(json={})
        use_handler(recorder)
        result = runner.invoke(app, [*_QUIET, "--site", "http://localhost:8080", "head", "/features"])
        assert result.exit_code == 0, result.output
        assert recorder.last.method == "HEAD"
        assert recorder.last.url.port == 8080

    def test_header_flag(self, use_handler, make_recorder) -> None:
        recorder = make_recorder(json={})
        use_handler(recorder)
        result = runner.invoke(app, [*_QUIET, "-H", "X-Trace: abc", "get", "/features"])
        assert result.exit_code == 0, result.output
        assert recorder.last.headers["X-Trace"] == "abc"

    def test_malformed_header_flag(self, use_handler, make_recorder) -> None:
        use_handler(make_recorder(json={}))
        result = runner.invoke(app, [*_QUIET, "-H", "no-colon", "get", "/features"])
        assert result.exit_code != 0

    def test_post_body(self, use_handler, make_recorder) -> None:
        recorder = make_recorder(status_code=201, json={"data": {"id": "f9"}})
        use_handler(recorder)

        result = runner.invoke(app, [*_QUIET, "post", "/features", "--body", '{"name": "Dark mode"}'])

        assert result.exit_code == 0, result.output
        assert recorder.last.method == "POST"
        assert recorder.last.headers["Content-Type"] == "application/json"
        assert json.loads(recorder.last.content) == {"name": "Dark mode"}

    def test_put_and_delete(self, use_handler, make_recorder) -> None:
        recorder = make_recorder(status_code=204)
        use_handler(recorder)

        assert runner.invoke(app, [*_QUIET, "put", "/features/1", "-d", "{}"]).exit_code == 0
        assert recorder.last.method == "PUT"
        assert runner.invoke(app, [*_QUIET, "delete", "/features/1"]).exit_code == 0
        assert recorder.last.method == "DELETE"

    def test_upload(self, use_handler, make_recorder, tmp_path: Path) -> None:
        recorder = make_recorder(json={"ok": True})
        use_handler(recorder)
        upload = tmp_path / "mockup.png"
        upload.write_bytes(b"PNGDATA")

        result = runner.invoke(app, [*_QUIET, "upload", "/attachments", str(upload)])

        assert result.exit_code == 0, result.output
        assert recorder.last.headers["Content-Type"].startswith("multipart/form-data")
        assert b"PNGDATA" in recorder.last.content

    def test_upload_missing_file(self, use_handler, make_recorder, tmp_path: Path) -> None:
        use_handler(make_recorder(json={}))
        result = runner.invoke(app, [*_QUIET, "upload", "/attachments", str(tmp_path / "absent")])
        assert result.exit_code != 0


class TestFailures:
    def test_not_found(self, use_handler, make_recorder) -> None:
        use_handler(make_recorder(status_code=404, json={"message": "Feature not found"}))
        result = runner.invoke(app, [*_QUIET, "get", "/features/missing"])
        assert result.exit_code == EXIT_NOT_FOUND
        assert "HTTP 404: Feature not found" in result.output

    def test_unauthorized(self, use_handler, make_recorder) -> None:
        use_handler(make_recorder(status_code=401))
        result = runner.invoke(app, [*_QUIET, "get", "/features"])
        assert result.exit_code == EXIT_AUTH_FAILURE

    def test_connection_error(self, use_handler) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        use_handler(refuse)
        result = runner.invoke(app, [*_QUIET, "get", "/features"])
        assert result.exit_code == EXIT_CONNECTION_ERROR
        assert "Connection failed" in result.output

    def test_unknown_option_in_config_file(self, use_handler, make_recorder, tmp_path: Path) -> None:
        use_handler(make_recorder(json={}))
        config_file = tmp_path / "options.json"
        config_file.write_text(json.dumps({"sight": "typo"}), encoding="utf-8")

        result = runner.invoke(app, [*_QUIET, "--config", str(config_file), "get", "/features"])

        assert result.exit_code == EXIT_CONFIG_ERROR
        assert "Unknown option(s) given: sight" in result.output

    def test_malformed_site_flag(self, use_handler, make_recorder) -> None:
        use_handler(make_recorder(json={}))
        result = runner.invoke(app, [*_QUIET, "--site", "http://[::1", "get", "/features"])
        assert result.exit_code == EXIT_CONFIG_ERROR
        assert "Invalid site" in result.output

    def test_environment_verify_mode_name(self, use_handler, make_recorder, monkeypatch) -> None:
        monkeypatch.setenv("PBCLIENT_SSL_VERIFY_MODE", "VERIFY_NONE")
        use_handler(make_recorder(json={}))
        result = runner.invoke(app, [*_QUIET, "get", "/features"])
        assert result.exit_code == 0, result.output

    def test_environment_is_applied(self, use_handler, make_recorder, monkeypatch) -> None:
        monkeypatch.setenv("PBCLIENT_SHARED_SECRET", "tok")
        recorder = make_recorder(json={})
        use_handler(recorder)
        result = runner.invoke(app, [*_QUIET, "get", "/features"])
        assert result.exit_code == 0, result.output
        assert recorder.last.headers["Authorization"] == "Bearer tok"
