"""Tests for the faceitlens-web entry point."""

import os

import pytest

from faceitlens import server


@pytest.fixture
def run_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(
        server.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs))
    )
    # Restored after the test even though main() writes it
    monkeypatch.setenv("FACEITLENS_CONFIG", "")
    return calls


class TestServerMain:
    """Tests for server.main argument handling."""

    def test_defaults(self, run_calls):
        server.main([])

        [(app, kwargs)] = run_calls
        assert app == server.APP_PATH
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 7860
        assert kwargs["workers"] == 1
        assert kwargs["log_level"] == "info"

    def test_config_passed_to_workers(self, run_calls, tmp_path):
        path = tmp_path / "faceitlens.yaml"
        path.write_text("logging:\n  level: WARNING\n")

        server.main(["--port", "8000", "--workers", "4", "--config", str(path)])

        [(_, kwargs)] = run_calls
        assert kwargs["port"] == 8000
        assert kwargs["workers"] == 4
        assert kwargs["log_level"] == "warning"
        assert os.environ["FACEITLENS_CONFIG"] == str(path.resolve())

    def test_missing_config(self, run_calls, tmp_path):
        with pytest.raises(SystemExit):
            server.main(["--config", str(tmp_path / "missing.yaml")])
        assert run_calls == []

    def test_reload_forces_single_worker(self, run_calls):
        server.main(["--reload", "--workers", "4", "--log-level", "debug"])

        [(_, kwargs)] = run_calls
        assert kwargs["reload"] is True
        assert kwargs["workers"] == 1
        assert kwargs["log_level"] == "debug"
