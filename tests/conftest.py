"""Shared fixtures: isolated configuration and storage."""

import os

import pytest

from faceitlens.core.config import FaceitLensConfig, reset_config, set_config


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Every test starts from default config with no real keys or storage."""
    for var in list(os.environ):
        if var.startswith("FACEITLENS_") or var in ("FACEIT_API_KEY", "STEAM_API_KEY"):
            monkeypatch.delenv(var, raising=False)
    config = FaceitLensConfig()
    config.faceit.api_key = "test-faceit-key"
    config.history.path = str(tmp_path / "storage.json")
    set_config(config)
    yield config
    reset_config()
