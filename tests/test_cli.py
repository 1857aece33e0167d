"""Tests for the typer CLI."""

import json
from types import SimpleNamespace

import pytest
from typer.testing import CliRunner

from faceitlens import __version__, cli
from faceitlens.core.errors import ErrorKind, ErrorResult
from faceitlens.core.schemas import (
    AggregatedRecentStats,
    GameInfo,
    LifetimeStats,
    PlayerProfile,
    PlayerStatsBundle,
)

runner = CliRunner()


def make_bundle():
    return PlayerStatsBundle(
        player=PlayerProfile(
            player_id="p-1",
            nickname="s1mple",
            country="ua",
            steam_id_64="76561198034202275",
            faceit_url="https://www.faceit.com/en/players/s1mple",
            games={"cs2": GameInfo(faceit_elo=3100, skill_level=10, region="EU")},
        ),
        lifetime=LifetimeStats(
            lifetime={"Average K/D Ratio": "1.31", "Matches": "1500", "Win Rate %": "56"},
        ),
        recent_aggregated=AggregatedRecentStats(
            matches=10, wins=6, win_rate=60.0, kd=1.25, headshot_percent=45.0, adr=82.3
        ),
        adr=82.3,
        map_segments=[{"label": "Mirage", "stats": {"Matches": "300", "Win Rate %": "58"}}],
    )


class StubService:
    default_match_limit = 30

    def __init__(self, result):
        self.result = result
        self.calls = []
        self.languages = []

    async def get_player_stats_bundle(self, raw_query, recent_match_limit=None, language=None):
        self.calls.append((raw_query, recent_match_limit))
        self.languages.append(language)
        return self.result


@pytest.fixture
def stub(monkeypatch):
    service = StubService(make_bundle())
    monkeypatch.setattr(
        cli, "PlayerStatsService", SimpleNamespace(from_config=lambda config: service)
    )
    return service


class TestVersion:
    def test_version(self):
        result = runner.invoke(cli.app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestLookupCommand:
    """Tests for `faceitlens lookup`."""

    def test_tables(self, stub):
        result = runner.invoke(cli.app, ["lookup", "s1mple", "--matches", "10"])

        assert result.exit_code == 0
        assert "s1mple" in result.output
        assert "Last 10 Matches" in result.output
        assert "Mirage" in result.output
        assert stub.calls == [("s1mple", 10)]

    def test_json(self, stub):
        result = runner.invoke(cli.app, ["lookup", "s1mple", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["player"]["nickname"] == "s1mple"
        assert stub.calls == [("s1mple", None)]

    def test_records_history(self, stub):
        runner.invoke(cli.app, ["lookup", "s1mple"])
        history = cli._get_history()

        assert [e.input for e in history.entries()] == ["s1mple"]
        assert history.get_last_search()["matchesLimit"] == 30

    def test_no_history(self, stub):
        runner.invoke(cli.app, ["lookup", "s1mple", "--no-history"])
        assert cli._get_history().entries() == []

    def test_error(self, monkeypatch):
        service = StubService(
            ErrorResult(ErrorKind.PLAYER_NOT_FOUND, "No FACEIT player with this nickname")
        )
        monkeypatch.setattr(
            cli, "PlayerStatsService", SimpleNamespace(from_config=lambda config: service)
        )

        result = runner.invoke(cli.app, ["lookup", "nobody"])

        assert result.exit_code == 1
        assert "No FACEIT player with this nickname" in result.output
        assert cli._get_history().entries() == []

    def test_limit_validated(self, stub):
        result = runner.invoke(cli.app, ["lookup", "s1mple", "--matches", "500"])
        assert result.exit_code != 0
        assert stub.calls == []

    def test_language_option(self, stub):
        result = runner.invoke(cli.app, ["lookup", "s1mple", "--lang", "RU"])

        assert result.exit_code == 0
        assert stub.languages == ["ru"]

    def test_unsupported_language_option(self, stub):
        result = runner.invoke(cli.app, ["lookup", "s1mple", "--lang", "xx"])

        assert result.exit_code == 1
        assert "Unsupported language" in result.output
        assert stub.calls == []

    def test_saved_language_used(self, stub):
        cli._get_history().set_language("de")

        runner.invoke(cli.app, ["lookup", "s1mple"])

        assert stub.languages == ["de"]

    def test_default_language(self, stub):
        runner.invoke(cli.app, ["lookup", "s1mple"])
        assert stub.languages == ["en"]


class TestHistoryCommand:
    """Tests for `faceitlens history`."""

    def test_empty(self):
        result = runner.invoke(cli.app, ["history"])
        assert result.exit_code == 0
        assert "empty" in result.output

    def test_list_and_clear(self):
        cli._get_history().add("s1mple", player_name="s1mple")

        listed = runner.invoke(cli.app, ["history"])
        assert "s1mple" in listed.output

        cleared = runner.invoke(cli.app, ["history", "--clear"])
        assert cleared.exit_code == 0
        assert cli._get_history().entries() == []

    def test_remove_missing(self):
        result = runner.invoke(cli.app, ["history", "--remove", "nobody"])
        assert result.exit_code == 1


class TestLastCommand:
    """Tests for `faceitlens last`."""

    def test_no_recent_search(self):
        result = runner.invoke(cli.app, ["last"])
        assert result.exit_code == 0
        assert "No recent search" in result.output

    def test_shows_stored_lookup(self, stub):
        runner.invoke(cli.app, ["lookup", "s1mple", "--matches", "10"])

        result = runner.invoke(cli.app, ["last"])

        assert result.exit_code == 0
        assert "Last Search" in result.output
        assert "s1mple" in result.output
        assert "Last 10 Matches" in result.output
        assert len(stub.calls) == 1

    def test_json(self, stub):
        runner.invoke(cli.app, ["lookup", "s1mple"])

        result = runner.invoke(cli.app, ["last", "--json"])

        data = json.loads(result.output)
        assert data["input"] == "s1mple"
        assert data["stats"]["player"]["nickname"] == "s1mple"

    def test_clear(self, stub):
        runner.invoke(cli.app, ["lookup", "s1mple"])

        result = runner.invoke(cli.app, ["last", "--clear"])

        assert result.exit_code == 0
        assert cli._get_history().get_last_search() is None


class TestLangCommand:
    """Tests for `faceitlens lang`."""

    def test_show_default(self):
        result = runner.invoke(cli.app, ["lang"])
        assert result.exit_code == 0
        assert "Profile language: en" in result.output

    def test_set(self):
        result = runner.invoke(cli.app, ["lang", "ZH"])

        assert result.exit_code == 0
        assert "zh" in result.output
        assert cli._get_history().get_language() == "zh"

    def test_set_unsupported(self):
        result = runner.invoke(cli.app, ["lang", "xx"])

        assert result.exit_code == 1
        assert cli._get_history().get_language() == "en"


class TestInfoCommand:
    def test_info(self):
        result = runner.invoke(cli.app, ["info"])
        assert result.exit_code == 0
        assert "FACEIT_API_KEY" in result.output


class TestInitConfigCommand:
    """Tests for `faceitlens init-config`."""

    def test_writes_yaml(self, tmp_path):
        path = tmp_path / "faceitlens.yaml"
        result = runner.invoke(cli.app, ["init-config", str(path)])

        assert result.exit_code == 0
        assert "faceit:" in path.read_text()

    def test_refuses_overwrite(self, tmp_path):
        path = tmp_path / "faceitlens.yaml"
        path.write_text("keep me")

        result = runner.invoke(cli.app, ["init-config", str(path)])

        assert result.exit_code == 1
        assert path.read_text() == "keep me"
