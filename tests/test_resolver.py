"""Tests for identity resolution: input parsing and the lookup chain."""

import asyncio

import pytest
from fakes import FakeFaceit, FakeSteam

from faceitlens.core.errors import (
    InvalidInputError,
    NotFoundError,
    NotFoundStage,
    UpstreamAuthError,
    UpstreamRateLimitError,
)
from faceitlens.resolver import (
    IdentityResolver,
    StageOutcome,
    StageResult,
    extract_profile_url_id,
    extract_steam_id,
    extract_vanity_handle,
    lookup_platform_stage,
    parse_query,
    resolve_vanity_stage,
)

STEAM_ID = "76561198012345678"
OTHER_ID = "76561198087654321"


class TestExtractSteamId:
    """Tests for the standalone 17-digit run."""

    def test_bare_id(self):
        assert extract_steam_id(STEAM_ID) == STEAM_ID

    def test_id_inside_text(self):
        assert extract_steam_id(f"my steam is {STEAM_ID}, add me") == STEAM_ID

    def test_longer_digit_run_is_ignored(self):
        """An 18-digit number does not contain a standalone Steam ID."""
        assert extract_steam_id(STEAM_ID + "9") is None

    def test_shorter_digit_run_is_ignored(self):
        assert extract_steam_id("1234567890") is None


class TestExtractProfileUrlId:
    """Tests for steamcommunity.com/profiles/<id> URLs."""

    def test_https_url(self):
        url = f"https://steamcommunity.com/profiles/{STEAM_ID}"
        assert extract_profile_url_id(url) == STEAM_ID

    def test_trailing_slash(self):
        url = f"https://steamcommunity.com/profiles/{STEAM_ID}/"
        assert extract_profile_url_id(url) == STEAM_ID

    def test_missing_scheme(self):
        assert extract_profile_url_id(f"steamcommunity.com/profiles/{STEAM_ID}") == STEAM_ID

    def test_subdomain(self):
        url = f"https://www.steamcommunity.com/profiles/{STEAM_ID}"
        assert extract_profile_url_id(url) == STEAM_ID

    def test_other_host_rejected(self):
        assert extract_profile_url_id(f"https://example.com/profiles/{STEAM_ID}") is None

    def test_lookalike_host_rejected(self):
        url = f"https://notsteamcommunity.com/profiles/{STEAM_ID}"
        assert extract_profile_url_id(url) is None

    def test_vanity_url_has_no_profile_id(self):
        assert extract_profile_url_id("https://steamcommunity.com/id/gabe") is None


class TestExtractVanityHandle:
    """Tests for steamcommunity.com/id/<handle> URLs."""

    def test_vanity_url(self):
        assert extract_vanity_handle("https://steamcommunity.com/id/gabe") == "gabe"

    def test_trailing_slash_and_no_scheme(self):
        assert extract_vanity_handle("steamcommunity.com/id/gabe/") == "gabe"

    def test_empty_handle(self):
        assert extract_vanity_handle("https://steamcommunity.com/id/") is None

    def test_nested_path_rejected(self):
        assert extract_vanity_handle("https://steamcommunity.com/id/gabe/games") is None

    def test_plain_nickname(self):
        assert extract_vanity_handle("s1mple") is None


class TestParseQuery:
    """Tests for classifying raw input."""

    @pytest.mark.parametrize("raw", ["", "   ", None])
    def test_empty_input_rejected(self, raw):
        with pytest.raises(InvalidInputError):
            parse_query(raw)

    def test_bare_id_and_profile_url_are_equivalent(self):
        bare = parse_query(STEAM_ID)
        url = parse_query(f"https://steamcommunity.com/profiles/{STEAM_ID}/")
        assert bare.identifier == url.identifier
        assert bare.steam_id == STEAM_ID

    def test_vanity(self):
        parsed = parse_query("https://steamcommunity.com/id/gabe")
        assert parsed.vanity_handle == "gabe"
        assert parsed.steam_id is None

    def test_nickname_is_trimmed(self):
        parsed = parse_query("  s1mple  ")
        assert parsed.identifier is None
        assert parsed.text == "s1mple"

    def test_conflicting_ids_rejected(self):
        """A /profiles/ id that differs from a 17-digit run elsewhere is ambiguous."""
        raw = f"https://steamcommunity.com/profiles/7656119801234567?ref={OTHER_ID}"
        with pytest.raises(InvalidInputError):
            parse_query(raw)


class TestStageResult:
    """Tests for the tagged stage outcome."""

    def test_unwrap_found(self):
        assert StageResult.found("abc").unwrap() == "abc"

    def test_unwrap_not_found_raises_carried_error(self):
        error = NotFoundError(stage=NotFoundStage.NICKNAME)
        with pytest.raises(NotFoundError) as exc_info:
            StageResult.not_found(error).unwrap()
        assert exc_info.value is error

    def test_unwrap_failed(self):
        with pytest.raises(UpstreamRateLimitError):
            StageResult.failed(UpstreamRateLimitError()).unwrap()


class TestStages:
    """Tests for individual network stages."""

    def test_vanity_stage_without_client(self):
        result = asyncio.run(resolve_vanity_stage(None, "gabe"))
        assert result.outcome is StageOutcome.NOT_FOUND

    def test_vanity_stage_auth_error_is_fatal(self):
        steam = FakeSteam(vanity={"gabe": UpstreamAuthError("bad key")})
        result = asyncio.run(resolve_vanity_stage(steam, "gabe"))
        assert result.outcome is StageOutcome.ERROR
        assert isinstance(result.error, UpstreamAuthError)

    def test_vanity_stage_rate_limit_is_not_found(self):
        steam = FakeSteam(vanity={"gabe": UpstreamRateLimitError()})
        result = asyncio.run(resolve_vanity_stage(steam, "gabe"))
        assert result.outcome is StageOutcome.NOT_FOUND

    def test_platform_stage_empty_payload(self):
        faceit = FakeFaceit(platform={STEAM_ID: {}})
        result = asyncio.run(lookup_platform_stage(faceit, STEAM_ID))
        assert result.outcome is StageOutcome.NOT_FOUND
        assert result.error.stage is NotFoundStage.GENERIC


class TestIdentityResolver:
    """Tests for the full resolution chain."""

    def test_bare_steam_id(self):
        faceit = FakeFaceit(platform={STEAM_ID: {"player_id": "p-1"}})
        resolver = IdentityResolver(faceit)
        assert asyncio.run(resolver.resolve(STEAM_ID)) == "p-1"
        assert faceit.calls == [("platform", STEAM_ID)]

    def test_profile_url_makes_same_calls_as_bare_id(self):
        bare = FakeFaceit(platform={STEAM_ID: {"player_id": "p-1"}})
        url = FakeFaceit(platform={STEAM_ID: {"player_id": "p-1"}})
        asyncio.run(IdentityResolver(bare).resolve(STEAM_ID))
        asyncio.run(
            IdentityResolver(url).resolve(f"https://steamcommunity.com/profiles/{STEAM_ID}")
        )
        assert bare.calls == url.calls

    def test_nickname(self):
        faceit = FakeFaceit(nicknames={"s1mple": {"player_id": "p-2"}})
        assert asyncio.run(IdentityResolver(faceit).resolve("  s1mple ")) == "p-2"
        assert faceit.calls == [("nickname", "s1mple")]

    def test_vanity_resolved_through_steam(self):
        faceit = FakeFaceit(platform={STEAM_ID: {"player_id": "p-3"}})
        steam = FakeSteam(vanity={"gabe": STEAM_ID})
        resolver = IdentityResolver(faceit, steam)

        assert asyncio.run(resolver.resolve("https://steamcommunity.com/id/gabe")) == "p-3"
        assert steam.calls == ["gabe"]
        assert faceit.calls == [("platform", STEAM_ID)]

    def test_vanity_failure_falls_back_to_full_text_nickname(self):
        url = "https://steamcommunity.com/id/gabe"
        faceit = FakeFaceit(nicknames={url: {"player_id": "p-4"}})
        resolver = IdentityResolver(faceit, FakeSteam())

        assert asyncio.run(resolver.resolve(url)) == "p-4"
        assert faceit.calls == [("nickname", url)]

    def test_vanity_without_steam_key_skips_steam(self):
        url = "https://steamcommunity.com/id/gabe"
        faceit = FakeFaceit(nicknames={url: {"player_id": "p-5"}})
        steam = FakeSteam(configured=False)

        assert asyncio.run(IdentityResolver(faceit, steam).resolve(url)) == "p-5"
        assert steam.calls == []

    def test_steam_auth_error_surfaces(self):
        faceit = FakeFaceit()
        steam = FakeSteam(vanity={"gabe": UpstreamAuthError("Steam key rejected")})
        resolver = IdentityResolver(faceit, steam)

        with pytest.raises(UpstreamAuthError):
            asyncio.run(resolver.resolve("https://steamcommunity.com/id/gabe"))
        assert faceit.calls == []

    def test_unlinked_steam_id_does_not_try_nickname(self):
        faceit = FakeFaceit()
        with pytest.raises(NotFoundError) as exc_info:
            asyncio.run(IdentityResolver(faceit).resolve(STEAM_ID))
        assert exc_info.value.stage is NotFoundStage.PLATFORM_ID
        assert faceit.calls == [("platform", STEAM_ID)]

    def test_unknown_nickname(self):
        with pytest.raises(NotFoundError) as exc_info:
            asyncio.run(IdentityResolver(FakeFaceit()).resolve("nobody"))
        assert exc_info.value.stage is NotFoundStage.NICKNAME

    def test_rate_limit_propagates(self):
        faceit = FakeFaceit(nicknames={"s1mple": UpstreamRateLimitError()})
        with pytest.raises(UpstreamRateLimitError):
            asyncio.run(IdentityResolver(faceit).resolve("s1mple"))

    def test_empty_input(self):
        faceit = FakeFaceit()
        with pytest.raises(InvalidInputError):
            asyncio.run(IdentityResolver(faceit).resolve("   "))
        assert faceit.calls == []
