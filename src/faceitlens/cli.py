"""
FaceitLens CLI - Command Line Interface for FACEIT player lookups

Provides commands for:
- Looking up a player by nickname, Steam ID or Steam profile URL
- Browsing and clearing the local search history
- Showing the last lookup and choosing the profile URL language
- Showing environment / configuration info
- Writing a default configuration file
"""

import asyncio
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from faceitlens import __version__
from faceitlens.core.aliases import (
    LIFETIME_HEADSHOTS,
    LIFETIME_KD,
    LIFETIME_LONGEST_STREAK,
    LIFETIME_MATCHES,
    LIFETIME_WIN_RATE,
    LIFETIME_WINS,
)
from faceitlens.core.config import (
    generate_default_config,
    get_config,
    load_config,
    set_config,
    setup_logging,
)
from faceitlens.core.errors import ErrorKind, ErrorResult, InvalidInputError
from faceitlens.core.schemas import AggregatedRecentStats, PlayerStatsBundle
from faceitlens.core.thresholds import format_stat_value, get_stat_indicator
from faceitlens.history import SUPPORTED_LANGUAGES, SearchHistory, normalize_language
from faceitlens.service import PlayerStatsService

app = typer.Typer(
    name="faceitlens",
    help="Look up FACEIT CS2 players by nickname, Steam ID or Steam profile URL",
    add_completion=False,
)
console = Console()
logger = logging.getLogger(__name__)

INDICATOR_STYLES = {"good": "green", "average": "yellow", "bad": "red"}


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold blue]FaceitLens[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable verbose output"),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (.yaml, .toml or .json)",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """FaceitLens - FACEIT CS2 player lookup"""
    if config_file:
        set_config(load_config(config_file))
    config = get_config()
    setup_logging(config.logging)
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def _get_history() -> SearchHistory:
    return SearchHistory.from_config(get_config().history)


def _styled(value: float, text: str, kind: str) -> str:
    style = INDICATOR_STYLES[get_stat_indicator(value, kind)]  # type: ignore[arg-type]
    return f"[{style}]{text}[/{style}]"


@app.command()
def lookup(
    query: str = typer.Argument(
        ..., help="FACEIT nickname, Steam ID64, or steamcommunity.com profile URL"
    ),
    matches: Optional[int] = typer.Option(
        None,
        "--matches",
        "-m",
        min=0,
        max=100,
        help="Recent matches to aggregate (default from config, 0 to skip)",
    ),
    as_json: bool = typer.Option(False, "--json", "-j", help="Print the raw bundle as JSON"),
    save_history: bool = typer.Option(
        True, "--history/--no-history", help="Record successful lookups in the search history"
    ),
    lang: Optional[str] = typer.Option(
        None,
        "--lang",
        "-l",
        help="Profile URL language for this lookup (default: saved `lang` setting)",
    ),
) -> None:
    """
    Look up a FACEIT player and show their stats.

    Accepts:
    - FACEIT nickname
    - Steam ID64 (17 digits)
    - https://steamcommunity.com/profiles/<id>
    - https://steamcommunity.com/id/<vanity> (requires STEAM_API_KEY)
    """
    try:
        language = normalize_language(lang) if lang else _get_history().get_language()
    except InvalidInputError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)

    service = PlayerStatsService.from_config(get_config())

    with console.status("Looking up player..."):
        result = asyncio.run(service.get_player_stats_bundle(query, matches, language))

    if isinstance(result, ErrorResult):
        _display_error(result)
        raise typer.Exit(1)

    if save_history:
        search_history = _get_history()
        search_history.add(
            query.strip(),
            player_name=result.player.nickname or None,
            steam_id=result.player.steam_id_64 or None,
        )
        search_history.save_last_search(
            result.to_dict(),
            query.strip(),
            matches if matches is not None else service.default_match_limit,
        )

    if as_json:
        console.print_json(json.dumps(result.to_dict()))
        return

    _display_profile(result)
    _display_lifetime(result)
    if result.recent_aggregated is not None:
        _display_recent(result.recent_aggregated)
    if result.map_segments:
        _display_maps(result.map_segments)


def _display_error(result: ErrorResult) -> None:
    hints = {
        ErrorKind.UPSTREAM_AUTH: "Set FACEIT_API_KEY (and STEAM_API_KEY for vanity URLs).",
        ErrorKind.UPSTREAM_RATE_LIMIT: "Wait a minute before trying again.",
        ErrorKind.PLAYER_NOT_FOUND: "Check the nickname spelling or try a Steam profile URL.",
    }
    console.print(f"[red]Error:[/red] {result.message}")
    if result.kind in hints:
        console.print(f"[dim]{hints[result.kind]}[/dim]")


def _display_profile(bundle: PlayerStatsBundle) -> None:
    player = bundle.player
    lines = [f"[bold]{player.nickname}[/bold]"]
    if player.country_code:
        lines.append(f"[cyan]Country:[/cyan] {player.country_code}")
    if player.steam_id_64:
        lines.append(f"[cyan]Steam ID:[/cyan] {player.steam_id_64}")

    cs2 = player.cs2
    if cs2 is not None:
        elo = _styled(cs2.faceit_elo, str(cs2.faceit_elo), "elo")
        lines.append(f"[cyan]Level:[/cyan] {cs2.skill_level}   [cyan]ELO:[/cyan] {elo}")
        if cs2.region:
            lines.append(f"[cyan]Region:[/cyan] {cs2.region}")
    lines.append(f"[cyan]Profile:[/cyan] {player.faceit_url}")

    console.print(
        Panel("\n".join(lines), title="[bold blue]FACEIT Player[/bold blue]", expand=False)
    )


def _display_lifetime(bundle: PlayerStatsBundle) -> None:
    lifetime = bundle.lifetime.lifetime

    table = Table(title="Lifetime Stats", show_header=False)
    table.add_column("Stat", style="cyan")
    table.add_column("Value", justify="right")

    kd = LIFETIME_KD.lookup(lifetime)
    if kd is not None:
        table.add_row("K/D", _styled(format_stat_value(kd), str(kd), "kd"))
    hs = LIFETIME_HEADSHOTS.lookup(lifetime)
    if hs is not None:
        table.add_row("Headshots", _styled(format_stat_value(hs), f"{hs}%", "headshot"))
    if bundle.adr is not None:
        adr_text = f"{bundle.adr:.1f}" if isinstance(bundle.adr, float) else str(bundle.adr)
        table.add_row("ADR", _styled(format_stat_value(bundle.adr), adr_text, "adr"))

    for label, alias in (
        ("Matches", LIFETIME_MATCHES),
        ("Wins", LIFETIME_WINS),
        ("Longest Win Streak", LIFETIME_LONGEST_STREAK),
    ):
        value = alias.lookup(lifetime)
        if value is not None:
            table.add_row(label, str(value))

    win_rate = LIFETIME_WIN_RATE.lookup(lifetime)
    if win_rate is not None:
        table.add_row("Win Rate", _styled(format_stat_value(win_rate), f"{win_rate}%", "winRate"))

    console.print(table)
    console.print()


def _display_recent(recent: AggregatedRecentStats) -> None:
    shown = recent.to_display()

    table = Table(title=f"Last {recent.matches} Matches", show_header=False)
    table.add_column("Stat", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Wins", f"{recent.wins} / {recent.matches}")
    table.add_row("Win Rate", _styled(recent.win_rate, f"{shown['winRate']}%", "winRate"))
    table.add_row("K/D", _styled(recent.kd, shown["kd"], "kd"))
    hs_text = f"{shown['headshot']}%"
    table.add_row("Headshots", _styled(recent.headshot_percent, hs_text, "headshot"))
    table.add_row("ADR", _styled(recent.adr, shown["adr"], "adr"))
    table.add_row("Avg Kills", shown["avgKills"])
    table.add_row("Avg Deaths", shown["avgDeaths"])

    console.print(table)
    console.print()


def _display_maps(segments: list[dict[str, Any]]) -> None:
    table = Table(title="Maps")
    table.add_column("Map", style="cyan")
    table.add_column("Matches", justify="right")
    table.add_column("Win Rate", justify="right")
    table.add_column("K/D", justify="right")

    for segment in segments:
        stats = segment.get("stats") or {}
        table.add_row(
            str(segment.get("label", "")),
            str(LIFETIME_MATCHES.lookup(stats, "-")),
            f"{LIFETIME_WIN_RATE.lookup(stats, '-')}%",
            str(LIFETIME_KD.lookup(stats, "-")),
        )

    console.print(table)
    console.print()


@app.command()
def history(
    clear: bool = typer.Option(False, "--clear", help="Delete the whole search history"),
    remove: Optional[str] = typer.Option(None, "--remove", "-r", help="Delete one entry"),
) -> None:
    """
    Show recent successful lookups.
    """
    store = _get_history()

    if clear:
        store.clear()
        console.print("[green]Search history cleared[/green]")
        return

    if remove is not None:
        if store.remove(remove):
            console.print(f"[green]Removed:[/green] {remove}")
        else:
            console.print(f"[yellow]Not in history:[/yellow] {remove}")
            raise typer.Exit(1)
        return

    entries = store.entries()
    if not entries:
        console.print("[yellow]Search history is empty[/yellow]")
        return

    table = Table(title="Search History")
    table.add_column("Input", style="cyan")
    table.add_column("Player")
    table.add_column("Steam ID")
    for entry in entries:
        table.add_row(entry.input, entry.player_name or "", entry.steam_id or "")
    console.print(table)


@app.command()
def last(
    as_json: bool = typer.Option(False, "--json", "-j", help="Print the stored search as JSON"),
    clear: bool = typer.Option(False, "--clear", help="Forget the last search"),
) -> None:
    """
    Show the last successful lookup without calling FACEIT again.

    The last search expires after `history.last_search_max_age_hours` (24h).
    """
    store = _get_history()

    if clear:
        store.clear_last_search()
        console.print("[green]Last search cleared[/green]")
        return

    data = store.get_last_search()
    if data is None:
        console.print("[yellow]No recent search[/yellow]")
        return

    if as_json:
        console.print_json(json.dumps(data))
        return

    stats = data.get("stats") or {}
    player = stats.get("player") or {}
    searched_at = datetime.fromtimestamp(int(data.get("timestamp") or 0) / 1000)

    lines = [
        f"[bold]{player.get('nickname', '')}[/bold]",
        f"[cyan]Input:[/cyan] {data.get('input', '')}",
        f"[cyan]Searched:[/cyan] {searched_at:%Y-%m-%d %H:%M}",
        f"[cyan]Matches:[/cyan] {data.get('matchesLimit', '')}",
    ]
    if player.get("faceit_url"):
        lines.append(f"[cyan]Profile:[/cyan] {player['faceit_url']}")
    console.print(
        Panel("\n".join(lines), title="[bold blue]Last Search[/bold blue]", expand=False)
    )

    recent = stats.get("recentAggregated")
    if isinstance(recent, dict):
        try:
            _display_recent(AggregatedRecentStats(**recent))
        except TypeError:
            logger.debug("Stored recent stats have an unexpected shape, skipping table")


@app.command("lang")
def lang_command(
    language: Optional[str] = typer.Argument(
        None, help=f"One of: {', '.join(SUPPORTED_LANGUAGES)}. Omit to show the current one."
    ),
) -> None:
    """
    Show or set the language used for FACEIT profile links.
    """
    store = _get_history()

    if language is None:
        console.print(f"Profile language: [bold]{store.get_language()}[/bold]")
        return

    try:
        saved = store.set_language(language)
    except InvalidInputError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)
    console.print(f"[green]Profile language set to:[/green] {saved}")


@app.command()
def info() -> None:
    """
    Display information about FaceitLens and the environment.
    """
    import platform as plat

    config = get_config()
    console.print(f"\n[bold blue]FaceitLens[/bold blue] v{__version__}\n")

    table = Table(show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Python", plat.python_version())
    table.add_row("Platform", plat.system())
    table.add_row("FACEIT API", config.faceit.base_url)
    table.add_row(
        "FACEIT_API_KEY",
        "[green]set[/green]" if config.faceit.api_key else "[red]not set[/red]",
    )
    table.add_row(
        "STEAM_API_KEY",
        "[green]set[/green]"
        if config.steam.api_key
        else "[yellow]not set (vanity URLs disabled)[/yellow]",
    )
    table.add_row("Default match limit", str(config.faceit.default_match_limit))
    table.add_row("History entries", str(len(_get_history().entries())))

    console.print(table)


@app.command("init-config")
def init_config(
    path: Path = typer.Argument(
        Path("faceitlens.yaml"), help="Where to write the config (.yaml or .json)"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """
    Write a default configuration file.
    """
    if path.exists() and not force:
        console.print(f"[red]Error:[/red] {path} already exists (use --force)")
        raise typer.Exit(1)
    try:
        generate_default_config(path)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    console.print(f"[green]Config written to:[/green] {path}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
