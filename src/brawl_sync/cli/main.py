"""Typer CLI application for brawl_sync."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from brawl_sync.api.errors import ConfigurationError
from brawl_sync.config import Settings
from brawl_sync.container import Services, build_services
from brawl_sync.parser import ParsingError
from brawl_sync.utils.logger import configure_logging

T = TypeVar("T")

app = typer.Typer(help="Sync game data from the upstream API into a relational store")
console = Console()


@app.callback()
def _callback(
    ctx: typer.Context,
    log_level: str | None = typer.Option(
        None, "--log-level", help="QUIET | NORMAL | VERBOSE | DEBUG (default: $BRAWL_SYNC_LOG_LEVEL)"
    ),
    database_url: str | None = typer.Option(
        None, "--database-url", help="SQLAlchemy URL (default: $BRAWL_SYNC_DATABASE_URL)"
    ),
) -> None:
    """brawl_sync: fetch, validate and persist game data."""
    try:
        settings = Settings.from_env(log_level=log_level, database_url=database_url)
    except ConfigurationError as exc:
        console.print(f"[red]Error: {escape(exc.message)}[/red]")
        raise typer.Exit(code=1)
    configure_logging(settings.log_level)
    ctx.obj = settings


def _settings(ctx: typer.Context) -> Settings:
    settings: Settings = ctx.obj
    return settings


def _run(ctx: typer.Context, action: Callable[[Services], T], *, needs_api: bool = True) -> T:
    """Build the services, ensure the schema exists, run *action* and clean up."""
    settings = _settings(ctx)
    if needs_api:
        try:
            settings.require_api_key()
        except ConfigurationError as exc:
            console.print(f"[red]Error: {escape(exc.message)}[/red]")
            raise typer.Exit(code=1)

    services = build_services(settings)
    try:
        services.database.create_schema()
        return action(services)
    except ParsingError as exc:
        console.print(f"[red]Error ({exc.code}): {escape(exc.message)}[/red]")
        raise typer.Exit(code=1)
    finally:
        services.close()


def _print_summary(title: str, rows: list[tuple[str, str]]) -> None:
    table = Table(title=title)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    for field, value in rows:
        table.add_row(field, value)
    console.print(table)


@app.command("init-db")
def init_db(ctx: typer.Context) -> None:
    """Create every table in the configured database."""
    _run(ctx, lambda services: None, needs_api=False)
    console.print(f"Schema ready at [bold]{_settings(ctx).database_url}[/bold]")


@app.command()
def brawlers(
    ctx: typer.Context,
    external_id: int | None = typer.Option(None, "--id", help="Sync a single brawler by external id"),
) -> None:
    """Sync the brawler catalog (or one brawler)."""
    if external_id is not None:
        brawler = _run(ctx, lambda services: services.parser.parse_brawler(external_id))
        _print_summary(
            "Brawler synced",
            [
                ("External ID", str(brawler.ext_id)),
                ("Name", brawler.name),
                ("Accessories", str(len(brawler.accessories))),
                ("Star powers", str(len(brawler.star_powers))),
            ],
        )
        return

    synced = _run(ctx, lambda services: services.parser.parse_all_brawlers())
    table = Table(title=f"Brawlers synced: {len(synced)}")
    table.add_column("External ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Accessories", justify="right")
    table.add_column("Star powers", justify="right")
    for brawler in synced:
        table.add_row(
            str(brawler.ext_id), brawler.name, str(len(brawler.accessories)), str(len(brawler.star_powers))
        )
    console.print(table)


@app.command()
def events(ctx: typer.Context) -> None:
    """Sync the current event rotation."""
    rotations = _run(ctx, lambda services: services.parser.parse_events_rotation())
    table = Table(title=f"Event rotation: {len(rotations)} slots")
    table.add_column("Slot", justify="right", style="cyan")
    table.add_column("Mode", style="green")
    table.add_column("Map")
    table.add_column("Ends (UTC)")
    for rotation in rotations:
        table.add_row(
            str(rotation.slot.position),
            rotation.event.mode.name,
            rotation.event.map.name,
            rotation.end_time.isoformat(sep=" "),
        )
    console.print(table)


@app.command()
def club(
    ctx: typer.Context,
    tag: str = typer.Argument(..., help="Club tag, e.g. '#2PP'"),
    members_only: bool = typer.Option(False, "--members-only", help="Only sync the member roster"),
) -> None:
    """Sync a club and its members."""
    if members_only:
        synced = _run(ctx, lambda services: services.parser.parse_club_members(tag))
    else:
        synced = _run(ctx, lambda services: services.parser.parse_club(tag))
    _print_summary(
        "Club synced",
        [
            ("Tag", synced.tag),
            ("Name", synced.name or "-"),
            ("Members", str(len(synced.members))),
        ],
    )


@app.command()
def player(ctx: typer.Context, tag: str = typer.Argument(..., help="Player tag, e.g. '#2PP'")) -> None:
    """Sync a player profile and brawler roster."""
    synced = _run(ctx, lambda services: services.parser.parse_player(tag))
    _print_summary(
        "Player synced",
        [
            ("Tag", synced.tag),
            ("Name", synced.name),
            ("Trophies", str(synced.trophies)),
            ("Club", synced.club.tag if synced.club is not None else "-"),
            ("Brawlers", str(len(synced.brawlers))),
        ],
    )
