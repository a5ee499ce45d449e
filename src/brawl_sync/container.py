"""Explicit wiring of the sync pipeline's collaborators."""

from __future__ import annotations

import dataclasses

import httpx

from brawl_sync.api.client import APIClient
from brawl_sync.config import Settings
from brawl_sync.parser import Parser
from brawl_sync.repositories.brawler import (
    AccessoryRepository,
    BrawlerRepository,
    GearRepository,
    StarPowerRepository,
)
from brawl_sync.repositories.club import ClubRepository
from brawl_sync.repositories.event import (
    EventMapRepository,
    EventModeRepository,
    EventModifierRepository,
    EventRepository,
    EventRotationRepository,
    EventRotationSlotRepository,
)
from brawl_sync.repositories.player import PlayerRepository
from brawl_sync.storage.database import Database


@dataclasses.dataclass
class Services:
    """Every long-lived object of one sync process."""

    settings: Settings
    database: Database
    http_client: httpx.Client
    api_client: APIClient
    accessories: AccessoryRepository
    gears: GearRepository
    star_powers: StarPowerRepository
    brawlers: BrawlerRepository
    event_maps: EventMapRepository
    event_modes: EventModeRepository
    event_modifiers: EventModifierRepository
    events: EventRepository
    event_rotation_slots: EventRotationSlotRepository
    event_rotations: EventRotationRepository
    players: PlayerRepository
    clubs: ClubRepository
    parser: Parser

    def close(self) -> None:
        self.http_client.close()
        self.database.close()


def build_services(
    settings: Settings,
    http_client: httpx.Client | None = None,
    database: Database | None = None,
) -> Services:
    """Construct the pipeline in dependency order.

    *http_client* and *database* may be injected (tests pass a mock transport
    and an in-memory database); otherwise they are built from *settings*.
    """
    database = database if database is not None else Database(settings.database_url)
    http_client = http_client if http_client is not None else httpx.Client()
    api_client = APIClient(http_client, settings.api_base_uri, settings.api_key)

    accessories = AccessoryRepository(database)
    gears = GearRepository(database)
    star_powers = StarPowerRepository(database)
    brawlers = BrawlerRepository(database, accessories, star_powers)

    event_maps = EventMapRepository(database)
    event_modes = EventModeRepository(database)
    event_modifiers = EventModifierRepository(database)
    events = EventRepository(database, event_maps, event_modes, event_modifiers)
    event_rotation_slots = EventRotationSlotRepository(database)
    event_rotations = EventRotationRepository(database, events, event_rotation_slots)

    players = PlayerRepository(database, brawlers, accessories, gears, star_powers)
    clubs = ClubRepository(database, players)

    parser = Parser(api_client, brawlers, clubs, players, event_rotations)

    return Services(
        settings=settings,
        database=database,
        http_client=http_client,
        api_client=api_client,
        accessories=accessories,
        gears=gears,
        star_powers=star_powers,
        brawlers=brawlers,
        event_maps=event_maps,
        event_modes=event_modes,
        event_modifiers=event_modifiers,
        events=events,
        event_rotation_slots=event_rotation_slots,
        event_rotations=event_rotations,
        players=players,
        clubs=clubs,
        parser=parser,
    )
