"""Persistence layer: one repository per entity, all sharing a :class:`Database`."""

from __future__ import annotations

from brawl_sync.repositories.base import Repository, contains, equals
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

__all__ = [
    "AccessoryRepository",
    "BrawlerRepository",
    "ClubRepository",
    "EventMapRepository",
    "EventModeRepository",
    "EventModifierRepository",
    "EventRepository",
    "EventRotationRepository",
    "EventRotationSlotRepository",
    "GearRepository",
    "PlayerRepository",
    "Repository",
    "StarPowerRepository",
    "contains",
    "equals",
]
