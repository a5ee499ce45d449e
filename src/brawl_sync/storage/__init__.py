"""Relational storage: ORM entities and the transactional database handle."""

from __future__ import annotations

from brawl_sync.storage.database import Database, create_database_engine
from brawl_sync.storage.models import (
    Accessory,
    Base,
    Brawler,
    Club,
    Event,
    EventMap,
    EventMode,
    EventModifier,
    EventRotation,
    EventRotationSlot,
    Gear,
    Player,
    PlayerBrawler,
    PlayerBrawlerGear,
    StarPower,
)

__all__ = [
    "Accessory",
    "Base",
    "Brawler",
    "Club",
    "Database",
    "Event",
    "EventMap",
    "EventMode",
    "EventModifier",
    "EventRotation",
    "EventRotationSlot",
    "Gear",
    "Player",
    "PlayerBrawler",
    "PlayerBrawlerGear",
    "StarPower",
    "create_database_engine",
]
