"""Immutable, validated data-transfer objects for upstream API payloads."""

from __future__ import annotations

from brawl_sync.dto.base import DTO, NonEmptyStr, Numeric
from brawl_sync.dto.brawler import AccessoryDTO, BrawlerDTO, GearDTO, StarPowerDTO
from brawl_sync.dto.club import ClubDTO, ClubMemberDTO
from brawl_sync.dto.event import EventDTO, EventRotationDTO
from brawl_sync.dto.player import IconDTO, PlayerBrawlerDTO, PlayerClubDTO, PlayerDTO

__all__ = [
    "DTO",
    "AccessoryDTO",
    "BrawlerDTO",
    "ClubDTO",
    "ClubMemberDTO",
    "EventDTO",
    "EventRotationDTO",
    "GearDTO",
    "IconDTO",
    "NonEmptyStr",
    "Numeric",
    "PlayerBrawlerDTO",
    "PlayerClubDTO",
    "PlayerDTO",
    "StarPowerDTO",
]
