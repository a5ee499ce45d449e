"""Player profile DTOs, including the player's brawler roster."""

from __future__ import annotations

from typing import TYPE_CHECKING, Self

from pydantic import Field, StrictBool, field_validator

from brawl_sync.dto.base import DTO, NonEmptyStr, Numeric, unique_by
from brawl_sync.dto.brawler import AccessoryDTO, GearDTO, StarPowerDTO

if TYPE_CHECKING:
    from brawl_sync.storage.models import Player, PlayerBrawler


class IconDTO(DTO):
    """Profile icon reference."""

    entity_label = "Icon"

    id: Numeric


class PlayerClubDTO(DTO):
    """The club a player belongs to, as embedded in the player profile."""

    entity_label = "PlayerClub"

    tag: NonEmptyStr
    name: NonEmptyStr


class PlayerBrawlerDTO(DTO):
    """A brawler as owned by a player: progression plus equipped items."""

    entity_label = "PlayerBrawler"
    unordered_fields = ("gears", "star_powers", "accessories")

    ext_id: Numeric = Field(alias="id")
    name: NonEmptyStr
    power: Numeric
    rank: Numeric
    trophies: Numeric
    highest_trophies: Numeric = Field(alias="highestTrophies")
    gears: tuple[GearDTO, ...]
    star_powers: tuple[StarPowerDTO, ...] = Field(alias="starPowers")
    accessories: tuple[AccessoryDTO, ...] = Field(alias="gadgets")

    @field_validator("gears", "star_powers", "accessories")
    @classmethod
    def _drop_duplicates(cls, value: tuple[DTO, ...]) -> tuple[DTO, ...]:
        return unique_by(value, lambda item: item.ext_id)  # type: ignore[attr-defined]

    @classmethod
    def from_entity(cls, player_brawler: PlayerBrawler) -> Self:
        """Build from a stored roster row; the brawler and all item links must be loaded."""
        return cls.from_record({
            "id": player_brawler.brawler.ext_id,
            "name": player_brawler.brawler.name,
            "power": player_brawler.power,
            "rank": player_brawler.rank,
            "trophies": player_brawler.trophies,
            "highestTrophies": player_brawler.highest_trophies,
            "gears": [
                GearDTO.from_entity(link.gear, link.level).to_record()
                for link in player_brawler.gear_links
            ],
            "starPowers": [StarPowerDTO.from_entity(s).to_record() for s in player_brawler.star_powers],
            "gadgets": [AccessoryDTO.from_entity(a).to_record() for a in player_brawler.accessories],
        })


class PlayerDTO(DTO):
    """A player profile.

    Only ``tag``, ``name``, ``nameColor``, ``icon`` and ``trophies`` are
    required; every other field is ``None`` when the payload leaves it out.
    An empty ``club`` object means the player is in no club.  ``brawlers``
    is ``None`` (not empty) when the payload carries no roster, which tells
    the repository to leave the stored roster alone.
    """

    entity_label = "Player"
    unordered_fields = ("brawlers",)

    tag: NonEmptyStr
    name: NonEmptyStr
    name_color: NonEmptyStr = Field(alias="nameColor")
    icon: IconDTO
    trophies: Numeric
    highest_trophies: Numeric | None = Field(default=None, alias="highestTrophies")
    exp_level: Numeric | None = Field(default=None, alias="expLevel")
    exp_points: Numeric | None = Field(default=None, alias="expPoints")
    is_qualified_from_championship_challenge: StrictBool | None = Field(
        default=None, alias="isQualifiedFromChampionshipChallenge"
    )
    solo_victories: Numeric | None = Field(default=None, alias="soloVictories")
    duo_victories: Numeric | None = Field(default=None, alias="duoVictories")
    trio_victories: Numeric | None = Field(default=None, alias="3vs3Victories")
    best_robo_rumble_time: Numeric | None = Field(default=None, alias="bestRoboRumbleTime")
    best_time_as_big_brawler: Numeric | None = Field(default=None, alias="bestTimeAsBigBrawler")
    role: NonEmptyStr | None = None
    club: PlayerClubDTO | None = None
    brawlers: tuple[PlayerBrawlerDTO, ...] | None = None

    @field_validator("club", mode="before")
    @classmethod
    def _empty_club(cls, value: object) -> object:
        if isinstance(value, dict) and not value:
            return None
        return value

    @field_validator("brawlers")
    @classmethod
    def _drop_duplicates(
        cls, value: tuple[PlayerBrawlerDTO, ...] | None
    ) -> tuple[PlayerBrawlerDTO, ...] | None:
        if value is None:
            return None
        return unique_by(value, lambda item: item.ext_id)

    @classmethod
    def from_entity(cls, player: Player) -> Self:
        """Build from a stored player; ``club`` and the full roster must be loaded."""
        record: dict[str, object] = {
            "tag": player.tag,
            "name": player.name,
            "nameColor": player.name_color,
            "icon": {"id": player.icon_id},
            "trophies": player.trophies,
            "highestTrophies": player.highest_trophies,
            "expLevel": player.exp_level,
            "expPoints": player.exp_points,
            "isQualifiedFromChampionshipChallenge": player.is_qualified_from_championship_challenge,
            "soloVictories": player.solo_victories,
            "duoVictories": player.duo_victories,
            "3vs3Victories": player.trio_victories,
            "bestRoboRumbleTime": player.best_robo_rumble_time,
            "bestTimeAsBigBrawler": player.best_time_as_big_brawler,
            "role": player.club_role,
            "club": {"tag": player.club.tag, "name": player.club.name} if player.club else {},
            "brawlers": [PlayerBrawlerDTO.from_entity(pb).to_record() for pb in player.brawlers],
        }
        return cls.from_record(record)
