"""Player repository: profile, club reference and brawler roster."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from brawl_sync.dto.brawler import BrawlerDTO, GearDTO
from brawl_sync.dto.club import ClubMemberDTO
from brawl_sync.dto.player import PlayerBrawlerDTO, PlayerDTO
from brawl_sync.repositories.base import Filter, Repository, equals
from brawl_sync.repositories.brawler import (
    AccessoryRepository,
    BrawlerRepository,
    GearRepository,
    StarPowerRepository,
)
from brawl_sync.storage.database import Database
from brawl_sync.storage.models import (
    Brawler,
    Club,
    Gear,
    Player,
    PlayerBrawler,
    PlayerBrawlerGear,
)
from brawl_sync.utils.logger import VERBOSE

logger = logging.getLogger(__name__)

_OPTIONAL_PROFILE_FIELDS = (
    "highest_trophies",
    "exp_level",
    "exp_points",
    "is_qualified_from_championship_challenge",
    "solo_victories",
    "duo_victories",
    "trio_victories",
    "best_robo_rumble_time",
    "best_time_as_big_brawler",
)


class PlayerRepository(Repository[Player]):
    """Players, their club membership and their brawler roster.

    Syncing a roster also feeds the canonical catalog: every brawler,
    accessory, gear and star power a player owns is upserted and attached to
    the brawler (attach only; the catalog sync owns detaching).
    """

    model = Player

    def __init__(
        self,
        database: Database,
        brawlers: BrawlerRepository,
        accessories: AccessoryRepository,
        gears: GearRepository,
        star_powers: StarPowerRepository,
    ) -> None:
        super().__init__(database)
        self.brawlers = brawlers
        self.accessories = accessories
        self.gears = gears
        self.star_powers = star_powers

    def filters(self) -> dict[str, Filter]:
        return {
            "id": equals(Player.id),
            "tag": equals(Player.tag),
            "name": equals(Player.name),
            "club_id": equals(Player.club_id),
        }

    # -- writes --------------------------------------------------------------

    def create_or_update(self, dto: PlayerDTO) -> Player:
        """Upsert the profile, then the club reference, then (if present) the roster.

        Optional profile fields missing from *dto* keep their stored value.
        A ``None`` club clears the membership.  A ``None`` roster leaves the
        stored roster untouched; an empty one removes every roster entry.
        """
        with self.database.transaction():
            player = self._upsert({"tag": dto.tag}, _profile(dto))
            self._attach_club(player, dto)
            if dto.brawlers is not None:
                self._sync_roster(player, dto.brawlers)
        logger.log(VERBOSE, "player %s (%s) synced", dto.tag, dto.name)
        return self.reload(player.id)

    def create_or_update_club_member(self, club: Club, dto: ClubMemberDTO) -> Player:
        """Upsert a member profile and make it a member of *club* with the listed role."""
        with self.database.transaction():
            return self._upsert(
                {"tag": dto.tag},
                {
                    "name": dto.name,
                    "name_color": dto.name_color,
                    "trophies": dto.trophies,
                    "icon_id": dto.icon.id,
                    "club": club,
                    "club_role": dto.role,
                },
            )

    def reload(self, player_id: int) -> Player:
        return self._reload(
            player_id,
            selectinload(Player.club),
            selectinload(Player.brawlers).options(
                selectinload(PlayerBrawler.brawler),
                selectinload(PlayerBrawler.accessories),
                selectinload(PlayerBrawler.star_powers),
                selectinload(PlayerBrawler.gear_links).selectinload(PlayerBrawlerGear.gear),
            ),
        )

    # -- internals -----------------------------------------------------------

    def _attach_club(self, player: Player, dto: PlayerDTO) -> None:
        if dto.club is None:
            player.club = None
            player.club_role = None
            return

        club = self.session.scalars(select(Club).filter_by(tag=dto.club.tag)).one_or_none()
        if club is None:
            club = Club(tag=dto.club.tag, name=dto.club.name)
            self.session.add(club)
        else:
            club.name = dto.club.name

        if dto.role is not None:
            player.club_role = dto.role
        elif player.club is not club:
            # A role only carries over while the player stays in the same club.
            player.club_role = None
        player.club = club
        self.session.flush()

    def _sync_roster(self, player: Player, dtos: Sequence[PlayerBrawlerDTO]) -> None:
        existing = {row.brawler_id: row for row in player.brawlers}
        kept: list[PlayerBrawler] = []

        for dto in dtos:
            brawler = self._canonical_brawler(dto)
            accessories = [self.accessories.create_or_update(item) for item in dto.accessories]
            gears = [self.gears.create_or_update(item) for item in dto.gears]
            star_powers = [self.star_powers.create_or_update(item) for item in dto.star_powers]
            self.brawlers.attach_items(
                brawler, accessories=accessories, gears=gears, star_powers=star_powers
            )

            stats = {
                "power": dto.power,
                "rank": dto.rank,
                "trophies": dto.trophies,
                "highest_trophies": dto.highest_trophies,
            }
            row = existing.get(brawler.id)
            if row is None:
                row = PlayerBrawler(brawler=brawler, **stats)
                player.brawlers.append(row)
            else:
                for key, value in stats.items():
                    setattr(row, key, value)
            self.session.flush()

            self._reconcile(row.accessories, accessories)
            self._reconcile(row.star_powers, star_powers)
            self._sync_gear_links(row, list(zip(gears, dto.gears, strict=True)))
            kept.append(row)

        for row in list(player.brawlers):
            if row not in kept:
                player.brawlers.remove(row)
        self.session.flush()

    def _canonical_brawler(self, dto: PlayerBrawlerDTO) -> Brawler:
        brawler = self.brawlers.find({"ext_id": dto.ext_id})
        if brawler is None:
            brawler = self.brawlers.create_or_update(
                BrawlerDTO(ext_id=dto.ext_id, name=dto.name, accessories=(), star_powers=())
            )
        return brawler

    def _sync_gear_links(self, row: PlayerBrawler, gears: list[tuple[Gear, GearDTO]]) -> None:
        links = {link.gear_id: link for link in row.gear_links}
        wanted: set[int] = set()
        for gear, gear_dto in gears:
            wanted.add(gear.id)
            link = links.get(gear.id)
            if link is None:
                row.gear_links.append(PlayerBrawlerGear(gear=gear, level=gear_dto.level))
            else:
                link.level = gear_dto.level
        for link in list(row.gear_links):
            if link.gear_id is not None and link.gear_id not in wanted:
                row.gear_links.remove(link)
        self.session.flush()


def _profile(dto: PlayerDTO) -> dict[str, Any]:
    profile: dict[str, Any] = {
        "name": dto.name,
        "name_color": dto.name_color,
        "icon_id": dto.icon.id,
        "trophies": dto.trophies,
    }
    for field in _OPTIONAL_PROFILE_FIELDS:
        value = getattr(dto, field)
        if value is not None:
            profile[field] = value
    return profile
