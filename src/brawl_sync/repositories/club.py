"""Club repository and member-roster reconciliation."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from sqlalchemy import update
from sqlalchemy.orm import selectinload

from brawl_sync.dto.club import ClubDTO, ClubMemberDTO
from brawl_sync.repositories.base import Filter, Repository, equals
from brawl_sync.repositories.player import PlayerRepository
from brawl_sync.storage.database import Database
from brawl_sync.storage.models import Club, Player
from brawl_sync.utils.logger import VERBOSE

logger = logging.getLogger(__name__)


class ClubRepository(Repository[Club]):
    """Clubs and their member rosters.

    Membership lives on the player row (``club_id`` / ``club_role``), so a
    member who leaves keeps their player record; only the link is cleared.
    """

    model = Club

    def __init__(self, database: Database, players: PlayerRepository) -> None:
        super().__init__(database)
        self.players = players

    def filters(self) -> dict[str, Filter]:
        return {"id": equals(Club.id), "tag": equals(Club.tag), "name": equals(Club.name)}

    def create_or_update(self, dto: ClubDTO) -> Club:
        """Upsert the club profile and reconcile its members with ``dto.members``."""
        with self.database.transaction():
            club = self._upsert(
                {"tag": dto.tag},
                {
                    "name": dto.name,
                    "description": dto.description,
                    "type": dto.type,
                    "badge_id": dto.badge_id,
                    "required_trophies": dto.required_trophies,
                    "trophies": dto.trophies,
                },
            )
            self.sync_members(club, dto.members)
        logger.log(VERBOSE, "club %s (%s) synced with %d members", dto.tag, dto.name, len(dto.members))
        return self.reload(club.id)

    def create_or_update_from_tag(self, tag: str, name: str | None = None) -> Club:
        """Upsert a reference-only club known by tag (and optionally name)."""
        with self.database.transaction():
            club = self._upsert({"tag": tag}, {"name": name} if name is not None else {})
        return self.reload(club.id)

    def create_or_update_from_tag_with_members(
        self, tag: str, members: Sequence[ClubMemberDTO]
    ) -> Club:
        """Upsert a club by tag and reconcile its member roster."""
        with self.database.transaction():
            club = self._upsert({"tag": tag}, {})
            self.sync_members(club, members)
        logger.log(VERBOSE, "club %s members synced (%d)", tag, len(members))
        return self.reload(club.id)

    def sync_members(self, club: Club, members: Iterable[ClubMemberDTO]) -> None:
        """Upsert every listed member into *club* and detach everyone else."""
        with self.database.transaction():
            kept = [self.players.create_or_update_club_member(club, dto) for dto in members]
            self.detach_members(club.id, [player.id for player in kept])

    def detach_members(self, club_id: int, except_ids: Sequence[int] = ()) -> int:
        """Clear ``club_id`` and ``club_role`` of members not in *except_ids*.

        Returns:
            Number of players detached.
        """
        with self.database.transaction():
            self.session.flush()
            stmt = update(Player).where(Player.club_id == club_id)
            if except_ids:
                stmt = stmt.where(Player.id.not_in(except_ids))
            result = self.session.execute(
                stmt.values(club_id=None, club_role=None),
                execution_options={"synchronize_session": "fetch"},
            )
        detached: int = result.rowcount  # type: ignore[attr-defined]
        if detached:
            logger.debug("storage: detached %d member(s) from club %d", detached, club_id)
        return detached

    def reload(self, club_id: int) -> Club:
        return self._reload(club_id, selectinload(Club.members))
