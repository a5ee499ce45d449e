"""Sync orchestrator: fetch from the API, then persist through the repositories.

Each ``parse_*`` method is one fetch-validate-persist round trip.  Whatever
goes wrong on the way (transport, validation, storage, or an upstream list
that came back empty) is logged with the identifier being synced and
re-raised as :class:`ParsingError`, so callers handle a single error type.

Batch methods persist entity by entity: when the tenth brawler fails, the
first nine stay committed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sized
from typing import TypeVar

from brawl_sync.api.client import APIClient
from brawl_sync.api.errors import BrawlSyncError
from brawl_sync.repositories.brawler import BrawlerRepository
from brawl_sync.repositories.club import ClubRepository
from brawl_sync.repositories.event import EventRotationRepository
from brawl_sync.repositories.player import PlayerRepository
from brawl_sync.storage.models import Brawler, Club, EventRotation, Player

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ParsingError(BrawlSyncError):
    """A sync round trip failed; ``original`` holds the underlying cause."""

    default_code = 422

    @classmethod
    def from_exception(cls, exc: BaseException) -> ParsingError:
        message = exc.message if isinstance(exc, BrawlSyncError) else str(exc)
        return cls(message, code=422, original=exc)


class EmptyResultError(BrawlSyncError):
    """The upstream API returned an empty collection where entities were expected."""

    default_code = 422


def _require_items(items: T, what: str) -> T:
    if isinstance(items, Sized) and not len(items):
        raise EmptyResultError(f"No {what} found in the API response.")
    return items


class Parser:
    """Orchestrate API fetches and repository upserts."""

    def __init__(
        self,
        api_client: APIClient,
        brawlers: BrawlerRepository,
        clubs: ClubRepository,
        players: PlayerRepository,
        event_rotations: EventRotationRepository,
    ) -> None:
        self.api_client = api_client
        self.brawlers = brawlers
        self.clubs = clubs
        self.players = players
        self.event_rotations = event_rotations

    def parse_brawler(self, external_id: int) -> Brawler:
        return self._run(
            f"Brawler with external ID {external_id}",
            lambda: self.brawlers.create_or_update(self.api_client.get_brawler(external_id)),
        )

    def parse_all_brawlers(self) -> list[Brawler]:
        def sync() -> list[Brawler]:
            dtos = _require_items(self.api_client.get_brawlers(), "Brawlers")
            return self.brawlers.create_or_update_many(dtos)

        return self._run("all Brawlers", sync)

    def parse_events_rotation(self) -> list[EventRotation]:
        def sync() -> list[EventRotation]:
            dtos = _require_items(self.api_client.get_events_rotation(), "events rotation")
            return self.event_rotations.create_or_update_many(dtos)

        return self._run("events rotation", sync)

    def parse_club(self, tag: str) -> Club:
        return self._run(
            f"Club with tag {tag}",
            lambda: self.clubs.create_or_update(self.api_client.get_club(tag)),
        )

    def parse_club_members(self, tag: str) -> Club:
        return self._run(
            f"members of Club with tag {tag}",
            lambda: self.clubs.create_or_update_from_tag_with_members(
                tag, self.api_client.get_club_members(tag)
            ),
        )

    def parse_player(self, tag: str) -> Player:
        return self._run(
            f"Player with tag {tag}",
            lambda: self.players.create_or_update(self.api_client.get_player(tag)),
        )

    def _run(self, subject: str, sync: Callable[[], T]) -> T:
        logger.info("parser: syncing %s", subject)
        try:
            return sync()
        except Exception as exc:
            error = ParsingError.from_exception(exc)
            logger.error("parser: failed to parse %s: %s", subject, error.message)
            raise error from exc
