"""Synchronous client for the game-data REST API.

Each ``get_*`` method performs one authenticated GET request through an
injected :class:`httpx.Client`, decodes the JSON body and hands it to the
matching DTO factory.  Transport failures and undecodable bodies become
:class:`~brawl_sync.api.errors.ResponseError`; payloads with the wrong shape
surface as the DTO factory's :class:`~brawl_sync.api.errors.InvalidDTOError`.
Every failure is logged with the request URI before it propagates.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

import httpx

from brawl_sync.api.endpoints import Endpoint
from brawl_sync.api.errors import BrawlSyncError, InvalidDTOError, ResponseError
from brawl_sync.dto.brawler import BrawlerDTO
from brawl_sync.dto.club import ClubDTO, ClubMemberDTO
from brawl_sync.dto.event import EventRotationDTO
from brawl_sync.dto.player import PlayerDTO

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _items(payload: object, what: str) -> object:
    """Unwrap the ``{"items": [...]}`` envelope used by list endpoints."""
    if not isinstance(payload, dict) or not isinstance(payload.get("items"), list):
        raise InvalidDTOError(f"Invalid structure of {what} data: expected an 'items' list")
    return payload["items"]


class APIClient:
    """Fetch and validate upstream entities.

    Args:
        http_client: Transport used for every request.  The caller owns its
            lifecycle (timeouts, proxies, closing).
        base_uri: API root, e.g. ``https://api.brawlstars.com/v1``.
        api_key: Bearer token sent with every request.
    """

    def __init__(self, http_client: httpx.Client, base_uri: str, api_key: str) -> None:
        self._http = http_client
        self._base_uri = base_uri.rstrip("/")
        self._api_key = api_key

    # -- operations ----------------------------------------------------------

    def get_brawler(self, external_id: int) -> BrawlerDTO:
        """Fetch one brawler by its external id."""
        uri, payload = self._request(Endpoint.BRAWLER_BY_ID, brawler_id=external_id)
        return self._decode(uri, lambda: BrawlerDTO.from_record(payload))

    def get_brawlers(self) -> list[BrawlerDTO]:
        """Fetch the full brawler catalog."""
        uri, payload = self._request(Endpoint.BRAWLERS)
        return self._decode(uri, lambda: BrawlerDTO.from_list(_items(payload, "Brawler list")))

    def get_events_rotation(self) -> list[EventRotationDTO]:
        """Fetch the current event rotation (the payload is a bare list)."""
        uri, payload = self._request(Endpoint.EVENT_ROTATION)
        return self._decode(uri, lambda: EventRotationDTO.from_list(payload))

    def get_club(self, tag: str) -> ClubDTO:
        """Fetch a club, including its member roster."""
        uri, payload = self._request(Endpoint.CLUB_BY_TAG, club_tag=tag)
        return self._decode(uri, lambda: ClubDTO.from_record(payload))

    def get_club_members(self, tag: str) -> list[ClubMemberDTO]:
        """Fetch only the member roster of a club."""
        uri, payload = self._request(Endpoint.CLUB_MEMBERS, club_tag=tag)
        return self._decode(uri, lambda: ClubMemberDTO.from_list(_items(payload, "club members")))

    def get_player(self, tag: str) -> PlayerDTO:
        """Fetch a player profile, including the brawler roster."""
        uri, payload = self._request(Endpoint.PLAYER_BY_TAG, player_tag=tag)
        return self._decode(uri, lambda: PlayerDTO.from_record(payload))

    # -- internals -----------------------------------------------------------

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }

    def _request(self, endpoint: Endpoint, **params: object) -> tuple[str, Any]:
        """Send one request and return ``(uri, decoded JSON body)``.

        Raises:
            ResponseError: Code 500 on transport or HTTP-status failure, 400
                when the body is not valid JSON.
        """
        uri = endpoint.build_uri(self._base_uri, **params)
        try:
            response = self._http.request(endpoint.method, uri, headers=self._headers)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("api: request to %s failed: %s", uri, exc)
            raise ResponseError.from_exception(exc) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            logger.error("api: invalid JSON from %s: %s", uri, exc)
            raise ResponseError("Invalid JSON response from API", code=400, original=exc) from exc

        logger.debug("api: %s %s -> %d", endpoint.method, uri, response.status_code)
        return uri, payload

    def _decode(self, uri: str, build: Callable[[], T]) -> T:
        try:
            return build()
        except BrawlSyncError as exc:
            logger.error("api: unexpected payload from %s: %s", uri, exc.message)
            raise
