"""Fixed catalog of upstream API endpoints."""

from __future__ import annotations

import enum
from urllib.parse import quote


class Endpoint(enum.Enum):
    """Upstream endpoint paths, with ``{placeholders}`` for path parameters."""

    BRAWLERS = "/brawlers"
    BRAWLER_BY_ID = "/brawlers/{brawler_id}"
    CLUB_BY_TAG = "/clubs/{club_tag}"
    CLUB_MEMBERS = "/clubs/{club_tag}/members"
    EVENT_ROTATION = "/events/rotation"
    PLAYER_BY_TAG = "/players/{player_tag}"

    @property
    def method(self) -> str:
        # The catalog is read-only.
        return "GET"

    def build_uri(self, base_uri: str, **params: object) -> str:
        """Join *base_uri* and the endpoint path, substituting path parameters.

        Values are percent-encoded, so a player tag like ``#2PP`` becomes
        ``%232PP``.

        Raises:
            KeyError: If a placeholder has no matching parameter.
        """
        path: str = self.value
        encoded = {key: quote(str(value), safe="") for key, value in params.items()}
        return base_uri.rstrip("/") + path.format_map(encoded)
