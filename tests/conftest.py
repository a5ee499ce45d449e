"""Shared pytest fixtures for the brawl_sync test suite.

Fixtures defined here are available to all tests without explicit imports:
an in-memory database, fully wired services backed by an
``httpx.MockTransport``, and representative upstream payloads.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

import httpx
import pytest

from brawl_sync.config import Settings
from brawl_sync.container import Services, build_services
from brawl_sync.storage.database import Database
from brawl_sync.utils.logger import ROOT_LOGGER_NAME

BASE_URI = "https://api.test/v1"
API_KEY = "test-key"


class FakeAPI:
    """Routes for ``httpx.MockTransport``: raw path -> (status, JSON body or raw text).

    Every handled request is recorded in ``requests``.
    """

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, Any]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path: str, body: Any, status: int = 200) -> None:
        self.routes[path] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.raw_path.decode("ascii").removeprefix("/v1")
        if path not in self.routes:
            return httpx.Response(404, json={"reason": "notFound"})
        status, body = self.routes[path]
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)


@pytest.fixture(autouse=True)
def _reset_brawl_sync_logger() -> Iterator[None]:
    """Undo any ``configure_logging`` call (the CLI makes one) so caplog keeps working."""
    yield
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    root.propagate = True


@pytest.fixture
def database() -> Iterator[Database]:
    """Provide a fresh in-memory SQLite database with the schema created."""
    db = Database("sqlite://")
    db.create_schema()
    yield db
    db.close()


@pytest.fixture
def fake_api() -> FakeAPI:
    return FakeAPI()


@pytest.fixture
def services(database: Database, fake_api: FakeAPI) -> Iterator[Services]:
    """Wire the whole pipeline against the in-memory database and the fake API."""
    settings = Settings(api_base_uri=BASE_URI, api_key=API_KEY, database_url="sqlite://")
    http_client = httpx.Client(transport=httpx.MockTransport(fake_api.handler))
    wired = build_services(settings, http_client=http_client, database=database)
    yield wired
    http_client.close()


# ---------------------------------------------------------------------------
# Upstream payloads
# ---------------------------------------------------------------------------


@pytest.fixture
def brawler_payload() -> dict[str, Any]:
    """A brawler as returned by ``GET /brawlers/{id}``."""
    return {
        "id": 16000000,
        "name": "SHELLY",
        "gadgets": [
            {"id": 23000255, "name": "FAST FORWARD"},
            {"id": 23000288, "name": "CLAY PIGEONS"},
        ],
        "starPowers": [
            {"id": 23000076, "name": "SHELL SHOCK"},
            {"id": 23000135, "name": "BAND-AID"},
        ],
    }


@pytest.fixture
def rotation_payload() -> list[dict[str, Any]]:
    """The bare list returned by ``GET /events/rotation``."""
    return [
        {
            "startTime": "20240101T080000.000000Z",
            "endTime": "20240102T080000.000000Z",
            "slotId": 1,
            "event": {"id": 15000007, "mode": "gemGrab", "map": "Hard Rock Mine", "modifiers": []},
        },
        {
            "startTime": "20240101T080000.000000Z",
            "endTime": "20240101T200000.000000Z",
            "slotId": 2,
            "event": {
                "id": 15000026,
                "mode": "showdown",
                "map": "Skull Creek",
                "modifiers": ["energyDrink", "angryRobo"],
            },
        },
    ]


def _member(tag: str, name: str, role: str = "member", trophies: int = 10000) -> dict[str, Any]:
    return {
        "tag": tag,
        "name": name,
        "nameColor": "0xffffffff",
        "role": role,
        "trophies": trophies,
        "icon": {"id": 28000000},
    }


@pytest.fixture
def club_payload() -> dict[str, Any]:
    """A club as returned by ``GET /clubs/{tag}``."""
    return {
        "tag": "#CLUB1",
        "name": "Shelly Fans",
        "description": "We only play Shelly.",
        "type": "social",
        "badgeId": 8000000,
        "requiredTrophies": 5000,
        "trophies": 300000,
        "members": [
            _member("#111", "Alpha", role="president", trophies=30000),
            _member("#555", "Bravo", role="vicePresident"),
            _member("#777", "Charlie"),
        ],
    }


@pytest.fixture
def player_payload() -> dict[str, Any]:
    """A player as returned by ``GET /players/{tag}``."""
    return {
        "tag": "#2PP",
        "name": "Player One",
        "nameColor": "0xff1ba5f5",
        "icon": {"id": 28000000},
        "trophies": 25000,
        "highestTrophies": 26000,
        "expLevel": 150,
        "expPoints": 200000,
        "isQualifiedFromChampionshipChallenge": False,
        "3vs3Victories": 5000,
        "soloVictories": 1000,
        "duoVictories": 800,
        "bestRoboRumbleTime": 5,
        "bestTimeAsBigBrawler": 0,
        "role": "member",
        "club": {"tag": "#CLUB1", "name": "Shelly Fans"},
        "brawlers": [
            {
                "id": 16000000,
                "name": "SHELLY",
                "power": 11,
                "rank": 25,
                "trophies": 750,
                "highestTrophies": 800,
                "gears": [{"id": 62000000, "name": "SPEED", "level": 3}],
                "starPowers": [{"id": 23000076, "name": "SHELL SHOCK"}],
                "gadgets": [{"id": 23000255, "name": "FAST FORWARD"}],
            },
            {
                "id": 16000001,
                "name": "COLT",
                "power": 9,
                "rank": 20,
                "trophies": 600,
                "highestTrophies": 610,
                "gears": [],
                "starPowers": [],
                "gadgets": [],
            },
        ],
    }
