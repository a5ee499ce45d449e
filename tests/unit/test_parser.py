"""Unit tests for brawl_sync.parser with mocked collaborators."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from brawl_sync.api.errors import BrawlSyncError, InvalidDTOError, ResponseError
from brawl_sync.parser import EmptyResultError, Parser, ParsingError


@pytest.fixture
def collaborators() -> dict[str, MagicMock]:
    return {
        "api_client": MagicMock(),
        "brawlers": MagicMock(),
        "clubs": MagicMock(),
        "players": MagicMock(),
        "event_rotations": MagicMock(),
    }


@pytest.fixture
def parser(collaborators: dict[str, MagicMock]) -> Parser:
    return Parser(**collaborators)


# ---------------------------------------------------------------------------
# Delegation
# ---------------------------------------------------------------------------


class TestDelegation:
    """Every parse_* call fetches one DTO (or list) and hands it to one repository."""

    @pytest.mark.smoke
    def test_parse_brawler(self, parser: Parser, collaborators: dict[str, MagicMock]) -> None:
        api, brawlers = collaborators["api_client"], collaborators["brawlers"]
        assert parser.parse_brawler(16000000) is brawlers.create_or_update.return_value
        api.get_brawler.assert_called_once_with(16000000)
        brawlers.create_or_update.assert_called_once_with(api.get_brawler.return_value)

    def test_parse_all_brawlers(self, parser: Parser, collaborators: dict[str, MagicMock]) -> None:
        api, brawlers = collaborators["api_client"], collaborators["brawlers"]
        api.get_brawlers.return_value = ["a", "b"]
        result = parser.parse_all_brawlers()
        brawlers.create_or_update_many.assert_called_once_with(["a", "b"])
        assert result is brawlers.create_or_update_many.return_value

    def test_parse_events_rotation(self, parser: Parser, collaborators: dict[str, MagicMock]) -> None:
        api, rotations = collaborators["api_client"], collaborators["event_rotations"]
        api.get_events_rotation.return_value = ["slot"]
        parser.parse_events_rotation()
        rotations.create_or_update_many.assert_called_once_with(["slot"])

    def test_parse_club(self, parser: Parser, collaborators: dict[str, MagicMock]) -> None:
        api, clubs = collaborators["api_client"], collaborators["clubs"]
        parser.parse_club("#CLUB1")
        api.get_club.assert_called_once_with("#CLUB1")
        clubs.create_or_update.assert_called_once_with(api.get_club.return_value)

    def test_parse_club_members(self, parser: Parser, collaborators: dict[str, MagicMock]) -> None:
        api, clubs = collaborators["api_client"], collaborators["clubs"]
        parser.parse_club_members("#CLUB1")
        clubs.create_or_update_from_tag_with_members.assert_called_once_with(
            "#CLUB1", api.get_club_members.return_value
        )

    def test_parse_player(self, parser: Parser, collaborators: dict[str, MagicMock]) -> None:
        api, players = collaborators["api_client"], collaborators["players"]
        parser.parse_player("#2PP")
        players.create_or_update.assert_called_once_with(api.get_player.return_value)


# ---------------------------------------------------------------------------
# Error wrapping
# ---------------------------------------------------------------------------


class TestErrorWrapping:
    @pytest.mark.smoke
    def test_validation_error_wrapped(self, parser: Parser, collaborators: dict[str, MagicMock]) -> None:
        cause = InvalidDTOError("Invalid or missing 'name' field in Brawler data: Field required", code=422)
        collaborators["api_client"].get_brawler.side_effect = cause
        with pytest.raises(ParsingError) as excinfo:
            parser.parse_brawler(16000000)
        error = excinfo.value
        assert error.code == 422
        assert error.message == cause.message
        assert error.original is cause
        assert error.__cause__ is cause
        collaborators["brawlers"].create_or_update.assert_not_called()

    def test_transport_error_wrapped(self, parser: Parser, collaborators: dict[str, MagicMock]) -> None:
        collaborators["api_client"].get_player.side_effect = ResponseError("API Request Error: boom")
        with pytest.raises(ParsingError, match="API Request Error: boom"):
            parser.parse_player("#2PP")

    def test_storage_error_wrapped(self, parser: Parser, collaborators: dict[str, MagicMock]) -> None:
        collaborators["clubs"].create_or_update.side_effect = RuntimeError("disk full")
        with pytest.raises(ParsingError, match="disk full") as excinfo:
            parser.parse_club("#CLUB1")
        assert isinstance(excinfo.value.original, RuntimeError)

    def test_parsing_error_is_package_error(self) -> None:
        assert issubclass(ParsingError, BrawlSyncError)
        assert ParsingError("x").code == 422

    @pytest.mark.parametrize(
        ("method", "fetch", "message"),
        [
            ("parse_all_brawlers", "get_brawlers", "No Brawlers found in the API response."),
            ("parse_events_rotation", "get_events_rotation", "No events rotation found in the API response."),
        ],
    )
    def test_empty_batch_is_an_error(
        self, parser: Parser, collaborators: dict[str, MagicMock], method: str, fetch: str, message: str
    ) -> None:
        getattr(collaborators["api_client"], fetch).return_value = []
        with pytest.raises(ParsingError, match=message) as excinfo:
            getattr(parser, method)()
        assert isinstance(excinfo.value.original, EmptyResultError)

    def test_failure_logged_with_subject(
        self, parser: Parser, collaborators: dict[str, MagicMock], caplog: pytest.LogCaptureFixture
    ) -> None:
        collaborators["api_client"].get_player.side_effect = ResponseError("API Request Error: boom")
        with caplog.at_level(logging.ERROR, logger="brawl_sync"), pytest.raises(ParsingError):
            parser.parse_player("#2PP")
        assert any("Player with tag #2PP" in record.getMessage() for record in caplog.records)
