"""Unit tests for brawl_sync.api (endpoint catalog, errors and APIClient)."""

from __future__ import annotations

import logging
from typing import Any

import httpx
import pytest

from brawl_sync.api.client import APIClient
from brawl_sync.api.endpoints import Endpoint
from brawl_sync.api.errors import BrawlSyncError, InvalidDTOError, ResponseError
from brawl_sync.dto import BrawlerDTO, ClubDTO, ClubMemberDTO, EventRotationDTO, PlayerDTO

BASE_URI = "https://api.test/v1"
API_KEY = "test-key"


@pytest.fixture
def client(fake_api: Any) -> APIClient:
    http_client = httpx.Client(transport=httpx.MockTransport(fake_api.handler))
    return APIClient(http_client, BASE_URI, API_KEY)


# ---------------------------------------------------------------------------
# Endpoint catalog
# ---------------------------------------------------------------------------


class TestEndpoint:
    @pytest.mark.smoke
    def test_every_endpoint_is_get(self) -> None:
        assert {endpoint.method for endpoint in Endpoint} == {"GET"}

    def test_build_uri_substitutes_parameters(self) -> None:
        uri = Endpoint.BRAWLER_BY_ID.build_uri("https://api.test/v1/", brawler_id=16000000)
        assert uri == "https://api.test/v1/brawlers/16000000"

    def test_tags_are_percent_encoded(self) -> None:
        assert Endpoint.CLUB_MEMBERS.build_uri(BASE_URI, club_tag="#2PP") == f"{BASE_URI}/clubs/%232PP/members"

    def test_missing_parameter_raises(self) -> None:
        with pytest.raises(KeyError):
            Endpoint.PLAYER_BY_TAG.build_uri(BASE_URI)


class TestErrors:
    def test_defaults(self) -> None:
        assert BrawlSyncError("x").code == 500
        assert InvalidDTOError("x").code == 400

    def test_response_error_from_exception(self) -> None:
        inner = httpx.ConnectError("refused")
        error = ResponseError.from_exception(inner)
        assert error.code == 500
        assert error.message == "API Request Error: refused"
        assert error.original is inner


# ---------------------------------------------------------------------------
# Successful fetches
# ---------------------------------------------------------------------------


class TestAPIClientFetch:
    """Each operation hits its endpoint and returns validated DTOs."""

    @pytest.mark.smoke
    def test_get_brawler(self, client: APIClient, fake_api: Any, brawler_payload: dict[str, Any]) -> None:
        fake_api.add("/brawlers/16000000", brawler_payload)
        dto = client.get_brawler(16000000)
        assert dto == BrawlerDTO.from_record(brawler_payload)

    def test_sends_auth_and_accept_headers(
        self, client: APIClient, fake_api: Any, brawler_payload: dict[str, Any]
    ) -> None:
        fake_api.add("/brawlers/16000000", brawler_payload)
        client.get_brawler(16000000)
        request = fake_api.requests[0]
        assert request.method == "GET"
        assert request.headers["Authorization"] == f"Bearer {API_KEY}"
        assert request.headers["Accept"] == "application/json"

    def test_get_brawlers_unwraps_items(
        self, client: APIClient, fake_api: Any, brawler_payload: dict[str, Any]
    ) -> None:
        fake_api.add("/brawlers", {"items": [brawler_payload], "paging": {"cursors": {}}})
        assert client.get_brawlers() == [BrawlerDTO.from_record(brawler_payload)]

    def test_get_events_rotation_reads_bare_list(
        self, client: APIClient, fake_api: Any, rotation_payload: list[dict[str, Any]]
    ) -> None:
        fake_api.add("/events/rotation", rotation_payload)
        assert client.get_events_rotation() == EventRotationDTO.from_list(rotation_payload)

    def test_get_club_encodes_tag(
        self, client: APIClient, fake_api: Any, club_payload: dict[str, Any]
    ) -> None:
        fake_api.add("/clubs/%23CLUB1", club_payload)
        assert client.get_club("#CLUB1") == ClubDTO.from_record(club_payload)

    def test_get_club_members(
        self, client: APIClient, fake_api: Any, club_payload: dict[str, Any]
    ) -> None:
        fake_api.add("/clubs/%23CLUB1/members", {"items": club_payload["members"]})
        members = client.get_club_members("#CLUB1")
        assert members == ClubMemberDTO.from_list(club_payload["members"])

    def test_get_player(self, client: APIClient, fake_api: Any, player_payload: dict[str, Any]) -> None:
        fake_api.add("/players/%232PP", player_payload)
        assert client.get_player("#2PP") == PlayerDTO.from_record(player_payload)


# ---------------------------------------------------------------------------
# Failure modes
# ---------------------------------------------------------------------------


class TestAPIClientFailures:
    def test_http_error_status_becomes_response_error(self, client: APIClient, fake_api: Any) -> None:
        fake_api.add("/brawlers/1", {"reason": "accessDenied"}, status=403)
        with pytest.raises(ResponseError) as excinfo:
            client.get_brawler(1)
        assert excinfo.value.code == 500
        assert excinfo.value.message.startswith("API Request Error:")
        assert isinstance(excinfo.value.original, httpx.HTTPStatusError)

    def test_transport_failure_becomes_response_error(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = APIClient(httpx.Client(transport=httpx.MockTransport(refuse)), BASE_URI, API_KEY)
        with pytest.raises(ResponseError, match="API Request Error: connection refused") as excinfo:
            client.get_brawlers()
        assert excinfo.value.code == 500

    def test_non_json_body(self, client: APIClient, fake_api: Any) -> None:
        fake_api.add("/brawlers", "<html>maintenance</html>")
        with pytest.raises(ResponseError) as excinfo:
            client.get_brawlers()
        assert excinfo.value.code == 400
        assert excinfo.value.message == "Invalid JSON response from API"

    @pytest.mark.smoke
    def test_malformed_payload_propagates_validation_error(self, client: APIClient, fake_api: Any) -> None:
        fake_api.add("/brawlers/16000000", {"invalid": "data"})
        with pytest.raises(InvalidDTOError):
            client.get_brawler(16000000)

    @pytest.mark.parametrize("payload", [{"invalid": "data"}, {"items": "nope"}, []])
    def test_list_endpoint_without_items(self, client: APIClient, fake_api: Any, payload: Any) -> None:
        fake_api.add("/brawlers", payload)
        with pytest.raises(InvalidDTOError, match="'items'"):
            client.get_brawlers()

    def test_rotation_must_be_a_list(self, client: APIClient, fake_api: Any) -> None:
        fake_api.add("/events/rotation", {"items": []})
        with pytest.raises(InvalidDTOError, match="expected a list"):
            client.get_events_rotation()

    def test_failures_logged_with_uri(
        self, client: APIClient, fake_api: Any, caplog: pytest.LogCaptureFixture
    ) -> None:
        fake_api.add("/players/%232PP", {"tag": "#2PP"})
        with caplog.at_level(logging.ERROR, logger="brawl_sync"), pytest.raises(InvalidDTOError):
            client.get_player("#2PP")
        assert any(f"{BASE_URI}/players/%232PP" in record.getMessage() for record in caplog.records)

    def test_success_not_logged_above_debug(
        self, client: APIClient, fake_api: Any, brawler_payload: dict[str, Any], caplog: pytest.LogCaptureFixture
    ) -> None:
        fake_api.add("/brawlers/16000000", brawler_payload)
        with caplog.at_level(logging.INFO, logger="brawl_sync"):
            client.get_brawler(16000000)
        assert [r for r in caplog.records if r.name.startswith("brawl_sync")] == []
