"""Tests for the AMC vendor API client."""

import httpx
import pytest

from amcmcp.exceptions import AMCAPIError, AMCNetworkError
from amcmcp.services.amc_client import LOCATIONS_REL, AMCClient
from amcmcp.tools import AMCTools

# ---------------------------------------------------------------------------
# Sample fixture data
# ---------------------------------------------------------------------------

DUNE = {"id": 71234, "name": "Dune: Part Two", "runTime": 166, "mpaaRating": "PG13"}
BATMAN = {"id": "movie_001", "title": "The Batman", "runtime": 176}

CENTURY_CITY = {
    "id": 610,
    "name": "AMC Century City 15",
    "location": {"addressLine1": "10250 Santa Monica Blvd", "city": "Los Angeles", "postalCode": "90067"},
}

SUGGESTIONS = {
    "_embedded": {
        "suggestions": [
            {
                "name": "90210",
                "_links": {
                    LOCATIONS_REL: {
                        "href": "https://api.amctheatres.com/v2/locations?latitude=34.09&longitude=-118.41"
                    }
                },
            }
        ]
    }
}

LOCATIONS = {
    "_embedded": {
        "locations": [
            {"distance": 2.5, "_embedded": {"theatre": CENTURY_CITY}},
            {"distance": 4.0, "_embedded": {"theatre": {"id": 611}}},
        ]
    }
}

SHOWTIMES = {
    "_embedded": {
        "showtimes": [
            {"id": 1001, "movieId": 71234, "movieName": "Dune: Part Two", "showDateTimeUtc": "2024-01-16T03:00:00Z"}
        ]
    }
}


class TestConstruction:
    def test_requires_api_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("amcmcp.services.amc_client.settings.amc_api_key", "")
        with pytest.raises(ValueError, match="AMC API key is required"):
            AMCClient()

    async def test_sends_vendor_key_header(self, amc_client_factory) -> None:
        calls: list[httpx.Request] = []
        client = amc_client_factory({"/movies/views/now-playing": {"_embedded": {"movies": []}}}, calls)

        await client.fetch_now_playing()

        assert calls[0].headers["X-AMC-Vendor-Key"] == "test-key"
        assert calls[0].headers["Accept"] == "application/json"


# ---------------------------------------------------------------------------
# Movies
# ---------------------------------------------------------------------------


class TestMovies:
    @pytest.mark.parametrize(
        "payload",
        [
            {"_embedded": {"movies": [DUNE, BATMAN]}},
            {"movies": [DUNE, BATMAN]},
            {"data": [DUNE, BATMAN]},
            [DUNE, BATMAN],
        ],
        ids=["hal", "keyed", "data", "bare-list"],
    )
    async def test_now_playing_accepts_every_envelope(self, amc_client_factory, payload) -> None:
        client = amc_client_factory({"/movies/views/now-playing": payload})

        movies = await client.fetch_now_playing()

        assert [m.title for m in movies] == ["Dune: Part Two", "The Batman"]

    async def test_unknown_envelope_gives_empty_list(self, amc_client_factory) -> None:
        client = amc_client_factory({"/movies/views/now-playing": {"count": 0}})
        assert await client.fetch_now_playing() == []

    async def test_other_views_use_their_paths(self, amc_client_factory) -> None:
        calls: list[httpx.Request] = []
        empty = {"_embedded": {"movies": []}}
        client = amc_client_factory(
            {
                "/movies/views/coming-soon": empty,
                "/movies/views/advance": empty,
                "/movies/views/all/active": {"_embedded": {"movies": [DUNE]}},
            },
            calls,
        )

        assert await client.fetch_coming_soon() == []
        assert await client.fetch_advance() == []
        assert len(await client.fetch_all_active()) == 1
        assert [c.url.path for c in calls] == [
            "/v2/movies/views/coming-soon",
            "/v2/movies/views/advance",
            "/v2/movies/views/all/active",
        ]

    async def test_fetch_movie_by_id(self, amc_client_factory) -> None:
        client = amc_client_factory({"/movies/71234": DUNE})
        movie = await client.fetch_movie_by_id("71234")
        assert movie.id == "71234"


# ---------------------------------------------------------------------------
# Theaters
# ---------------------------------------------------------------------------


class TestTheatersByZip:
    async def test_resolves_zip_to_coordinates(self, amc_client_factory) -> None:
        calls: list[httpx.Request] = []
        client = amc_client_factory(
            {"/location-suggestions": SUGGESTIONS, "/locations": LOCATIONS}, calls
        )

        theaters = await client.fetch_theaters_by_zip("90210")

        # The entry without a name is skipped
        assert [t.name for t in theaters] == ["AMC Century City 15"]
        assert theaters[0].distance == 2.5
        assert calls[0].url.params["query"] == "90210"
        assert calls[1].url.params["latitude"] == "34.09"
        assert calls[1].url.params["longitude"] == "-118.41"

    async def test_falls_back_to_zip_search(self, amc_client_factory) -> None:
        calls: list[httpx.Request] = []
        client = amc_client_factory(
            {
                "/location-suggestions": {"_embedded": {"suggestions": []}},
                "/theatres": {"theatres": [CENTURY_CITY]},
            },
            calls,
        )

        theaters = await client.fetch_theaters_by_zip("90210")

        assert [t.id for t in theaters] == ["610"]
        assert calls[-1].url.path == "/v2/theatres"
        assert calls[-1].url.params["zipCode"] == "90210"
        assert calls[-1].url.params["radius"] == "25"

    async def test_suggestion_without_coordinates_falls_back(self, amc_client_factory) -> None:
        client = amc_client_factory(
            {
                "/location-suggestions": {"_embedded": {"suggestions": [{"name": "90210", "_links": {}}]}},
                "/theatres": [CENTURY_CITY],
            }
        )
        theaters = await client.fetch_theaters_by_zip("90210")
        assert len(theaters) == 1

    async def test_fetch_theater_by_id(self, amc_client_factory) -> None:
        client = amc_client_factory({"/theatres/610": CENTURY_CITY})
        theater = await client.fetch_theater_by_id("610")
        assert theater.address.city == "Los Angeles"


# ---------------------------------------------------------------------------
# Showtimes
# ---------------------------------------------------------------------------


class TestShowtimes:
    async def test_date_is_part_of_the_path(self, amc_client_factory) -> None:
        calls: list[httpx.Request] = []
        client = amc_client_factory({"/theatres/610/showtimes/2024-01-15": SHOWTIMES}, calls)

        showtimes = await client.fetch_showtimes("610", "2024-01-15")

        assert [s.id for s in showtimes] == ["1001"]
        assert not calls[0].url.params

    async def test_no_showtimes(self, amc_client_factory) -> None:
        client = amc_client_factory({"/theatres/610/showtimes/2024-01-15": {"_embedded": {}}})
        assert await client.fetch_showtimes("610", "2024-01-15") == []


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    async def test_error_status_uses_body_message(self, amc_client_factory) -> None:
        client = amc_client_factory(
            {"/movies/views/now-playing": httpx.Response(401, json={"message": "Invalid vendor key"})}
        )

        with pytest.raises(AMCAPIError) as exc_info:
            await client.fetch_now_playing()

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Invalid vendor key"

    async def test_error_status_without_message(self, amc_client_factory) -> None:
        client = amc_client_factory({"/movies/views/now-playing": httpx.Response(503, text="down")})

        with pytest.raises(AMCAPIError) as exc_info:
            await client.fetch_now_playing()

        assert exc_info.value.message == "AMC API request failed"

    async def test_transport_failure_is_network_error(self, amc_client_factory) -> None:
        client = amc_client_factory({"/movies/views/now-playing": httpx.ConnectError("refused")})

        with pytest.raises(AMCNetworkError):
            await client.fetch_now_playing()

    async def test_non_json_body(self, amc_client_factory) -> None:
        client = amc_client_factory({"/movies/views/now-playing": httpx.Response(200, text="<html>")})

        with pytest.raises(AMCAPIError):
            await client.fetch_now_playing()


class TestValidateKey:
    async def test_valid_key(self, amc_client_factory) -> None:
        calls: list[httpx.Request] = []
        client = amc_client_factory({"/movies/views/now-playing": {"_embedded": {"movies": []}}}, calls)

        assert await client.validate_key() is True
        assert calls[0].url.params["limit"] == "1"

    async def test_rejected_key(self, amc_client_factory) -> None:
        client = amc_client_factory({"/movies/views/now-playing": httpx.Response(401, json={})})
        assert await client.validate_key() is False

    async def test_unreachable_api(self, amc_client_factory) -> None:
        client = amc_client_factory({"/movies/views/now-playing": httpx.ConnectTimeout("timeout")})
        assert await client.validate_key() is False


# ---------------------------------------------------------------------------
# Malformed records
# ---------------------------------------------------------------------------


class TestMalformedRecords:
    async def test_bad_showtime_is_skipped(self, amc_client_factory) -> None:
        client = amc_client_factory(
            {
                "/theatres/610/showtimes/2024-01-15": {
                    "_embedded": {
                        "showtimes": [
                            {"id": 1001, "movieName": "Dune: Part Two", "showDateTimeUtc": "2024-01-16T03:00:00Z"},
                            {"id": 1002, "showDateTimeUtc": "2024-01-16T05:00:00Z", "runTime": "TBD"},
                            {"id": 1003, "availableSeats": "lots"},
                        ]
                    }
                }
            }
        )

        showtimes = await client.fetch_showtimes("610", "2024-01-15")

        assert [s.id for s in showtimes] == ["1001", "1002"]
        assert showtimes[1].end_date_time is None

    async def test_bad_movie_is_skipped(self, amc_client_factory) -> None:
        client = amc_client_factory(
            {"/movies/views/now-playing": {"_embedded": {"movies": [DUNE, {"id": 2, "name": "X", "runTime": "TBD"}]}}}
        )

        movies = await client.fetch_now_playing()

        assert [m.title for m in movies] == ["Dune: Part Two"]

    async def test_list_showtimes_survives_one_bad_record(self, amc_client_factory) -> None:
        client = amc_client_factory(
            {
                "/theatres/610": CENTURY_CITY,
                "/theatres/610/showtimes/2024-01-15": {
                    "_embedded": {"showtimes": [SHOWTIMES["_embedded"]["showtimes"][0], {"id": 1004, "availableSeats": "lots"}]}
                },
            }
        )
        tools = AMCTools(client=client)

        result = await tools.list_showtimes({"theaterId": "610", "date": "2024-01-15"})

        assert result.total_count == 1
        assert result.showtimes[0].id == "1001"
