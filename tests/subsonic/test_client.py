"""Tests for SubsonicClient.

All HTTP calls are served by httpx.MockTransport, routed on the REST
endpoint name. No real server requests are made.
"""

from typing import Any, Dict

import httpx
import pytest

from src.common.settings import SettingsStore
from src.subsonic.auth import compute_token
from src.subsonic.client import SubsonicClient
from src.subsonic.exceptions import (
    SubsonicAPIError,
    SubsonicAuthenticationError,
    SubsonicConfigurationError,
    SubsonicDataNotFoundError,
    SubsonicHTTPError,
    SubsonicInvalidResponseError,
    SubsonicNetworkError,
    SubsonicNotFoundError,
)
from tests.helpers import FakeServer


def ok(**content: Any) -> Dict[str, Any]:
    return {"subsonic-response": {"status": "ok", "version": "1.16.1", **content}}


def failed(code: int, message: str = None) -> Dict[str, Any]:
    error = {"code": code}
    if message is not None:
        error["message"] = message
    return {"subsonic-response": {"status": "failed", "version": "1.16.1", "error": error}}


def route(request: httpx.Request) -> str:
    return request.url.path.rsplit("/", 1)[-1]


def make_client(settings: SettingsStore, responses: Dict[str, Any]):
    server = FakeServer(route, responses)
    client = SubsonicClient(settings=settings, http_client=server.http_client())
    client.configure("music.example.com", "john", "secret")
    return client, server


class TestConfiguration:
    def test_configure_persists_and_reloads(self, settings: SettingsStore):
        client, _ = make_client(settings, {})
        client.configure(" https://music.example.com/ ", " john ", " secret ")

        assert client.is_configured()
        store = SettingsStore(settings.path)
        assert store.get("SubsonicServerURL") == "https://music.example.com"
        assert store.get("SubsonicUsername") == "john"
        assert store.get("SubsonicPassword") == "secret"
        assert SubsonicClient(settings=store, http_client=httpx.AsyncClient()).get_configuration() == (
            client.get_configuration()
        )

    def test_unconfigured_client(self, settings: SettingsStore):
        client = SubsonicClient(settings=settings, http_client=httpx.AsyncClient())

        assert not client.is_configured()
        assert client.stream_url("1") is None
        assert client.cover_art_url("1") is None

    @pytest.mark.asyncio
    async def test_request_without_configuration(self, settings: SettingsStore):
        server = FakeServer(route, {})
        client = SubsonicClient(settings=settings, http_client=server.http_client())

        with pytest.raises(SubsonicConfigurationError):
            await client.ping()

        assert server.requests == []


class TestPing:
    @pytest.mark.asyncio
    async def test_ping_sends_auth_params(self, settings: SettingsStore):
        client, server = make_client(settings, {"ping": ok()})

        assert await client.ping() is True
        assert client.is_connected is True

        request = server.requests[0]
        assert request.method == "GET"
        assert request.url.path == "/rest/ping"
        params = request.url.params
        assert params["u"] == "john"
        assert params["v"] == "1.16.1"
        assert params["c"] == "CassoFlow"
        assert params["f"] == "json"
        assert params["t"] == compute_token("secret", params["s"])
        assert "p" not in params

    @pytest.mark.asyncio
    async def test_each_request_uses_a_fresh_salt(self, settings: SettingsStore):
        client, server = make_client(settings, {"ping": ok()})

        await client.ping()
        await client.ping()
        await client.ping()

        salts = {r.url.params["s"] for r in server.requests}
        assert len(salts) > 1

    @pytest.mark.asyncio
    async def test_ping_auth_failure_clears_flag(self, settings: SettingsStore):
        client, server = make_client(settings, {"ping": ok()})
        await client.ping()
        server.responses["ping"] = failed(40, "Wrong username or password")

        with pytest.raises(SubsonicAuthenticationError) as exc_info:
            await client.ping()

        assert exc_info.value.code == 40
        assert client.is_connected is False

    @pytest.mark.asyncio
    async def test_ping_network_failure_clears_flag(self, settings: SettingsStore):
        def timeout(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client, server = make_client(settings, {"ping": ok()})
        await client.ping()
        server.responses["ping"] = timeout

        with pytest.raises(SubsonicNetworkError):
            await client.ping()

        assert client.is_connected is False

    @pytest.mark.asyncio
    async def test_failed_status_without_message(self, settings: SettingsStore):
        client, _ = make_client(settings, {"ping": failed(0)})

        with pytest.raises(SubsonicAPIError) as exc_info:
            await client.ping()

        assert str(exc_info.value) == "Subsonic Error 0: Unknown error"

    @pytest.mark.asyncio
    async def test_http_error(self, settings: SettingsStore):
        client, _ = make_client(settings, {"ping": httpx.Response(503)})

        with pytest.raises(SubsonicHTTPError) as exc_info:
            await client.ping()

        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_missing_envelope_is_invalid_response(self, settings: SettingsStore):
        client, _ = make_client(settings, {"ping": {"status": "ok"}})

        with pytest.raises(SubsonicInvalidResponseError):
            await client.ping()


class TestBrowsing:
    @pytest.mark.asyncio
    async def test_get_artists_flattens_index(self, settings: SettingsStore):
        client, server = make_client(
            settings,
            {
                "getArtists": ok(
                    artists={
                        "ignoredArticles": "The El La",
                        "index": [
                            {"name": "A", "artist": [{"id": "1", "name": "ABBA", "albumCount": 8}]},
                            {
                                "name": "B",
                                "artist": [
                                    {"id": "2", "name": "Beatles", "albumCount": 13},
                                    {"id": "3", "name": "Björk", "albumCount": 9},
                                ],
                            },
                        ],
                    }
                )
            },
        )

        artists = await client.get_artists()

        assert [a.name for a in artists] == ["ABBA", "Beatles", "Björk"]
        assert "musicFolderId" not in server.requests[0].url.params

    @pytest.mark.asyncio
    async def test_get_artists_with_music_folder(self, settings: SettingsStore):
        client, server = make_client(settings, {"getArtists": ok(artists={})})

        assert await client.get_artists(music_folder_id="3") == []
        assert server.requests[0].url.params["musicFolderId"] == "3"

    @pytest.mark.asyncio
    async def test_get_album_songs_sorted_by_track(self, settings: SettingsStore):
        client, _ = make_client(
            settings,
            {
                "getAlbum": ok(
                    album={
                        "id": "200",
                        "name": "Kind of Blue",
                        "song": [
                            {"id": "c", "title": "Flamenco Sketches", "track": 5},
                            {"id": "x", "title": "Bonus"},
                            {"id": "a", "title": "So What", "track": 1},
                            {"id": "b", "title": "Freddie Freeloader", "track": 2},
                        ],
                    }
                )
            },
        )

        songs = await client.get_album_songs("200")

        assert [s.id for s in songs] == ["x", "a", "b", "c"]

    @pytest.mark.asyncio
    async def test_get_album_missing_is_data_not_found(self, settings: SettingsStore):
        client, _ = make_client(settings, {"getAlbum": ok()})

        with pytest.raises(SubsonicDataNotFoundError):
            await client.get_album("200")

    @pytest.mark.asyncio
    async def test_get_album_server_not_found(self, settings: SettingsStore):
        client, _ = make_client(settings, {"getAlbum": failed(70, "Album not found")})

        with pytest.raises(SubsonicNotFoundError):
            await client.get_album("nope")

    @pytest.mark.asyncio
    async def test_get_artist_songs_in_album_order(self, settings: SettingsStore):
        albums = {
            "a1": {"id": "a1", "name": "First", "song": [{"id": "2", "track": 2}, {"id": "1", "track": 1}]},
            "a2": {"id": "a2", "name": "Second", "song": [{"id": "3", "track": 1}]},
        }

        def get_album(request: httpx.Request) -> Dict[str, Any]:
            return ok(album=albums[request.url.params["id"]])

        client, server = make_client(
            settings,
            {
                "getArtist": ok(artist={"id": "100", "name": "Band", "album": [{"id": "a1", "name": "First"}, {"id": "a2", "name": "Second"}]}),
                "getAlbum": get_album,
            },
        )

        songs = await client.get_artist_songs("100")

        assert [s.id for s in songs] == ["1", "2", "3"]
        assert [r.url.params["id"] for r in server.requests_for("getAlbum")] == ["a1", "a2"]

    @pytest.mark.asyncio
    async def test_single_objects_in_place_of_lists(self, settings: SettingsStore):
        client, _ = make_client(
            settings,
            {
                "getArtists": ok(artists={"index": {"name": "A", "artist": {"id": "1", "name": "Abba"}}}),
                "getAlbumList2": ok(albumList2={"album": {"id": "2", "name": "Arrival"}}),
                "getRandomSongs": ok(randomSongs={"song": {"id": "3", "title": "Dancing Queen"}}),
                "getPlaylists": ok(playlists={"playlist": {"id": "4", "name": "Disco"}}),
            },
        )

        artists = await client.get_artists()
        albums = await client.get_album_list2("newest")
        songs = await client.get_random_songs()
        playlists = await client.get_playlists()

        assert [a.name for a in artists] == ["Abba"]
        assert [a.name for a in albums] == ["Arrival"]
        assert [s.title for s in songs] == ["Dancing Queen"]
        assert [p.name for p in playlists] == ["Disco"]

    @pytest.mark.asyncio
    async def test_get_album_list2(self, settings: SettingsStore):
        client, server = make_client(
            settings, {"getAlbumList2": ok(albumList2={"album": [{"id": "1", "name": "New"}]})}
        )

        albums = await client.get_album_list2("newest", size=5, offset=10)

        assert [a.name for a in albums] == ["New"]
        params = server.requests[0].url.params
        assert params["type"] == "newest"
        assert params["size"] == "5"
        assert params["offset"] == "10"

    @pytest.mark.asyncio
    async def test_get_random_songs(self, settings: SettingsStore):
        client, server = make_client(
            settings, {"getRandomSongs": ok(randomSongs={"song": [{"id": "1", "title": "Any"}]})}
        )

        songs = await client.get_random_songs(size=1000)

        assert [s.title for s in songs] == ["Any"]
        assert server.requests[0].url.params["size"] == "500"

    @pytest.mark.asyncio
    async def test_playlists(self, settings: SettingsStore):
        client, _ = make_client(
            settings,
            {
                "getPlaylists": ok(playlists={"playlist": [{"id": "15", "name": "Late Night", "songCount": 2}]}),
                "getPlaylist": ok(
                    playlist={
                        "id": "15",
                        "name": "Late Night",
                        "entry": [{"id": "b", "track": 9}, {"id": "a", "track": 1}],
                    }
                ),
            },
        )

        playlists = await client.get_playlists()
        playlist = await client.get_playlist("15")

        assert playlists[0].songCount == 2
        assert [e.id for e in playlist.entries] == ["b", "a"]


class TestSearchAndScrobble:
    @pytest.mark.asyncio
    async def test_search3_counts_and_results(self, settings: SettingsStore):
        client, server = make_client(
            settings,
            {"search3": ok(searchResult3={"album": [{"id": "1", "name": "Blue Train"}]})},
        )

        result = await client.search3("blue", song_count=25)

        assert [a.name for a in result.albums] == ["Blue Train"]
        assert result.songs == []
        params = server.requests[0].url.params
        assert params["query"] == "blue"
        assert params["artistCount"] == "10"
        assert params["albumCount"] == "10"
        assert params["songCount"] == "25"

    @pytest.mark.asyncio
    async def test_search3_without_result_is_empty(self, settings: SettingsStore):
        client, _ = make_client(settings, {"search3": ok()})

        result = await client.search3("nothing")

        assert result.is_empty()

    @pytest.mark.asyncio
    async def test_scrobble_sends_milliseconds(self, settings: SettingsStore, mocker):
        mocker.patch("src.subsonic.client.time.time", return_value=1700000000.5)
        client, server = make_client(settings, {"scrobble": ok()})

        assert await client.scrobble("300") is True
        await client.scrobble("301", time_ms=1234, submission=False)

        first, second = server.requests
        assert first.url.params["id"] == "300"
        assert first.url.params["time"] == "1700000000500"
        assert first.url.params["submission"] == "true"
        assert second.url.params["time"] == "1234"
        assert second.url.params["submission"] == "false"


class TestMediaUrls:
    def test_stream_url(self, settings: SettingsStore):
        client, _ = make_client(settings, {})

        url = httpx.URL(client.stream_url("300", max_bit_rate=192, format="mp3"))

        assert url.host == "music.example.com"
        assert url.path == "/rest/stream"
        assert url.params["id"] == "300"
        assert url.params["maxBitRate"] == "192"
        assert url.params["format"] == "mp3"
        assert url.params["t"] == compute_token("secret", url.params["s"])

    def test_stream_url_omits_unset_options(self, settings: SettingsStore):
        client, _ = make_client(settings, {})

        url = httpx.URL(client.stream_url("300"))

        assert "maxBitRate" not in url.params
        assert "format" not in url.params

    def test_cover_art_url(self, settings: SettingsStore):
        client, _ = make_client(settings, {})

        url = httpx.URL(client.cover_art_url("al-200", size=600))

        assert url.path == "/rest/getCoverArt"
        assert url.params["id"] == "al-200"
        assert url.params["size"] == "600"
