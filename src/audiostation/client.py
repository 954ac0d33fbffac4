"""Async HTTP client for the Synology Audio Station web API."""

import json
import logging
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

import httpx

from ..common.connectivity import ConnectivityState
from ..common.settings import ServerConfiguration, SettingsStore, normalize_address
from ..common.transport import (
    REQUEST_TIMEOUT,
    HttpMethod,
    build_request,
    mask_secrets,
    resolve_url,
)
from . import endpoints
from .endpoints import Endpoint
from .exceptions import (
    AudioStationAPIError,
    AudioStationAuthenticationError,
    AudioStationHTTPError,
    AudioStationInvalidAddressError,
    AudioStationInvalidResponseError,
    AudioStationNetworkError,
    AudioStationNotFoundError,
    describe_error_code,
)
from .models import (
    Album,
    Artist,
    Playlist,
    RemotePlayer,
    SearchResult,
    ServerInfo,
    Song,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Settings keys for the persisted connection triple.
BASE_URL_KEY = "AudioStation_BaseURL"
USERNAME_KEY = "AudioStation_Username"
PASSWORD_KEY = "AudioStation_Password"

ARTIST_LIMIT = 10000
ALBUM_LIMIT = 10000
PLAYLIST_LIMIT = 100000
SONG_LIMIT = 1000


class AudioStationClient:
    """Async client for Synology Audio Station.

    Authentication is session based: ``login()`` obtains a ``sid`` which is
    attached as ``_sid`` to every later call and to the stream and cover
    URLs. The session is dropped by ``logout()``, by a failed ``ping()`` and
    by ``configure()``.

    Callers are expected to serialize ``configure``, ``login`` and
    ``logout``; the client does no locking of its own.

    Attributes:
        settings: Store the connection triple is persisted to
        connectivity: Observable connected flag for UI observers

    Example:
        >>> async with AudioStationClient() as client:
        ...     client.configure("nas.local:5001", "admin", "secret")
        ...     await client.login()
        ...     songs = await client.get_album_songs("42")
        ...     url = client.stream_url(songs[0].id)
    """

    def __init__(
        self,
        settings: Optional[SettingsStore] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        loop=None,
    ):
        """Initialize the client and load the persisted configuration.

        Args:
            settings: Settings store (default: the user settings file)
            http_client: Pre-built httpx.AsyncClient; owned and closed by
                the caller when given
            loop: Event loop observers of ``connectivity`` expect to be
                notified on
        """
        self.settings = settings if settings is not None else SettingsStore()
        self._config = self.settings.load_configuration(BASE_URL_KEY, USERNAME_KEY, PASSWORD_KEY)
        self.connectivity = ConnectivityState(loop)
        self._session_id = ""

        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=REQUEST_TIMEOUT, follow_redirects=True
        )

        logger.debug(f"Initialized Audio Station client for {self._config.address or '<unconfigured>'}")

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http.aclose()
        logger.debug("Closed Audio Station client")

    async def __aenter__(self) -> "AudioStationClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    # Configuration

    def configure(self, address: str, username: str, password: str) -> None:
        """Set and persist the server address and credentials.

        The address is normalized (see ``normalize_address``); username and
        password are stripped of surrounding whitespace. Any current session
        belongs to the previous server and is discarded.
        """
        self._config = ServerConfiguration(
            address=normalize_address(address),
            username=username.strip(),
            password=password.strip(),
        )
        self.settings.save_configuration(self._config, BASE_URL_KEY, USERNAME_KEY, PASSWORD_KEY)
        self._clear_session()
        logger.info(f"Audio Station configured for {self._config.address}")

    def get_configuration(self) -> ServerConfiguration:
        return self._config

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def is_connected(self) -> bool:
        return self.connectivity.is_connected

    def is_session_valid(self) -> bool:
        return bool(self._session_id) and self.connectivity.is_connected

    def _clear_session(self) -> None:
        self._session_id = ""
        self.connectivity.set(False)

    # Request execution

    def _resolve(self, path: str) -> httpx.URL:
        url = resolve_url(self._config.address, path)
        if url is None:
            raise AudioStationInvalidAddressError()
        return url

    async def _make_request(
        self,
        path: str,
        params: Dict[str, str],
        method: HttpMethod = HttpMethod.GET,
    ) -> bytes:
        """Execute one request and return the raw response body.

        Raises:
            AudioStationInvalidAddressError: Address does not form a URL
            AudioStationNetworkError: Transport failure or timeout
            AudioStationHTTPError: Status other than 200
        """
        url = self._resolve(path)
        request = build_request(self._http, method, url, params)
        logger.debug(f"{method.value} {mask_secrets(request.url)}")

        try:
            response = await self._http.send(request)
        except httpx.RequestError as e:
            logger.error(f"Audio Station request to {path} failed: {e}")
            raise AudioStationNetworkError(f"Network connection error: {e}") from e

        if response.status_code != 200:
            logger.error(f"Audio Station returned HTTP {response.status_code} for {path}")
            raise AudioStationHTTPError(response.status_code)

        return response.content

    @staticmethod
    def _decode_json(data: bytes) -> Dict[str, Any]:
        try:
            payload = json.loads(data)
        except ValueError as e:
            raise AudioStationInvalidResponseError(f"Invalid server response: {e}") from e
        if not isinstance(payload, dict):
            raise AudioStationInvalidResponseError("Invalid server response: expected a JSON object")
        return payload

    @staticmethod
    def _error_details(payload: Dict[str, Any]):
        error = payload.get("error")
        if not isinstance(error, dict):
            return None, None
        code = error.get("code")
        code = code if isinstance(code, int) and not isinstance(code, bool) else None
        message = error.get("message")
        message = message if isinstance(message, str) and message else None
        return code, message

    def _require_session(self) -> None:
        if not self._session_id:
            raise AudioStationAuthenticationError("Not logged in")

    async def _call(
        self,
        endpoint: Endpoint,
        params: Dict[str, str],
        fallback_message: str,
    ) -> Dict[str, Any]:
        """Run an authenticated call and return the decoded success envelope.

        Raises:
            AudioStationAuthenticationError: No session
            AudioStationAPIError: ``success`` is not true
        """
        self._require_session()

        request_params = endpoint.base_params()
        request_params.update(params)
        request_params["_sid"] = self._session_id

        data = await self._make_request(endpoint.path, request_params, endpoint.http_method)
        payload = self._decode_json(data)

        if payload.get("success") is not True:
            code, message = self._error_details(payload)
            message = message or describe_error_code(code) or fallback_message
            logger.error(f"Audio Station {endpoint.api}.{endpoint.selector} failed: {message} (code {code})")
            raise AudioStationAPIError(message, code)

        return payload

    @staticmethod
    def _data_object(payload: Dict[str, Any]) -> Dict[str, Any]:
        data = payload.get("data")
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _decode_list(
        items: Any,
        factory: Callable[[Dict[str, Any]], T],
        what: str,
    ) -> List[T]:
        if items is None:
            return []
        if not isinstance(items, list):
            raise AudioStationInvalidResponseError(f"Could not decode {what}: expected a list")
        try:
            return [factory(item) for item in items]
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise AudioStationInvalidResponseError(f"Could not decode {what}: {e!r}") from e

    @staticmethod
    def _decode_one(item: Any, model: Type[T], what: str) -> T:
        try:
            return model.from_dict(item)
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise AudioStationInvalidResponseError(f"Could not decode {what}: {e!r}") from e

    # Authentication

    async def login(self) -> bool:
        """Log in and store the session id.

        Account and password travel as plain query parameters; only the
        outer TLS layer, when the address is https, protects them.

        Returns:
            True on success

        Raises:
            AudioStationInvalidAddressError: No usable server address
            AudioStationAuthenticationError: Server rejected the credentials
            AudioStationInvalidResponseError: Neither a session nor an error
                could be read from the response
            AudioStationNetworkError: Transport failure
            AudioStationHTTPError: Status other than 200
        """
        params = endpoints.LOGIN.base_params()
        params["account"] = self._config.username
        params["passwd"] = self._config.password

        logger.info(f"Logging in to Audio Station at {self._config.address} as {self._config.username}")
        data = await self._make_request(endpoints.LOGIN.path, params, endpoints.LOGIN.http_method)
        payload = self._decode_json(data)

        session = payload.get("data")
        sid = session.get("sid") if isinstance(session, dict) else None
        if payload.get("success") is True and isinstance(sid, str) and sid:
            self._session_id = sid
            self.connectivity.set(True)
            logger.info("Audio Station login successful")
            return True

        code, message = self._error_details(payload)
        if code is not None:
            message = message or describe_error_code(code) or "Login failed"
            logger.error(f"Audio Station login rejected: {message} (code {code})")
            raise AudioStationAuthenticationError(message, code)

        logger.error("Audio Station login response carried neither a session nor an error")
        raise AudioStationInvalidResponseError()

    async def logout(self) -> None:
        """End the session.

        The server is told on a best-effort basis: transport and HTTP errors
        are logged and ignored. The local session and connectivity flag are
        cleared in every case.
        """
        if not self._session_id:
            self.connectivity.set(False)
            return

        params = endpoints.LOGOUT.base_params()
        params["_sid"] = self._session_id

        try:
            await self._make_request(endpoints.LOGOUT.path, params, endpoints.LOGOUT.http_method)
            logger.info("Audio Station logout successful")
        except (AudioStationNetworkError, AudioStationHTTPError) as e:
            logger.warning(f"Audio Station logout not acknowledged, clearing session anyway: {e}")
        finally:
            self._clear_session()

    async def ping(self) -> bool:
        """Check connectivity by performing a full login.

        Any failure clears the session and the connectivity flag before the
        error is re-raised.
        """
        try:
            return await self.login()
        except Exception:
            self._clear_session()
            raise

    # Server information

    async def get_info(self) -> ServerInfo:
        """Get Audio Station version and install path."""
        payload = await self._call(endpoints.INFO, {}, "Failed to get server info")
        data = payload.get("data")
        if not isinstance(data, dict):
            raise AudioStationNotFoundError("Server info missing from response")
        return self._decode_one(data, ServerInfo, "server info")

    async def get_remote_players(self) -> List[RemotePlayer]:
        """List the remote playback devices known to Audio Station."""
        payload = await self._call(
            endpoints.REMOTE_PLAYER_LIST, {"type": "all"}, "Failed to get remote players"
        )
        players = self._decode_list(
            self._data_object(payload).get("players"), RemotePlayer.from_dict, "remote players"
        )
        logger.info(f"Retrieved {len(players)} remote players")
        return players

    # Playlists

    async def get_playlists(self) -> List[Playlist]:
        """Get all playlists of every library (without their songs)."""
        payload = await self._call(
            endpoints.PLAYLIST_LIST,
            {"library": "all", "limit": str(PLAYLIST_LIMIT)},
            "Failed to get playlists",
        )
        playlists = self._decode_list(
            self._data_object(payload).get("playlists"), Playlist.from_dict, "playlists"
        )
        logger.info(f"Retrieved {len(playlists)} playlists")
        return playlists

    async def get_playlist(self, playlist_id: str) -> Playlist:
        """Get one playlist with its songs in playlist order.

        Raises:
            AudioStationNotFoundError: The playlist is not in the response
        """
        payload = await self._call(
            endpoints.PLAYLIST_INFO,
            {
                "id": playlist_id,
                "library": "all",
                "additional": endpoints.PLAYLIST_SONG_ADDITIONAL,
            },
            "Failed to get playlist",
        )
        playlists = self._decode_list(
            self._data_object(payload).get("playlists"), Playlist.from_dict, "playlist"
        )
        if not playlists:
            raise AudioStationNotFoundError(f"Playlist {playlist_id} not found")

        playlist = playlists[0]
        logger.info(f"Retrieved playlist {playlist.name} with {len(playlist.songs)} songs")
        return playlist

    # Artists

    async def get_artists(self) -> List[Artist]:
        """Get all artists. A response without an artist list yields []."""
        payload = await self._call(
            endpoints.ARTIST_LIST, {"limit": str(ARTIST_LIMIT)}, "Failed to get artists"
        )
        data = self._data_object(payload)
        if "artists" not in data:
            logger.warning("No artists field in response, returning empty list")
        artists = self._decode_list(data.get("artists"), Artist.from_dict, "artists")
        logger.info(f"Retrieved {len(artists)} artists")
        return artists

    async def get_artist(self, artist_id: str) -> Artist:
        """Get one artist by id, looked up in the artist list.

        Raises:
            AudioStationNotFoundError: No artist with that id
        """
        for artist in await self.get_artists():
            if artist.id == artist_id:
                return artist
        raise AudioStationNotFoundError(f"Artist {artist_id} not found")

    async def get_artist_songs(self, artist_id: str) -> List[Song]:
        """Get songs of one artist."""
        payload = await self._call(
            endpoints.SONG_LIST,
            {
                "artist": artist_id,
                "limit": str(SONG_LIMIT),
                "additional": endpoints.SONG_ADDITIONAL,
            },
            "Failed to get artist songs",
        )
        songs = self._decode_list(self._songs_of(payload), Song.from_dict, "songs")
        logger.info(f"Retrieved {len(songs)} songs for artist {artist_id}")
        return songs

    # Albums

    async def get_albums(self) -> List[Album]:
        """Get all albums. A response without an album list yields []."""
        payload = await self._call(
            endpoints.ALBUM_LIST,
            {"limit": str(ALBUM_LIMIT), "additional": endpoints.SONG_ADDITIONAL},
            "Failed to get albums",
        )
        data = self._data_object(payload)
        if "albums" not in data:
            logger.warning("No albums field in response, returning empty list")
        albums = self._decode_list(data.get("albums"), Album.from_dict, "albums")
        logger.info(f"Retrieved {len(albums)} albums")
        return albums

    async def get_album(self, album_id: str) -> Album:
        """Get album details.

        Raises:
            AudioStationNotFoundError: The album is not in the response
        """
        payload = await self._call(
            endpoints.ALBUM_INFO,
            {"id": album_id, "additional": endpoints.SONG_ADDITIONAL},
            "Failed to get album details",
        )
        album = self._data_object(payload).get("album")
        if not isinstance(album, dict):
            raise AudioStationNotFoundError(f"Album {album_id} not found")
        return self._decode_one(album, Album, "album")

    async def get_album_songs(self, album_id: str) -> List[Song]:
        """Get songs of one album, ordered by track number (missing = 0)."""
        payload = await self._call(
            endpoints.SONG_LIST,
            {
                "album": album_id,
                "limit": str(SONG_LIMIT),
                "additional": endpoints.SONG_ADDITIONAL,
            },
            "Failed to get album songs",
        )
        songs = self._decode_list(self._songs_of(payload), Song.from_dict, "songs")
        songs.sort(key=lambda song: song.track)
        logger.info(f"Retrieved {len(songs)} songs for album {album_id}")
        return songs

    # Songs

    @classmethod
    def _songs_of(cls, payload: Dict[str, Any]) -> Any:
        # Older servers put the song list at the top level.
        data = cls._data_object(payload)
        if "songs" in data:
            return data["songs"]
        return payload.get("songs")

    async def get_songs(self, limit: int = SONG_LIMIT) -> List[Song]:
        """Get up to ``limit`` songs from all libraries."""
        payload = await self._call(
            endpoints.SONG_LIST,
            {
                "library": "all",
                "limit": str(limit),
                "additional": endpoints.SONG_ADDITIONAL,
            },
            "Failed to get songs",
        )
        songs = self._decode_list(self._songs_of(payload), Song.from_dict, "songs")
        logger.info(f"Retrieved {len(songs)} songs")
        return songs

    # Search

    async def search(self, query: str) -> SearchResult:
        """Search songs, albums and artists by keyword.

        Each result list is decoded only when the server sent it; missing
        lists are empty rather than an error.
        """
        payload = await self._call(
            endpoints.SEARCH,
            {"keyword": query, "additional": endpoints.SONG_ADDITIONAL},
            "Search failed",
        )
        data = self._data_object(payload)
        result = SearchResult(
            songs=self._decode_list(data.get("songs"), Song.from_dict, "songs"),
            albums=self._decode_list(data.get("albums"), Album.from_dict, "albums"),
            artists=self._decode_list(data.get("artists"), Artist.from_dict, "artists"),
        )
        logger.info(
            f"Search '{query}' found {len(result.songs)} songs, "
            f"{len(result.albums)} albums, {len(result.artists)} artists"
        )
        return result

    # Media URLs

    def _media_url(self, endpoint: Endpoint, params: Dict[str, str]) -> Optional[str]:
        if not self._session_id:
            return None
        url = resolve_url(self._config.address, endpoint.path)
        if url is None:
            return None

        query = endpoint.base_params()
        query.update(params)
        query["_sid"] = self._session_id
        return str(url.copy_merge_params(query))

    def stream_url(self, song_id: str) -> Optional[str]:
        """URL streaming the original file, or None without a session."""
        return self._media_url(endpoints.STREAM, {"id": song_id})

    def transcoded_stream_url(
        self, song_id: str, format: str = "mp3", bitrate: int = 320
    ) -> Optional[str]:
        """URL streaming a server-side transcode, or None without a session."""
        return self._media_url(
            endpoints.TRANSCODE,
            {"id": song_id, "format": format, "bitrate": str(bitrate)},
        )

    def cover_art_url(self, item_id: str, size: int = 300) -> Optional[str]:
        """Cover image URL for a song or album id, or None without a session."""
        return self._media_url(endpoints.COVER, {"id": item_id, "size": str(size)})

    def album_cover_url(self, album_name: str, artist_name: str) -> Optional[str]:
        """Cover image URL addressed by album and album artist name."""
        return self._media_url(
            endpoints.ALBUM_COVER,
            {
                "output_default": "true",
                "is_hr": "true",
                "library": "shared",
                "view": "default",
                "album_name": album_name,
                "album_artist_name": artist_name,
            },
        )
