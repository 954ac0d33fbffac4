"""Async HTTP client for Subsonic API v1.16.1."""

import json
import logging
import time
from typing import Any, Callable, Dict, List, Optional, TypeVar

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
from .auth import API_VERSION, CLIENT_NAME, create_auth_params
from .exceptions import (
    SubsonicConfigurationError,
    SubsonicDataNotFoundError,
    SubsonicHTTPError,
    SubsonicInvalidAddressError,
    SubsonicInvalidResponseError,
    SubsonicNetworkError,
    api_error_for,
)
from .models import (
    SubsonicAlbum,
    SubsonicArtist,
    SubsonicPlaylist,
    SubsonicSearchResult,
    SubsonicSong,
    entries_of,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Settings keys for the persisted connection triple.
SERVER_URL_KEY = "SubsonicServerURL"
USERNAME_KEY = "SubsonicUsername"
PASSWORD_KEY = "SubsonicPassword"


class SubsonicClient:
    """Async HTTP client for Subsonic API v1.16.1.

    This client implements the Subsonic REST API with:
    - Token-based authentication (MD5 salt+hash), recomputed per request
    - Typed exceptions for every Subsonic error code
    - Typed models for artists, albums, songs, playlists and search results
    - Stream and cover art URLs for an external media loader

    There is no session: every request carries ``u, t, s, v, c, f=json``.
    ``ping()`` checks connectivity and drives ``connectivity``.

    Attributes:
        settings: Store the connection triple is persisted to
        connectivity: Observable connected flag for UI observers

    Example:
        >>> async with SubsonicClient() as client:
        ...     client.configure("music.example.com", "john", "secret")
        ...     if await client.ping():
        ...         albums = await client.get_album_list2("newest", size=20)
        ...         songs = await client.get_album_songs(albums[0].id)
    """

    def __init__(
        self,
        settings: Optional[SettingsStore] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        loop=None,
        client_name: str = CLIENT_NAME,
        api_version: str = API_VERSION,
    ):
        """Initialize Subsonic API client and load the persisted configuration.

        Args:
            settings: Settings store (default: the user settings file)
            http_client: Pre-built httpx.AsyncClient; owned and closed by
                the caller when given
            loop: Event loop observers of ``connectivity`` expect to be
                notified on
            client_name: Client identifier sent as ``c``
            api_version: Protocol version sent as ``v``
        """
        self.settings = settings if settings is not None else SettingsStore()
        self._config = self.settings.load_configuration(SERVER_URL_KEY, USERNAME_KEY, PASSWORD_KEY)
        self.connectivity = ConnectivityState(loop)
        self.client_name = client_name
        self.api_version = api_version

        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=REQUEST_TIMEOUT, follow_redirects=True
        )

        logger.debug(f"Initialized Subsonic client for {self._config.address or '<unconfigured>'}")

    async def aclose(self) -> None:
        """Close HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http.aclose()
        logger.debug("Closed Subsonic client")

    async def __aenter__(self) -> "SubsonicClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    # Configuration

    def configure(self, address: str, username: str, password: str) -> None:
        """Set and persist the server address and credentials.

        The address is normalized (see ``normalize_address``); username and
        password are stripped of surrounding whitespace.
        """
        self._config = ServerConfiguration(
            address=normalize_address(address),
            username=username.strip(),
            password=password.strip(),
        )
        self.settings.save_configuration(self._config, SERVER_URL_KEY, USERNAME_KEY, PASSWORD_KEY)
        logger.info(f"Subsonic configured for {self._config.address}")

    def get_configuration(self) -> ServerConfiguration:
        return self._config

    def is_configured(self) -> bool:
        return self._config.is_complete()

    @property
    def is_connected(self) -> bool:
        return self.connectivity.is_connected

    # Request execution

    def _auth_params(self) -> Dict[str, str]:
        return create_auth_params(
            self._config.username,
            self._config.password,
            api_version=self.api_version,
            client_name=self.client_name,
        )

    def _build_url(self, endpoint: str) -> Optional[httpx.URL]:
        """Build full URL for API endpoint (``/rest/<endpoint>``)."""
        return resolve_url(self._config.address, f"/rest/{endpoint}")

    def _build_params(self, **kwargs) -> Dict[str, str]:
        """Build query parameters: fresh auth params plus non-None endpoint params."""
        params = self._auth_params()
        for key, value in kwargs.items():
            if value is None:
                continue
            if isinstance(value, bool):
                value = "true" if value else "false"
            params[key] = str(value)
        return params

    async def _make_request(self, endpoint: str, **kwargs) -> bytes:
        """Execute one authenticated GET and return the raw response body.

        Raises:
            SubsonicConfigurationError: Address, username or password missing
            SubsonicInvalidAddressError: Address does not form a URL
            SubsonicNetworkError: Transport failure or timeout
            SubsonicHTTPError: Status other than 200
        """
        if not self.is_configured():
            raise SubsonicConfigurationError()

        url = self._build_url(endpoint)
        if url is None:
            raise SubsonicInvalidAddressError()

        request = build_request(self._http, HttpMethod.GET, url, self._build_params(**kwargs))
        logger.debug(f"GET {mask_secrets(request.url)}")

        try:
            response = await self._http.send(request)
        except httpx.RequestError as e:
            logger.error(f"Subsonic request {endpoint} failed: {e}")
            raise SubsonicNetworkError(f"Network connection error: {e}") from e

        if response.status_code != 200:
            logger.error(f"Subsonic returned HTTP {response.status_code} for {endpoint}")
            raise SubsonicHTTPError(response.status_code)

        return response.content

    def _handle_response(self, data: bytes) -> Dict[str, Any]:
        """Parse and validate a Subsonic API response.

        Args:
            data: Raw response body

        Returns:
            The content of the ``subsonic-response`` object

        Raises:
            SubsonicInvalidResponseError: Body is not a subsonic-response envelope
            SubsonicAPIError: (or a code specific subclass) for ``status != "ok"``
        """
        try:
            payload = json.loads(data)
        except ValueError as e:
            raise SubsonicInvalidResponseError(f"Invalid server response: {e}") from e

        subsonic_response = payload.get("subsonic-response") if isinstance(payload, dict) else None
        if not isinstance(subsonic_response, dict):
            raise SubsonicInvalidResponseError("Invalid server response: missing subsonic-response")

        if subsonic_response.get("status") != "ok":
            error = subsonic_response.get("error")
            error = error if isinstance(error, dict) else {}
            code = error.get("code", 0)
            code = code if isinstance(code, int) and not isinstance(code, bool) else 0
            message = error.get("message") or "Unknown error"

            logger.error(f"Subsonic API error {code}: {message}")
            raise api_error_for(code, str(message))

        return subsonic_response

    async def _call(self, endpoint: str, **kwargs) -> Dict[str, Any]:
        return self._handle_response(await self._make_request(endpoint, **kwargs))

    @staticmethod
    def _decode(factory: Callable[[Any], T], data: Any, what: str) -> T:
        try:
            return factory(data)
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise SubsonicInvalidResponseError(f"Could not decode {what}: {e!r}") from e

    def _decode_entity(self, data: Dict[str, Any], key: str, factory: Callable[[Any], T], what: str) -> T:
        entity = data.get(key)
        if not isinstance(entity, dict):
            raise SubsonicDataNotFoundError(f"{what} not found in response")
        return self._decode(factory, entity, what)

    # Connectivity

    async def ping(self) -> bool:
        """Test server connectivity and authentication.

        Sets the connectivity flag on success. Any failure clears it and the
        error is re-raised.

        Returns:
            True if ping successful

        Raises:
            SubsonicAuthenticationError: If credentials are invalid
            SubsonicNetworkError: For network errors
        """
        logger.debug(f"Pinging Subsonic server at {self._config.address}")
        try:
            await self._call("ping")
        except Exception:
            self.connectivity.set(False)
            raise

        self.connectivity.set(True)
        logger.info("Subsonic ping successful")
        return True

    # Artists

    async def get_artists(self, music_folder_id: Optional[str] = None) -> List[SubsonicArtist]:
        """Get all artists using ID3 browsing (getArtists endpoint).

        The alphabetical index groups are flattened in server order.

        Args:
            music_folder_id: Optional music folder ID to filter artists
        """
        data = await self._call("getArtists", musicFolderId=music_folder_id)

        def flatten(artists_data: Any) -> List[SubsonicArtist]:
            artists = []
            for index in entries_of(artists_data or {}, "index"):
                for artist in entries_of(index, "artist"):
                    artists.append(SubsonicArtist.from_dict(artist))
            return artists

        artists = self._decode(flatten, data.get("artists"), "artists")
        logger.info(f"Retrieved {len(artists)} artists")
        return artists

    async def get_artist(self, artist_id: str) -> SubsonicArtist:
        """Get artist details with albums (getArtist endpoint).

        Raises:
            SubsonicDataNotFoundError: Artist missing from the response
        """
        data = await self._call("getArtist", id=artist_id)
        artist = self._decode_entity(data, "artist", SubsonicArtist.from_dict, "Artist")
        logger.info(f"Retrieved artist {artist.name} with {len(artist.albums)} albums")
        return artist

    async def get_artist_songs(self, artist_id: str) -> List[SubsonicSong]:
        """Get every song of an artist.

        Albums are fetched one after another in the order getArtist lists
        them; songs keep album order and track order within each album.
        """
        artist = await self.get_artist(artist_id)
        songs: List[SubsonicSong] = []
        for album in artist.albums:
            songs.extend(await self.get_album_songs(album.id))
        logger.info(f"Retrieved {len(songs)} songs for artist {artist_id}")
        return songs

    # Albums

    async def get_album(self, album_id: str) -> SubsonicAlbum:
        """Get album details with songs (getAlbum endpoint).

        Raises:
            SubsonicDataNotFoundError: Album missing from the response
        """
        data = await self._call("getAlbum", id=album_id)
        album = self._decode_entity(data, "album", SubsonicAlbum.from_dict, "Album")
        logger.info(f"Retrieved album {album.name} with {len(album.songs)} songs")
        return album

    async def get_album_songs(self, album_id: str) -> List[SubsonicSong]:
        """Get album songs ordered by track number (missing = 0)."""
        album = await self.get_album(album_id)
        return sorted(album.songs, key=lambda song: song.track)

    async def get_album_list2(self, type: str, size: int = 10, offset: int = 0) -> List[SubsonicAlbum]:
        """Get a list of albums organized by ID3 tags (getAlbumList2).

        Args:
            type: List type, e.g. "newest", "random", "alphabeticalByName"
            size: Number of albums to return
            offset: List offset for paging
        """
        data = await self._call("getAlbumList2", type=type, size=size, offset=offset)

        def parse(album_list: Any) -> List[SubsonicAlbum]:
            return [SubsonicAlbum.from_dict(a) for a in entries_of(album_list or {}, "album")]

        albums = self._decode(parse, data.get("albumList2"), "album list")
        logger.info(f"Retrieved {len(albums)} albums ({type})")
        return albums

    # Songs

    async def get_random_songs(self, size: int = 10) -> List[SubsonicSong]:
        """Fetch random songs (getRandomSongs endpoint).

        Args:
            size: Number of songs to return (default: 10, max: 500)
        """
        data = await self._call("getRandomSongs", size=min(size, 500))

        def parse(container: Any) -> List[SubsonicSong]:
            return [SubsonicSong.from_dict(s) for s in entries_of(container or {}, "song")]

        songs = self._decode(parse, data.get("randomSongs"), "random songs")
        logger.info(f"Retrieved {len(songs)} random songs")
        return songs

    # Playlists

    async def get_playlists(self) -> List[SubsonicPlaylist]:
        """Get all playlists visible to the user (without entries)."""
        data = await self._call("getPlaylists")

        def parse(container: Any) -> List[SubsonicPlaylist]:
            return [SubsonicPlaylist.from_dict(p) for p in entries_of(container or {}, "playlist")]

        playlists = self._decode(parse, data.get("playlists"), "playlists")
        logger.info(f"Retrieved {len(playlists)} playlists")
        return playlists

    async def get_playlist(self, playlist_id: str) -> SubsonicPlaylist:
        """Get a playlist with its entries in playlist order.

        Raises:
            SubsonicDataNotFoundError: Playlist missing from the response
        """
        data = await self._call("getPlaylist", id=playlist_id)
        playlist = self._decode_entity(data, "playlist", SubsonicPlaylist.from_dict, "Playlist")
        logger.info(f"Retrieved playlist {playlist.name} with {len(playlist.entries)} entries")
        return playlist

    # Search

    async def search3(
        self,
        query: str,
        artist_count: int = 10,
        album_count: int = 10,
        song_count: int = 10,
    ) -> SubsonicSearchResult:
        """Search artists, albums and songs (search3 endpoint).

        A successful response without ``searchResult3`` yields an empty result.

        Args:
            query: Search query string
            artist_count: Maximum number of artists to return
            album_count: Maximum number of albums to return
            song_count: Maximum number of songs to return
        """
        data = await self._call(
            "search3",
            query=query,
            artistCount=artist_count,
            albumCount=album_count,
            songCount=song_count,
        )
        result = self._decode(SubsonicSearchResult.from_dict, data.get("searchResult3"), "search result")
        logger.info(
            f"Search '{query}' found {len(result.artists)} artists, "
            f"{len(result.albums)} albums, {len(result.songs)} songs"
        )
        return result

    # Scrobbling

    async def scrobble(
        self,
        song_id: str,
        time_ms: Optional[int] = None,
        submission: bool = True,
    ) -> bool:
        """Register a play (or "now playing" when ``submission`` is False).

        Args:
            song_id: Song that was played
            time_ms: Play time in milliseconds since the epoch (default: now)
            submission: True for a finished play, False for now playing
        """
        if time_ms is None:
            time_ms = int(time.time() * 1000)
        await self._call("scrobble", id=song_id, time=time_ms, submission=submission)
        logger.debug(f"Scrobbled {song_id} (submission={submission})")
        return True

    # Media URLs

    def _media_url(self, endpoint: str, **kwargs) -> Optional[str]:
        if not self.is_configured():
            return None
        url = self._build_url(endpoint)
        if url is None:
            return None
        return str(url.copy_merge_params(self._build_params(**kwargs)))

    def stream_url(
        self,
        song_id: str,
        max_bit_rate: Optional[int] = None,
        format: Optional[str] = None,
    ) -> Optional[str]:
        """Streaming URL with fresh auth params, or None when unconfigured.

        Example:
            >>> client.stream_url("12345")
            'https://music.example.com/rest/stream?u=john&t=...&s=...&id=12345'
        """
        return self._media_url("stream", id=song_id, maxBitRate=max_bit_rate, format=format)

    def cover_art_url(self, cover_art_id: str, size: Optional[int] = None) -> Optional[str]:
        """Cover art URL with fresh auth params, or None when unconfigured."""
        return self._media_url("getCoverArt", id=cover_art_id, size=size)
