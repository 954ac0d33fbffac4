"""Per-endpoint wire constants for the Audio Station web API.

Audio Station endpoints disagree on whether the operation is selected with
``method=`` or ``action=``, on API version, and on GET versus POST. The
differences follow the server's undocumented API versioning and are kept
exactly as listed here rather than unified.
"""

from dataclasses import dataclass
from typing import Dict

from ..common.transport import HttpMethod

AUTH_PATH = "/webapi/auth.cgi"
INFO_PATH = "/webapi/AudioStation/info.cgi"
SONG_PATH = "/webapi/AudioStation/song.cgi"
ALBUM_PATH = "/webapi/AudioStation/album.cgi"
ARTIST_PATH = "/webapi/AudioStation/artist.cgi"
PLAYLIST_PATH = "/webapi/AudioStation/playlist.cgi"
REMOTE_PLAYER_PATH = "/webapi/AudioStation/remote_player.cgi"
COVER_PATH = "/webapi/AudioStation/cover.cgi"
STREAM_PATH = "/webapi/AudioStation/stream.cgi"
SEARCH_PATH = "/webapi/AudioStation/search.cgi"


@dataclass(frozen=True)
class Endpoint:
    """Wire description of one Audio Station operation.

    Attributes:
        path: CGI path below the server address
        api: Value of the ``api`` parameter
        version: Value of the ``version`` parameter
        selector_key: ``method`` or ``action``
        selector: Operation name sent under ``selector_key``
        http_method: GET or POST form (URL builders always use GET)
    """

    path: str
    api: str
    version: int
    selector_key: str
    selector: str
    http_method: HttpMethod = HttpMethod.GET

    def base_params(self) -> Dict[str, str]:
        """Parameters every call to this endpoint carries."""
        return {
            "api": self.api,
            "version": str(self.version),
            self.selector_key: self.selector,
        }


LOGIN = Endpoint(AUTH_PATH, "SYNO.API.Auth", 6, "method", "Login")
LOGOUT = Endpoint(AUTH_PATH, "SYNO.API.Auth", 6, "method", "Logout")
INFO = Endpoint(INFO_PATH, "SYNO.AudioStation.Info", 1, "method", "getinfo")
PLAYLIST_LIST = Endpoint(
    PLAYLIST_PATH, "SYNO.AudioStation.Playlist", 1, "method", "list", HttpMethod.POST
)
PLAYLIST_INFO = Endpoint(
    PLAYLIST_PATH, "SYNO.AudioStation.Playlist", 1, "method", "getinfo", HttpMethod.POST
)
ARTIST_LIST = Endpoint(
    ARTIST_PATH, "SYNO.AudioStation.Artist", 2, "action", "list", HttpMethod.POST
)
ALBUM_LIST = Endpoint(
    ALBUM_PATH, "SYNO.AudioStation.Album", 2, "action", "list", HttpMethod.POST
)
ALBUM_INFO = Endpoint(
    ALBUM_PATH, "SYNO.AudioStation.Album", 2, "action", "getinfo", HttpMethod.POST
)
SONG_LIST = Endpoint(
    SONG_PATH, "SYNO.AudioStation.Song", 2, "method", "list", HttpMethod.POST
)
SEARCH = Endpoint(
    SEARCH_PATH, "SYNO.AudioStation.Search", 1, "method", "search", HttpMethod.POST
)
REMOTE_PLAYER_LIST = Endpoint(
    REMOTE_PLAYER_PATH, "SYNO.AudioStation.RemotePlayer", 2, "method", "list"
)
STREAM = Endpoint(STREAM_PATH, "SYNO.AudioStation.Stream", 2, "method", "stream")
TRANSCODE = Endpoint(STREAM_PATH, "SYNO.AudioStation.Stream", 2, "method", "transcode")
COVER = Endpoint(COVER_PATH, "SYNO.AudioStation.Cover", 1, "action", "getcover")
ALBUM_COVER = Endpoint(COVER_PATH, "SYNO.AudioStation.Cover", 3, "method", "getcover")

# Extra data requested alongside songs and albums.
SONG_ADDITIONAL = "song_tag,song_audio"
PLAYLIST_SONG_ADDITIONAL = "songs,songs_song_tag,songs_song_audio"
