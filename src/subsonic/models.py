"""Data models for Subsonic API integration.

Attribute names follow the camelCase keys of the Subsonic JSON payloads.
Numbers the server leaves out default to 0 and strings to "".
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


def _as_int(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _as_str(value: Any) -> str:
    return "" if value is None else str(value)


def entries_of(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    # Some servers send a single object instead of a one-element list.
    value = data.get(key)
    if value is None:
        return []
    if isinstance(value, dict):
        return [value]
    return list(value)


@dataclass
class SubsonicAuthToken:
    """Authentication token for Subsonic API using MD5 salt+hash method.

    Attributes:
        token: MD5(password + salt)
        salt: Random salt string
        username: Username for this token
        created_at: Token creation timestamp
    """

    token: str
    salt: str
    username: str
    created_at: datetime

    def to_auth_params(self) -> Dict[str, str]:
        """Convert to authentication query parameters.

        Returns:
            Dict with u (username), t (token), s (salt)
        """
        return {"u": self.username, "t": self.token, "s": self.salt}


@dataclass
class SubsonicSong:
    """Song (child) entry from getAlbum, getPlaylist, search3 and friends.

    Attributes:
        id: Unique song identifier
        title: Song title
        artist: Artist name
        album: Album name
        track: Track number (0 when unknown)
        duration: Duration in seconds (0 when unknown)
        path: File path on server
    """

    id: str
    title: str
    artist: str = ""
    album: str = ""
    track: int = 0
    duration: int = 0
    path: str = ""
    parent: str = ""
    albumId: str = ""
    artistId: str = ""
    isDir: bool = False
    year: int = 0
    genre: str = ""
    coverArt: str = ""
    size: int = 0
    contentType: str = ""
    suffix: str = ""
    bitRate: int = 0
    playCount: int = 0
    discNumber: int = 0
    created: str = ""
    type: str = ""
    starred: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SubsonicSong":
        return cls(
            id=str(data["id"]),
            title=_as_str(data.get("title")),
            artist=_as_str(data.get("artist")),
            album=_as_str(data.get("album")),
            track=_as_int(data.get("track")),
            duration=_as_int(data.get("duration")),
            path=_as_str(data.get("path")),
            parent=_as_str(data.get("parent")),
            albumId=_as_str(data.get("albumId")),
            artistId=_as_str(data.get("artistId")),
            isDir=bool(data.get("isDir", False)),
            year=_as_int(data.get("year")),
            genre=_as_str(data.get("genre")),
            coverArt=_as_str(data.get("coverArt")),
            size=_as_int(data.get("size")),
            contentType=_as_str(data.get("contentType")),
            suffix=_as_str(data.get("suffix")),
            bitRate=_as_int(data.get("bitRate")),
            playCount=_as_int(data.get("playCount")),
            discNumber=_as_int(data.get("discNumber")),
            created=_as_str(data.get("created")),
            type=_as_str(data.get("type")),
            starred=_as_str(data.get("starred")),
        )

    @property
    def formatted_duration(self) -> str:
        """Duration as ``m:ss``."""
        return f"{self.duration // 60}:{self.duration % 60:02d}"


@dataclass
class SubsonicAlbum:
    """Album metadata from getAlbum, getAlbumList2 and getArtist.

    ``songs`` is only populated by getAlbum.
    """

    id: str
    name: str
    artist: str = ""
    artistId: str = ""
    coverArt: str = ""
    songCount: int = 0
    duration: int = 0
    playCount: int = 0
    created: str = ""
    starred: str = ""
    year: int = 0
    genre: str = ""
    songs: List[SubsonicSong] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SubsonicAlbum":
        return cls(
            id=str(data["id"]),
            name=_as_str(data.get("name")),
            artist=_as_str(data.get("artist")),
            artistId=_as_str(data.get("artistId")),
            coverArt=_as_str(data.get("coverArt")),
            songCount=_as_int(data.get("songCount")),
            duration=_as_int(data.get("duration")),
            playCount=_as_int(data.get("playCount")),
            created=_as_str(data.get("created")),
            starred=_as_str(data.get("starred")),
            year=_as_int(data.get("year")),
            genre=_as_str(data.get("genre")),
            songs=[SubsonicSong.from_dict(song) for song in entries_of(data, "song")],
        )


@dataclass
class SubsonicArtist:
    """Artist metadata from getArtists/getArtist.

    ``albums`` is only populated by getArtist.
    """

    id: str
    name: str
    albumCount: int = 0
    coverArt: str = ""
    artistImageUrl: str = ""
    starred: str = ""
    albums: List[SubsonicAlbum] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SubsonicArtist":
        return cls(
            id=str(data["id"]),
            name=_as_str(data.get("name")),
            albumCount=_as_int(data.get("albumCount")),
            coverArt=_as_str(data.get("coverArt")),
            artistImageUrl=_as_str(data.get("artistImageUrl")),
            starred=_as_str(data.get("starred")),
            albums=[SubsonicAlbum.from_dict(album) for album in entries_of(data, "album")],
        )


@dataclass
class SubsonicPlaylist:
    """Playlist from getPlaylists/getPlaylist.

    ``entries`` keeps the server's playlist order and is only populated by
    getPlaylist.
    """

    id: str
    name: str
    comment: str = ""
    owner: str = ""
    public: bool = False
    songCount: int = 0
    duration: int = 0
    created: str = ""
    changed: str = ""
    coverArt: str = ""
    entries: List[SubsonicSong] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SubsonicPlaylist":
        return cls(
            id=str(data["id"]),
            name=_as_str(data.get("name")),
            comment=_as_str(data.get("comment")),
            owner=_as_str(data.get("owner")),
            public=bool(data.get("public", False)),
            songCount=_as_int(data.get("songCount")),
            duration=_as_int(data.get("duration")),
            created=_as_str(data.get("created")),
            changed=_as_str(data.get("changed")),
            coverArt=_as_str(data.get("coverArt")),
            entries=[SubsonicSong.from_dict(song) for song in entries_of(data, "entry")],
        )


@dataclass
class SubsonicSearchResult:
    """search3 result; every list defaults to empty."""

    artists: List[SubsonicArtist] = field(default_factory=list)
    albums: List[SubsonicAlbum] = field(default_factory=list)
    songs: List[SubsonicSong] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SubsonicSearchResult":
        data = data or {}
        return cls(
            artists=[SubsonicArtist.from_dict(a) for a in entries_of(data, "artist")],
            albums=[SubsonicAlbum.from_dict(a) for a in entries_of(data, "album")],
            songs=[SubsonicSong.from_dict(s) for s in entries_of(data, "song")],
        )

    def is_empty(self) -> bool:
        return not (self.artists or self.albums or self.songs)
