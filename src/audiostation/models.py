"""Data models for Audio Station API responses."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def _as_int(value: Any) -> int:
    """Coerce an optional wire number to int, absent or malformed -> 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _as_str(value: Any) -> str:
    return "" if value is None else str(value)


def _identifier(data: Dict[str, Any]) -> str:
    # Some API versions omit "id" for artists and albums and key them by
    # name; the name is still the server's identifier.
    value = data.get("id")
    if value is None or value == "":
        value = data["name"]
    return str(value)


def format_duration(seconds: int) -> str:
    """Format seconds as ``m:ss``."""
    return f"{seconds // 60}:{seconds % 60:02d}"


@dataclass
class SongTag:
    """Tag block from ``additional.song_tag``."""

    title: str = ""
    album: str = ""
    album_artist: str = ""
    artist: str = ""
    composer: str = ""
    genre: str = ""
    comment: str = ""
    disc: int = 0
    track: int = 0
    year: int = 0
    duration: int = 0

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SongTag":
        data = data or {}
        return cls(
            title=_as_str(data.get("title")),
            album=_as_str(data.get("album")),
            album_artist=_as_str(data.get("album_artist")),
            artist=_as_str(data.get("artist")),
            composer=_as_str(data.get("composer")),
            genre=_as_str(data.get("genre")),
            comment=_as_str(data.get("comment")),
            disc=_as_int(data.get("disc")),
            track=_as_int(data.get("track")),
            year=_as_int(data.get("year")),
            duration=_as_int(data.get("duration")),
        )


@dataclass
class SongAudio:
    """Audio block from ``additional.song_audio``."""

    bitrate: int = 0
    channel: int = 0
    codec: str = ""
    container: str = ""
    duration: int = 0
    filesize: int = 0
    frequency: int = 0

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SongAudio":
        data = data or {}
        return cls(
            bitrate=_as_int(data.get("bitrate")),
            channel=_as_int(data.get("channel")),
            codec=_as_str(data.get("codec")),
            container=_as_str(data.get("container")),
            duration=_as_int(data.get("duration")),
            filesize=_as_int(data.get("filesize")),
            frequency=_as_int(data.get("frequency")),
        )


@dataclass
class Song:
    """Song (track) record.

    Depending on the API version the descriptive fields arrive at top level
    or only inside ``additional``; top-level values win.

    Attributes:
        id: Server-assigned song identifier
        title: Song title
        path: File path on the NAS
        artist: Artist name (falls back to album artist)
        album: Album name
        track: Track number, 0 when unknown
        duration: Duration in seconds, 0 when unknown
    """

    id: str
    title: str = ""
    path: str = ""
    type: str = ""
    artist: str = ""
    album: str = ""
    genre: str = ""
    year: int = 0
    track: int = 0
    duration: int = 0
    tag: SongTag = field(default_factory=SongTag)
    audio: SongAudio = field(default_factory=SongAudio)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Song":
        additional = data.get("additional") or {}
        tag = SongTag.from_dict(additional.get("song_tag"))
        audio = SongAudio.from_dict(additional.get("song_audio"))
        return cls(
            id=str(data["id"]),
            title=_as_str(data.get("title")) or tag.title,
            path=_as_str(data.get("path")),
            type=_as_str(data.get("type")),
            artist=_as_str(data.get("artist")) or tag.artist or tag.album_artist,
            album=_as_str(data.get("album")) or tag.album,
            genre=_as_str(data.get("genre")) or tag.genre,
            year=_as_int(data.get("year")) or tag.year,
            track=_as_int(data.get("track")) or tag.track,
            duration=_as_int(data.get("duration")) or audio.duration or tag.duration,
            tag=tag,
            audio=audio,
        )

    @property
    def formatted_duration(self) -> str:
        return format_duration(self.duration)


@dataclass
class Album:
    """Album record.

    Attributes:
        id: Server-assigned album identifier
        name: Album name
        title: Optional display title
        album_artist: Album artist
        artist: Track artist
        year: Release year, 0 when unknown
        duration: Total duration in seconds from the tag block, 0 when unknown
    """

    id: str
    name: str
    title: str = ""
    album_artist: str = ""
    artist: str = ""
    display_artist: str = ""
    year: int = 0
    duration: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Album":
        additional = data.get("additional") or {}
        tag = SongTag.from_dict(additional.get("song_tag"))
        return cls(
            id=_identifier(data),
            name=_as_str(data.get("name")),
            title=_as_str(data.get("title")),
            album_artist=_as_str(data.get("album_artist")),
            artist=_as_str(data.get("artist")),
            display_artist=_as_str(data.get("display_artist")),
            year=_as_int(data.get("year")) or tag.year,
            duration=tag.duration,
        )

    @property
    def display_name(self) -> str:
        return self.title or self.name

    @property
    def artist_name(self) -> str:
        return self.album_artist or self.display_artist or self.artist


@dataclass
class Artist:
    """Artist record with the number of albums the server reports."""

    id: str
    name: str
    album_count: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Artist":
        return cls(
            id=_identifier(data),
            name=_as_str(data.get("name")),
            album_count=_as_int(data.get("album_count")),
        )


@dataclass
class Playlist:
    """Playlist record; ``songs`` is filled only by the detail call, in order."""

    id: str
    name: str
    type: str = ""
    library: str = ""
    songs: List[Song] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Playlist":
        additional = data.get("additional") or {}
        songs = [Song.from_dict(song) for song in additional.get("songs") or []]
        return cls(
            id=_identifier(data),
            name=_as_str(data.get("name")),
            type=_as_str(data.get("type")),
            library=_as_str(data.get("library")),
            songs=songs,
        )

    @property
    def duration(self) -> int:
        return sum(song.duration for song in self.songs)


@dataclass
class SearchResult:
    """Aggregate search result; each list is empty when the server omitted it."""

    songs: List[Song] = field(default_factory=list)
    albums: List[Album] = field(default_factory=list)
    artists: List[Artist] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.songs or self.albums or self.artists)


@dataclass
class ServerInfo:
    """Audio Station package information."""

    version: str
    path: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ServerInfo":
        return cls(version=_as_str(data.get("version")), path=_as_str(data.get("path")))


@dataclass
class RemotePlayer:
    """Playback device Audio Station can stream to."""

    id: str
    name: str
    type: str = ""
    status: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RemotePlayer":
        return cls(
            id=str(data["id"]),
            name=_as_str(data.get("name")),
            type=_as_str(data.get("type")),
            status=_as_str(data.get("status")),
        )
