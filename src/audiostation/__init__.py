"""Synology Audio Station client module."""

__version__ = "1.0.0"

from .client import AudioStationClient
from .exceptions import (
    AudioStationAPIError,
    AudioStationAuthenticationError,
    AudioStationError,
    AudioStationHTTPError,
    AudioStationInvalidAddressError,
    AudioStationInvalidResponseError,
    AudioStationNetworkError,
    AudioStationNotFoundError,
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

__all__ = [
    # Client
    "AudioStationClient",
    # Models
    "Song",
    "Album",
    "Artist",
    "Playlist",
    "SearchResult",
    "ServerInfo",
    "RemotePlayer",
    # Exceptions
    "AudioStationError",
    "AudioStationInvalidAddressError",
    "AudioStationNetworkError",
    "AudioStationHTTPError",
    "AudioStationAuthenticationError",
    "AudioStationAPIError",
    "AudioStationNotFoundError",
    "AudioStationInvalidResponseError",
]
