"""Subsonic API client module for music library access."""

__version__ = "1.0.0"

from .auth import create_auth_params, generate_salt, generate_token, verify_token
from .client import SubsonicClient
from .exceptions import (
    ClientVersionTooOldError,
    ServerVersionTooOldError,
    SubsonicAPIError,
    SubsonicAuthenticationError,
    SubsonicAuthorizationError,
    SubsonicConfigurationError,
    SubsonicDataNotFoundError,
    SubsonicError,
    SubsonicHTTPError,
    SubsonicInvalidAddressError,
    SubsonicInvalidResponseError,
    SubsonicNetworkError,
    SubsonicNotFoundError,
    SubsonicParameterError,
    SubsonicTrialError,
    SubsonicVersionError,
    TokenAuthenticationNotSupportedError,
)
from .models import (
    SubsonicAlbum,
    SubsonicArtist,
    SubsonicAuthToken,
    SubsonicPlaylist,
    SubsonicSearchResult,
    SubsonicSong,
)

__all__ = [
    # Client
    "SubsonicClient",
    # Models
    "SubsonicAuthToken",
    "SubsonicSong",
    "SubsonicArtist",
    "SubsonicAlbum",
    "SubsonicPlaylist",
    "SubsonicSearchResult",
    # Authentication
    "generate_salt",
    "generate_token",
    "verify_token",
    "create_auth_params",
    # Exceptions
    "SubsonicError",
    "SubsonicConfigurationError",
    "SubsonicInvalidAddressError",
    "SubsonicNetworkError",
    "SubsonicHTTPError",
    "SubsonicInvalidResponseError",
    "SubsonicDataNotFoundError",
    "SubsonicAPIError",
    "SubsonicAuthenticationError",
    "TokenAuthenticationNotSupportedError",
    "ClientVersionTooOldError",
    "ServerVersionTooOldError",
    "SubsonicAuthorizationError",
    "SubsonicNotFoundError",
    "SubsonicParameterError",
    "SubsonicTrialError",
    "SubsonicVersionError",
]
