"""Pieces shared by the Audio Station and Subsonic clients."""

from .connectivity import ConnectivityState
from .settings import (
    ServerConfiguration,
    SettingsStore,
    default_settings_path,
    normalize_address,
)
from .transport import REQUEST_TIMEOUT, HttpMethod, build_request, mask_secrets, resolve_url

__all__ = [
    "ConnectivityState",
    "ServerConfiguration",
    "SettingsStore",
    "default_settings_path",
    "normalize_address",
    "REQUEST_TIMEOUT",
    "HttpMethod",
    "build_request",
    "mask_secrets",
    "resolve_url",
]
