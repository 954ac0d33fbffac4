"""Exception classes for the Audio Station client."""

from typing import Optional

# Error codes shared by every SYNO.* web API, plus the auth specific ones.
SYNOLOGY_ERROR_CODES = {
    100: "Unknown error",
    101: "No parameter of API, method or version",
    102: "The requested API does not exist",
    103: "The requested method does not exist",
    104: "The requested version does not support this functionality",
    105: "The logged in session does not have permission",
    106: "Session timeout",
    107: "Session interrupted by duplicate login",
    400: "No such account or incorrect password",
    401: "Account disabled",
    402: "Permission denied",
    403: "2-step verification code required",
    404: "Failed to authenticate 2-step verification code",
}


def describe_error_code(code: Optional[int]) -> Optional[str]:
    """Return the well-known description for a Synology error code."""
    if code is None:
        return None
    return SYNOLOGY_ERROR_CODES.get(code)


class AudioStationError(Exception):
    """Base exception for all Audio Station client errors."""


class AudioStationInvalidAddressError(AudioStationError):
    """The configured server address cannot form a valid URL."""

    def __init__(self, message: str = "Invalid server address"):
        super().__init__(message)


class AudioStationNetworkError(AudioStationError):
    """The transport layer failed (connection refused, DNS, timeout...)."""

    def __init__(self, message: str = "Network connection error"):
        super().__init__(message)


class AudioStationHTTPError(AudioStationError):
    """The server answered with a status other than 200.

    Attributes:
        status_code: HTTP status returned by the server
    """

    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"HTTP error: {status_code}")


class AudioStationAuthenticationError(AudioStationError):
    """Login was rejected, or an authenticated call was made without a session.

    Attributes:
        message: Server supplied (or local) reason
        code: Synology error code when the server sent one
    """

    def __init__(self, message: str, code: Optional[int] = None):
        self.message = message
        self.code = code
        if code is not None:
            super().__init__(f"Authentication failed: {message} (code {code})")
        else:
            super().__init__(f"Authentication failed: {message}")


class AudioStationAPIError(AudioStationError):
    """The server reported ``success: false`` for a catalog call.

    Attributes:
        message: Server message, well-known code description, or endpoint fallback
        code: Synology error code when the server sent one
    """

    def __init__(self, message: str, code: Optional[int] = None):
        self.message = message
        self.code = code
        super().__init__(f"API error: {message}")


class AudioStationNotFoundError(AudioStationError):
    """The requested entity is absent from an otherwise successful response."""

    def __init__(self, message: str = "Requested data not found"):
        super().__init__(message)


class AudioStationInvalidResponseError(AudioStationError):
    """The response body could not be decoded into the expected shape."""

    def __init__(self, message: str = "Invalid server response"):
        super().__init__(message)
