"""Exception classes for Subsonic API client."""

from typing import Dict, Type


class SubsonicError(Exception):
    """Base exception for all Subsonic client errors."""


class SubsonicConfigurationError(SubsonicError):
    """Server address, username or password has not been configured."""

    def __init__(self, message: str = "Subsonic server configuration is incomplete"):
        super().__init__(message)


class SubsonicInvalidAddressError(SubsonicError):
    """The configured server address cannot form a valid URL."""

    def __init__(self, message: str = "Invalid server URL"):
        super().__init__(message)


class SubsonicNetworkError(SubsonicError):
    """The transport layer failed (connection refused, DNS, timeout...)."""

    def __init__(self, message: str = "Network connection error"):
        super().__init__(message)


class SubsonicHTTPError(SubsonicError):
    """The server answered with a status other than 200.

    Attributes:
        status_code: HTTP status returned by the server
    """

    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"HTTP error: {status_code}")


class SubsonicInvalidResponseError(SubsonicError):
    """The response body is not a decodable ``subsonic-response`` envelope."""

    def __init__(self, message: str = "Invalid server response"):
        super().__init__(message)


class SubsonicDataNotFoundError(SubsonicError):
    """The requested entity is absent from an otherwise successful response."""

    def __init__(self, message: str = "Requested data not found"):
        super().__init__(message)


class SubsonicAPIError(SubsonicError):
    """Server returned ``status="failed"``.

    Attributes:
        code: Subsonic error code
        message: Error message from server
    """

    def __init__(self, code: int, message: str):
        """Initialize Subsonic API error.

        Args:
            code: Subsonic error code (0, 10, 20, 30, 40, 41, 42, 43, 44, 50, 60, 70)
            message: Human-readable error message
        """
        self.code = code
        self.message = message
        super().__init__(f"Subsonic Error {code}: {message}")


class SubsonicParameterError(SubsonicAPIError):
    """Required parameter missing (error code 10)."""


class SubsonicVersionError(SubsonicAPIError):
    """API version incompatibility (error codes 20, 30)."""


class SubsonicAuthenticationError(SubsonicAPIError):
    """Wrong username or password (error codes 40, 41)."""


class TokenAuthenticationNotSupportedError(SubsonicAPIError):
    """Token authentication not supported for LDAP users (code 42)."""


class ClientVersionTooOldError(SubsonicAPIError):
    """Client must upgrade (code 43)."""


class ServerVersionTooOldError(SubsonicAPIError):
    """Server must upgrade (code 44)."""


class SubsonicAuthorizationError(SubsonicAPIError):
    """User not authorized for requested action (error code 50)."""


class SubsonicTrialError(SubsonicAPIError):
    """Trial period expired (error code 60)."""


class SubsonicNotFoundError(SubsonicAPIError):
    """Requested resource not found (error code 70)."""


ERROR_CODE_EXCEPTIONS: Dict[int, Type[SubsonicAPIError]] = {
    10: SubsonicParameterError,
    20: SubsonicVersionError,
    30: SubsonicVersionError,
    40: SubsonicAuthenticationError,
    41: SubsonicAuthenticationError,
    42: TokenAuthenticationNotSupportedError,
    43: ClientVersionTooOldError,
    44: ServerVersionTooOldError,
    50: SubsonicAuthorizationError,
    60: SubsonicTrialError,
    70: SubsonicNotFoundError,
}


def api_error_for(code: int, message: str) -> SubsonicAPIError:
    """Build the exception matching a Subsonic error code."""
    return ERROR_CODE_EXCEPTIONS.get(code, SubsonicAPIError)(code, message)
