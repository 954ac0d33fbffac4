"""Subsonic API authentication implementation.

This module implements token-based authentication for Subsonic-compatible APIs
using the MD5 salt+hash method from the Subsonic API documentation.

Authentication Flow:
    1. Generate a random salt (8 lowercase alphanumeric characters)
    2. Concatenate password + salt
    3. Calculate MD5 hash of concatenated string
    4. Send username, token and salt with every request

There is no login call and no session: a fresh salt and token are computed
for each request.

Example:
    >>> from src.subsonic.auth import generate_token
    >>> auth_token = generate_token("admin", "sesame", salt="c19b2d")
    >>> auth_token.token
    '26719a1196d2a940705a59634eb18eab'
    >>> auth_token.to_auth_params()
    {'u': 'admin', 't': '26719a1196d2a940705a59634eb18eab', 's': 'c19b2d'}

Security Notes:
    - The plaintext password is never transmitted
    - MD5 is what the Subsonic API prescribes (obfuscation, not cryptographic strength)
"""

import hashlib
import secrets
import string
from datetime import datetime, timezone
from typing import Dict, Optional

from .models import SubsonicAuthToken

SALT_LENGTH = 8
SALT_ALPHABET = string.ascii_lowercase + string.digits

API_VERSION = "1.16.1"
CLIENT_NAME = "CassoFlow"


def generate_salt(length: int = SALT_LENGTH) -> str:
    """Return ``length`` random characters from ``[a-z0-9]``.

    Uses ``secrets`` so consecutive salts are unpredictable; with 36^8
    possibilities a repeat within one session is negligible.
    """
    return "".join(secrets.choice(SALT_ALPHABET) for _ in range(length))


def compute_token(password: str, salt: str) -> str:
    """Return ``hex(MD5(password + salt))`` as 32 lowercase hex characters."""
    return hashlib.md5(f"{password}{salt}".encode("utf-8")).hexdigest()


def generate_token(
    username: str, password: str, salt: Optional[str] = None
) -> SubsonicAuthToken:
    """Generate Subsonic authentication token using MD5 salt+hash method.

    Args:
        username: Account name the token is for
        password: Plaintext password (never sent over the wire)
        salt: Optional pre-generated salt. If None, generates a new one.
              Primarily for testing; production should use auto-generated salt.

    Returns:
        SubsonicAuthToken containing:
            - token: MD5 hash (32 hex chars, lowercase)
            - salt: Salt string used
            - username: Username
            - created_at: UTC timestamp when token was created

    Example:
        >>> token = generate_token("admin", "sesame")
        >>> len(token.token), len(token.salt)
        (32, 8)
    """
    if salt is None:
        salt = generate_salt()

    return SubsonicAuthToken(
        token=compute_token(password, salt),
        salt=salt,
        username=username,
        created_at=datetime.now(timezone.utc),
    )


def verify_token(password: str, token: str, salt: str) -> bool:
    """Verify that a token matches the expected MD5(password + salt).

    This is primarily used for testing and validation. In production,
    the server verifies tokens, not the client.

    Example:
        >>> auth = generate_token("admin", "sesame", salt="c19b2d")
        >>> verify_token("sesame", auth.token, auth.salt)
        True
        >>> verify_token("sesame", "invalid", auth.salt)
        False
    """
    return secrets.compare_digest(token, compute_token(password, salt))


def create_auth_params(
    username: str,
    password: str,
    api_version: str = API_VERSION,
    client_name: str = CLIENT_NAME,
    response_format: str = "json",
) -> Dict[str, str]:
    """Create complete authentication query parameters for one request.

    A new salt is generated on every call.

    Args:
        username: Account name
        password: Plaintext password
        api_version: Subsonic API version (default: "1.16.1")
        client_name: Client application identifier (default: "CassoFlow")
        response_format: Response format - "json" or "xml" (default: "json")

    Returns:
        Dictionary of query parameters containing:
            - u: username
            - t: authentication token
            - s: salt
            - v: API version
            - c: client name
            - f: response format
    """
    return {
        **generate_token(username, password).to_auth_params(),
        "v": api_version,
        "c": client_name,
        "f": response_format,
    }
