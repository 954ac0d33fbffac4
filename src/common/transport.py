"""HTTP request construction shared by both media server clients."""

import enum
from typing import Dict, Optional, Union

import httpx

# Every request gets a fixed 30 second timeout. A timeout surfaces as a
# transport error and is never retried.
REQUEST_TIMEOUT = 30.0

# Query parameters that carry credentials and must not reach the logs.
SECRET_PARAMS = ("passwd", "_sid", "t", "s", "p")


class HttpMethod(enum.Enum):
    """How request parameters travel to the server.

    GET puts them in the query string, POST sends them as an
    ``application/x-www-form-urlencoded`` body.
    """

    GET = "GET"
    POST = "POST"


def resolve_url(base_url: str, path: str) -> Optional[httpx.URL]:
    """Join ``base_url`` and ``path`` into an absolute http(s) URL.

    Returns:
        The URL, or None when the base is empty or does not form a valid
        http/https URL with a host.
    """
    if not base_url:
        return None
    try:
        url = httpx.URL(base_url + path)
    except (httpx.InvalidURL, TypeError, ValueError):
        return None
    if url.scheme not in ("http", "https") or not url.host:
        return None
    return url


def build_request(
    http_client: httpx.AsyncClient,
    method: HttpMethod,
    url: Union[str, httpx.URL],
    params: Dict[str, str],
) -> httpx.Request:
    """Build a request for ``url`` carrying ``params`` as ``method`` dictates.

    Args:
        http_client: Client used to build (and later send) the request
        method: GET for query string parameters, POST for a form body
        url: Absolute endpoint URL
        params: Endpoint parameters, all string valued

    Returns:
        The unsent httpx.Request with JSON accept header and fixed timeout
    """
    headers = {"Accept": "application/json"}
    if method is HttpMethod.POST:
        return http_client.build_request(
            "POST", url, data=params, headers=headers, timeout=REQUEST_TIMEOUT
        )
    return http_client.build_request(
        "GET", url, params=params, headers=headers, timeout=REQUEST_TIMEOUT
    )


def mask_secrets(url: Union[str, httpx.URL]) -> str:
    """Return ``url`` as text with credential parameters replaced by ``***``."""
    parsed = httpx.URL(url)
    params = parsed.params
    for key in SECRET_PARAMS:
        if key in params:
            params = params.set(key, "***")
    return str(parsed.copy_with(params=params))
