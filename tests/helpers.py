"""Fake HTTP server helpers shared by the client tests."""

from typing import Any, Callable, Dict, List
from urllib.parse import parse_qs

import httpx


def request_params(request: httpx.Request) -> Dict[str, str]:
    """Return query string and form body parameters of a request."""
    params = dict(request.url.params)
    if request.method == "POST" and request.content:
        body = parse_qs(request.content.decode("utf-8"), keep_blank_values=True)
        params.update({key: values[0] for key, values in body.items()})
    return params


class FakeServer:
    """Callable for httpx.MockTransport that routes on a request key.

    ``route`` maps a request to a key; ``responses`` maps keys to either a
    JSON payload, an httpx.Response, or a callable taking the request.
    Every request is recorded in ``requests``.
    """

    def __init__(self, route: Callable[[httpx.Request], str], responses: Dict[str, Any]):
        self.route = route
        self.responses = responses
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = self.route(request)
        if key not in self.responses:
            return httpx.Response(404, json={"unexpected": key})
        response = self.responses[key]
        if callable(response):
            response = response(request)
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, json=response)

    def requests_for(self, key: str) -> List[httpx.Request]:
        return [r for r in self.requests if self.route(r) == key]

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))
