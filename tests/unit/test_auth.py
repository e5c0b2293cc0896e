from __future__ import annotations

import httpx
import pytest

from gistdb.api import GistApi
from gistdb.auth import has_gist_scope, validate_token
from gistdb.errors import AuthError


@pytest.mark.parametrize(
    "header,expected",
    [
        ("gist", True),
        ("repo, gist, user", True),
        ("repo,gist", True),
        ("repo, user", False),
        ("gists", False),
        ("", False),
        (None, False),
    ],
)
def test_has_gist_scope(header, expected):
    assert has_gist_scope(header) is expected


def _api(handler) -> GistApi:
    return GistApi("SECRET", client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_validate_token_sends_bearer_header_once():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={}, headers={"X-OAuth-Scopes": "gist"})

    validate_token(_api(handler))

    assert len(seen) == 1
    assert seen[0].url.path == "/rate_limit"
    assert seen[0].headers["Authorization"] == "Bearer SECRET"


def test_validate_token_without_scope_header():
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={})

    with pytest.raises(AuthError):
        validate_token(_api(handler))


def test_validate_token_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    with pytest.raises(AuthError) as ei:
        validate_token(_api(handler))
    assert isinstance(ei.value.__cause__, httpx.ConnectError)
