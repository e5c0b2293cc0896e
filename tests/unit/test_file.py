from __future__ import annotations

import httpx
import pytest

from gistdb.api import GistApi
from gistdb.errors import FetchError, SaveError
from gistdb.file import GistContext, GistFile


RAW = "https://gist.githubusercontent.com/octocat/g1/raw/v2/a.txt"


def _ctx(handler=None, **kwargs) -> GistContext:
    def default(_: httpx.Request) -> httpx.Response:  # pragma: no cover - unused
        raise AssertionError("no request expected")

    client = httpx.Client(transport=httpx.MockTransport(handler or default))
    return GistContext(api=GistApi("SECRET", client=client), gist_id="g1", owner="octocat", **kwargs)


def test_overwrite_is_local_and_marks_dirty():
    f = GistFile(_ctx(), "a.txt", "old")
    assert not f.dirty

    f.overwrite("new")

    assert f.content == "new"
    assert f.dirty


def test_raw_url_variants():
    assert GistFile(_ctx(), "a.txt").raw_url("v2") == RAW
    assert GistFile(_ctx(cors_prefix=True), "a.txt").raw_url("v2") == "https://cors-anywhere.herokuapp.com/" + RAW

    decorated = GistFile(_ctx(url_decorator=lambda u: f"https://proxy.local/?u={u}"), "a.txt")
    assert decorated.raw_url("v2") == f"https://proxy.local/?u={RAW}"


def test_fetch_latest_uses_newest_version():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "api.github.com":
            return httpx.Response(200, json={"history": [{"version": "v2"}, {"version": "v1"}]})
        assert str(request.url) == RAW
        return httpx.Response(200, text="latest")

    f = GistFile(_ctx(handler), "a.txt", "stale", dirty=True)
    f.fetch_latest()

    assert f.content == "latest"
    assert not f.dirty


def test_fetch_latest_empty_history():
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"history": []})

    f = GistFile(_ctx(handler), "a.txt", "keep")
    with pytest.raises(FetchError):
        f.fetch_latest()
    assert f.content == "keep"


def test_fetch_latest_raw_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "api.github.com":
            return httpx.Response(200, json={"history": [{"version": "v2"}]})
        return httpx.Response(404, text="missing")

    f = GistFile(_ctx(handler), "a.txt", "keep", dirty=True)
    with pytest.raises(FetchError):
        f.fetch_latest()
    assert f.dirty


def test_single_file_save():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(request.content)
        return httpx.Response(200, json={})

    f = GistFile(_ctx(handler), "a.txt", "x")
    f.save()  # clean: nothing to send
    assert bodies == []

    f.overwrite("y")
    f.save()

    assert len(bodies) == 1
    assert b'"a.txt"' in bodies[0]
    assert not f.dirty


def test_single_file_save_failure_keeps_dirty():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    f = GistFile(_ctx(handler), "a.txt")
    f.overwrite("y")
    with pytest.raises(SaveError):
        f.save()
    assert f.dirty


def test_raw_url_encodes_reserved_characters():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "api.github.com":
            return httpx.Response(200, json={"history": [{"version": "v2"}]})
        assert request.url.raw_path == b"/octocat/g1/raw/v2/a%23b%3F.txt"
        return httpx.Response(200, text="hashed")

    f = GistFile(_ctx(handler), "a#b?.txt")
    assert f.raw_url("v2") == "https://gist.githubusercontent.com/octocat/g1/raw/v2/a%23b%3F.txt"

    f.fetch_latest()
    assert f.content == "hashed"
