from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.parse import quote

from .api import GistApi
from .constants import CORS_RELAY_BASE, RAW_CONTENT_BASE
from .errors import FetchError


logger = logging.getLogger(__name__)

UrlDecorator = Callable[[str], str]


@dataclass
class GistContext:
    """
    Shared state a file needs to reach its gist.

    The store owns this object and fills in `gist_id`/`owner` once it
    resolves; files only hold a reference to it.
    """

    api: GistApi
    is_public: bool = False
    gist_id: str = ""
    owner: str = ""
    cors_prefix: bool = False
    url_decorator: Optional[UrlDecorator] = None


class GistFile:
    """
    One named text file inside the store's gist.

    - `overwrite()` only changes local state and marks the file dirty.
    - `fetch_latest()` reads the newest committed content (history lookup,
      then raw fetch) and marks the file clean.
    - `save()` pushes this file alone; the store's `save()` batches instead.
    """

    def __init__(self, ctx: GistContext, name: str, content: str = "", *, dirty: bool = False) -> None:
        if not name:
            raise ValueError("name is required")
        self._ctx = ctx
        self._name = name
        self._content = content
        self._dirty = dirty

    def __repr__(self) -> str:
        return f"GistFile(name={self._name!r}, dirty={self._dirty})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def content(self) -> str:
        return self._content

    @property
    def dirty(self) -> bool:
        return self._dirty

    def overwrite(self, content: str) -> None:
        self._content = content
        self._dirty = True

    def mark_clean(self) -> None:
        self._dirty = False

    def fetch_latest(self) -> None:
        """Replace local content with the file's content at the newest gist version.

        Raises FetchError if the history lookup or the raw fetch fails, or if
        the gist has no history.
        """
        history = self._ctx.api.history(self._ctx.gist_id)
        version = history.latest_version()
        if version is None:
            raise FetchError(f"Gist {self._ctx.gist_id} has no history")
        self._content = self._ctx.api.raw_content(self.raw_url(version))
        self._dirty = False
        logger.debug("Fetched %s at version %s", self._name, version)

    def save(self) -> None:
        if not self._dirty:
            return
        self._ctx.api.update_gist(self._ctx.gist_id, {self._name: self._content}, public=self._ctx.is_public)
        self._dirty = False
        logger.info("Saved file %s to gist %s", self._name, self._ctx.gist_id)

    def raw_url(self, version: str) -> str:
        """Raw content URL of this file at `version`, decorated for CORS if configured."""
        ctx = self._ctx
        # Filenames may contain "#" or "?", so every segment is percent-encoded
        segments = "/".join(quote(s, safe="") for s in (ctx.owner, ctx.gist_id, "raw", version, self._name))
        url = f"{RAW_CONTENT_BASE}/{segments}"
        if ctx.url_decorator is not None:
            return ctx.url_decorator(url)
        if ctx.cors_prefix:
            return CORS_RELAY_BASE + url
        return url


__all__ = ["GistContext", "GistFile", "UrlDecorator"]
