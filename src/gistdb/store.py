from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional

import httpx

from .api import GistApi
from .auth import validate_token
from .constants import DEFAULT_API_BASE
from .errors import DuplicateNameError, NotFoundError
from .file import GistContext, GistFile, UrlDecorator
from .identifier import format_identifier, marker_notice
from .models import GistSummary


logger = logging.getLogger(__name__)

# Environment variable names for convenience configuration
ENV_TOKEN = "GISTDB_TOKEN"
ENV_APP_IDENTIFIER = "GISTDB_APP_IDENTIFIER"
ENV_PUBLIC = "GISTDB_PUBLIC"

MAX_FETCH_WORKERS = 8


def _truthy(raw: Optional[str]) -> bool:
    return (raw or "").strip().lower() in ("1", "true", "yes", "on")


class GistStore:
    """
    A GitHub gist used as a small document store for one application.

    Usage
    - Construct with a personal access token (needs the `gist` scope) and an
      app identifier. Use the same identifier on every run: it names the
      marker file that tells this app's gist apart from the user's others.
    - Call `resolve()` once. It validates the token, then adopts the gist
      holding the marker file (fetching every file's latest content) or
      creates one containing just the marker file.
    - `create_file()`, `get_file()` and `GistFile.overwrite()` work locally;
      `save()` pushes every dirty file in one update request.

    Environment variables (optional, see `from_env`)
    - `GISTDB_TOKEN`:          personal access token
    - `GISTDB_APP_IDENTIFIER`: app identifier
    - `GISTDB_PUBLIC`:         create the gist as public when truthy
    """

    def __init__(
        self,
        token: str,
        app_identifier: str,
        *,
        is_public: bool = False,
        cors_prefix: bool = False,
        url_decorator: Optional[UrlDecorator] = None,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 15.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        if not token:
            raise ValueError("token is required")
        if not app_identifier:
            raise ValueError("app_identifier is required")
        self._app_identifier = app_identifier
        self._marker_filename = format_identifier(app_identifier)
        self._api = GistApi(token, api_base=api_base, timeout=timeout, client=client)
        self._ctx = GistContext(
            api=self._api,
            is_public=bool(is_public),
            cors_prefix=bool(cors_prefix),
            url_decorator=url_decorator,
        )
        self._files: List[GistFile] = []
        self._resolved = False

    # -------- Construction helpers --------
    @classmethod
    def from_env(cls, **kwargs) -> "GistStore":
        token = os.environ.get(ENV_TOKEN)
        app_identifier = os.environ.get(ENV_APP_IDENTIFIER)
        if not token or not app_identifier:
            missing = [name for name, val in [(ENV_TOKEN, token), (ENV_APP_IDENTIFIER, app_identifier)] if not val]
            raise RuntimeError(f"Missing required environment variables for gist store: {', '.join(missing)}")
        kwargs.setdefault("is_public", _truthy(os.environ.get(ENV_PUBLIC)))
        return cls(token, app_identifier, **kwargs)

    def close(self) -> None:
        self._api.close()

    def __enter__(self) -> "GistStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -------- Properties --------
    @property
    def id(self) -> str:
        return self._ctx.gist_id

    @property
    def owner(self) -> str:
        return self._ctx.owner

    @property
    def is_public(self) -> bool:
        return self._ctx.is_public

    @property
    def app_identifier(self) -> str:
        return self._app_identifier

    @property
    def marker_filename(self) -> str:
        return self._marker_filename

    @property
    def resolved(self) -> bool:
        return self._resolved

    # -------- Core operations --------
    def resolve(self) -> None:
        """Find this app's gist, or create it. Only the first call does any work.

        Raises
        - AuthError if the token is invalid or lacks the gist scope; nothing
          else is requested in that case.
        - FetchError if listing gists or fetching any file's content fails.
        - SaveError if creating the gist fails.
        """
        if self._resolved:
            return
        validate_token(self._api)

        gist = self._find_gist()
        if gist is not None:
            self._adopt(gist)
        else:
            self._create()
        self._resolved = True

    def create_file(self, name: str, initial_content: str = "") -> GistFile:
        """Add a new file locally. It starts dirty and is persisted by the next `save()`."""
        if self._lookup(name) is not None:
            raise DuplicateNameError(f"A file named {name} already exists.")
        file = GistFile(self._ctx, name, initial_content, dirty=True)
        self._files.append(file)
        return file

    def get_file(self, name: str) -> GistFile:
        file = self._lookup(name)
        if file is None:
            raise NotFoundError(f"No file found with name: {name}")
        return file

    def get_file_names(self) -> List[str]:
        return [f.name for f in self._files]

    def save(self) -> None:
        """Push every dirty file in a single update request.

        Does nothing when no file is dirty. On SaveError no dirty flag is
        cleared, so calling `save()` again resends the same files.
        """
        dirty = [f for f in self._files if f.dirty]
        if not dirty:
            return
        payload: Dict[str, str] = {f.name: f.content for f in dirty}
        self._api.update_gist(self._ctx.gist_id, payload, public=self._ctx.is_public)
        for f in dirty:
            f.mark_clean()
        logger.info("Saved %d file(s) to gist %s", len(dirty), self._ctx.gist_id)

    # -------- Internal --------
    def _lookup(self, name: str) -> Optional[GistFile]:
        for f in self._files:
            if f.name == name:
                return f
        return None

    def _find_gist(self) -> Optional[GistSummary]:
        for gist in self._api.iter_gists():
            if gist.has_file(self._marker_filename):
                return gist
        return None

    def _adopt(self, gist: GistSummary) -> None:
        ctx = self._ctx
        ctx.gist_id = gist.id
        ctx.owner = gist.owner.login
        # A file created before resolution keeps its local draft over the remote copy
        pending = {f.name: f for f in self._files}
        fetched = [GistFile(ctx, name) for name in gist.files if name not in pending]
        try:
            workers = max(1, min(MAX_FETCH_WORKERS, len(fetched)))
            with ThreadPoolExecutor(max_workers=workers) as pool:
                # Leaving the pool waits for every fetch; the first failure then propagates
                list(pool.map(lambda f: f.fetch_latest(), fetched))
        except Exception:
            ctx.gist_id = ""
            ctx.owner = ""
            raise
        by_name = {f.name: f for f in fetched}
        files = [pending.get(name) or by_name[name] for name in gist.files]
        self._files = files + [f for f in self._files if f.name not in gist.files]
        logger.info("Using gist %s owned by %s with %d file(s)", gist.id, gist.owner.login, len(gist.files))

    def _create(self) -> None:
        notice = marker_notice(self._app_identifier)
        gist = self._api.create_gist({self._marker_filename: notice}, public=self._ctx.is_public)
        self._ctx.gist_id = gist.id
        self._ctx.owner = gist.owner.login
        meta = gist.files.get(self._marker_filename)
        content = meta.content if meta is not None and meta.content is not None else notice
        local = self._lookup(self._marker_filename)
        marker = local if local is not None else GistFile(self._ctx, self._marker_filename, content)
        self._files = [marker] + [f for f in self._files if f is not marker]
        logger.info("Created gist %s for app %s", gist.id, self._app_identifier)


__all__ = ["GistStore", "ENV_TOKEN", "ENV_APP_IDENTIFIER", "ENV_PUBLIC"]
