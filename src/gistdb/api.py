from __future__ import annotations

import logging
import random
from typing import Any, Dict, Iterator, Optional

import httpx
from pydantic import ValidationError

from .constants import DEFAULT_API_BASE, RAW_CONTENT_HOST, SCOPES_HEADER
from .errors import AuthError, FetchError, GistDBError, SaveError
from .models import GistHistory, GistSummary


logger = logging.getLogger(__name__)

PAGE_SIZE = 100


class GistApi:
    """
    Thin GitHub Gists REST client.

    Notes
    - One method per endpoint the store needs; each maps transport errors and
      non-2xx statuses to the matching `GistDBError` subclass.
    - No retries: every failure surfaces immediately.
    - `httpx.Client` is thread-safe, so a single instance is shared by the
      concurrent content fetches during resolution.
    """

    def __init__(
        self,
        token: str,
        *,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 15.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        if not token:
            raise ValueError("token is required")
        self._token = token
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=self._timeout)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "GistApi":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --------------- Public API ---------------
    def granted_scopes(self) -> str:
        """Return the raw `X-OAuth-Scopes` header granted to the token."""
        resp = self._send("GET", f"{self._api_base}/rate_limit", error=AuthError, what="validate token")
        return resp.headers.get(SCOPES_HEADER, "")

    def iter_gists(self) -> Iterator[GistSummary]:
        """Yield every gist of the authenticated user, following pagination."""
        url: Optional[str] = f"{self._api_base}/gists"
        params: Optional[Dict[str, Any]] = {"per_page": PAGE_SIZE}
        while url:
            resp = self._send("GET", url, params=params, error=FetchError, what="list gists")
            payload = self._json(resp, FetchError, "list gists")
            if not isinstance(payload, list):
                raise FetchError("Unexpected gist listing payload")
            for item in payload:
                try:
                    yield GistSummary.model_validate(item)
                except ValidationError as ve:
                    raise FetchError(f"Failed to parse gist listing: {ve}") from ve
            # The next link already carries the query string
            url = resp.links.get("next", {}).get("url")
            params = None

    def create_gist(self, files: Dict[str, str], *, public: bool) -> GistSummary:
        body = {"public": public, "files": _files_body(files)}
        resp = self._send("POST", f"{self._api_base}/gists", json=body, error=SaveError, what="create gist")
        payload = self._json(resp, SaveError, "create gist")
        try:
            return GistSummary.model_validate(payload)
        except ValidationError as ve:
            raise SaveError(f"Failed to parse created gist: {ve}") from ve

    def update_gist(self, gist_id: str, files: Dict[str, str], *, public: bool) -> None:
        if not gist_id:
            raise SaveError("Gist is not resolved yet")
        body = {"public": public, "files": _files_body(files)}
        self._send("PATCH", f"{self._api_base}/gists/{gist_id}", json=body, error=SaveError, what="update gist")

    def history(self, gist_id: str) -> GistHistory:
        if not gist_id:
            raise FetchError("Gist is not resolved yet")
        # Random parameter defeats intermediate caches so the newest history is returned
        params = {"cache_bust": f"{random.random()}"}
        resp = self._send(
            "GET", f"{self._api_base}/gists/{gist_id}", params=params, error=FetchError, what="fetch gist history"
        )
        payload = self._json(resp, FetchError, "fetch gist history")
        try:
            return GistHistory.model_validate(payload)
        except ValidationError as ve:
            raise FetchError(f"Failed to parse gist history: {ve}") from ve

    def raw_content(self, url: str) -> str:
        # Credentials go only to GitHub's own raw host, never to a relay
        parsed = httpx.URL(url)
        auth = parsed.scheme == "https" and parsed.host == RAW_CONTENT_HOST
        resp = self._send("GET", url, error=FetchError, what="fetch raw content", auth=auth)
        return resp.text

    # --------------- Internal ---------------
    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
        }

    def _send(
        self,
        method: str,
        url: str,
        *,
        error: type[GistDBError],
        what: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        auth: bool = True,
    ) -> httpx.Response:
        logger.debug("%s %s", method, url)
        headers = self._headers() if auth else None
        try:
            resp = self._client.request(method, url, params=params, json=json, headers=headers)
        except httpx.HTTPError as exc:
            raise error(f"Failed to {what}: {exc}") from exc
        if not resp.is_success:
            raise error(f"Failed to {what}: HTTP {resp.status_code} from GitHub: {resp.text[:200]}")
        return resp

    @staticmethod
    def _json(resp: httpx.Response, error: type[GistDBError], what: str) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            raise error(f"Failed to {what}: response is not JSON") from exc


def _files_body(files: Dict[str, str]) -> Dict[str, Dict[str, str]]:
    return {name: {"content": content} for name, content in files.items()}


__all__ = ["GistApi", "PAGE_SIZE"]
