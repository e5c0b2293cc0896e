from __future__ import annotations

import logging
from typing import Optional

from .api import GistApi
from .constants import REQUIRED_SCOPE
from .errors import AuthError


logger = logging.getLogger(__name__)


def has_gist_scope(scopes_header: Optional[str], scope: str = REQUIRED_SCOPE) -> bool:
    """Check a comma-separated `X-OAuth-Scopes` value for `scope`.

    Fine-grained tokens send no scopes header at all and are rejected.
    """
    if not scopes_header:
        return False
    granted = {s.strip() for s in scopes_header.split(",") if s.strip()}
    return scope in granted


def validate_token(api: GistApi) -> None:
    """
    Confirm the token behind `api` is active and carries the gist scope.

    A single request to the rate-limit endpoint; raises AuthError if the call
    fails or the scope is missing.
    """
    scopes = api.granted_scopes()
    if not has_gist_scope(scopes):
        logger.warning("Token rejected: granted scopes %r lack %r", scopes, REQUIRED_SCOPE)
        raise AuthError("Token is invalid or it doesn't have gist access.")


__all__ = ["has_gist_scope", "validate_token"]
