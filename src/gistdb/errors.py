from __future__ import annotations


class GistDBError(RuntimeError):
    """Base error for the gist-backed store."""


class AuthError(GistDBError):
    """Token is invalid or lacks the gist scope."""


class DuplicateNameError(GistDBError):
    """A file with the requested name already exists in the store."""


class NotFoundError(GistDBError):
    """No file with the requested name exists in the store."""


class FetchError(GistDBError):
    """Listing gists, reading history or reading raw content failed."""


class SaveError(GistDBError):
    """Creating or updating the gist failed."""


__all__ = [
    "GistDBError",
    "AuthError",
    "DuplicateNameError",
    "NotFoundError",
    "FetchError",
    "SaveError",
]
