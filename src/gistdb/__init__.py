"""
Use a GitHub gist as a small document store.

Modules:
- store: GistStore, the container client (resolve, create/get files, batch save)
- file: GistFile, one text file in the gist (overwrite, fetch_latest, save)
- api: GistApi, the httpx-based GitHub Gists REST plumbing
- auth: token scope validation
- identifier: marker filename derivation
"""

from .errors import (
    AuthError,
    DuplicateNameError,
    FetchError,
    GistDBError,
    NotFoundError,
    SaveError,
)
from .file import GistFile
from .identifier import format_identifier
from .store import GistStore

__version__ = "0.1.0"

__all__ = [
    "GistStore",
    "GistFile",
    "format_identifier",
    "GistDBError",
    "AuthError",
    "DuplicateNameError",
    "NotFoundError",
    "FetchError",
    "SaveError",
    "__version__",
]
