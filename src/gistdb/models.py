from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class GistOwner(BaseModel):
    login: str


class GistFileMeta(BaseModel):
    """
    One entry of a gist's `files` mapping.

    Listing responses omit `content`; creation responses include it.
    """

    filename: Optional[str] = None
    content: Optional[str] = None


class GistSummary(BaseModel):
    """
    The subset of a gist object this library relies on.

    Fields
    - id: gist id assigned by GitHub.
    - owner: owning account; `owner.login` is needed to build raw URLs.
    - files: mapping of filename to file metadata, in the order GitHub returns it.
    """

    id: str
    owner: GistOwner
    files: Dict[str, GistFileMeta] = Field(default_factory=dict)

    def has_file(self, name: str) -> bool:
        return name in self.files


class GistVersion(BaseModel):
    version: str


class GistHistory(BaseModel):
    """History of a single gist; index 0 is the most recent version."""

    history: List[GistVersion] = Field(default_factory=list)

    def latest_version(self) -> Optional[str]:
        if not self.history:
            return None
        return self.history[0].version


__all__ = [
    "GistOwner",
    "GistFileMeta",
    "GistSummary",
    "GistVersion",
    "GistHistory",
]
