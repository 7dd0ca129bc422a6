"""Pydantic models for the data flowing through the metadata pre-step.

These schemas describe the request coming in from the rendering framework,
the identities and dates we derive from the commit history, and the context
object we write the results into.

Key design decisions:
- Commit records themselves stay plain dicts: they are whatever the
  GitHub commits API returns, and downstream templates read them as-is
- The request descriptor is frozen, it identifies one file revision and
  must not change while a request is being processed
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

# A list of commit records (newest first), or {} when the fetch failed.
CommitHistory = Union[list[dict[str, Any]], dict[str, Any]]

UNKNOWN_DATE = "Unknown"


class RequestDescriptor(BaseModel):
    """Identifies exactly one file revision in one repository.

    Attributes:
        owner: Repository owner (user or organisation)
        repo: Repository name
        path: Path of the file inside the repository
        ref: Branch, tag or commit SHA
    """

    model_config = ConfigDict(frozen=True)

    owner: str = Field(..., description="Repository owner")
    repo: str = Field(..., description="Repository name")
    path: str = Field(..., description="File path inside the repository")
    ref: str = Field(..., description="Branch, tag or commit SHA")


class CommitterIdentity(BaseModel):
    """One distinct contributor to a file.

    Two identities are the same committer when both fields match.
    """

    avatar_url: str | None = Field(None, description="Avatar image URL")
    display: str = Field(..., description='"<name> | <email>"')

    @property
    def key(self) -> tuple[str | None, str]:
        return (self.avatar_url, self.display)


class LastModified(BaseModel):
    """Most recent modification date of a file.

    Attributes:
        raw: ISO-8601 author date of the newest commit, or None
        display: Parsed datetime when raw is set, otherwise "Unknown"
    """

    raw: str | None = None
    display: datetime | str = UNKNOWN_DATE


class RenderContext(BaseModel):
    """The framework-owned context the pre-step enriches.

    Only ``content`` is touched; everything written into it is read by the
    downstream renderer.
    """

    content: dict[str, Any] = Field(default_factory=dict)
