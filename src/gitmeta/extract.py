"""Derive committers and the last-modified date from a commit history.

Both functions only read the history and never fail on missing fields:
commits without a linked GitHub author are skipped, and a history with
nothing usable resolves to safe defaults.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from gitmeta.schemas import (
    UNKNOWN_DATE,
    CommitHistory,
    CommitterIdentity,
    LastModified,
)


def _records(history: CommitHistory | None) -> list[Any]:
    if not history:
        return []
    if isinstance(history, Mapping):
        return list(history.values())
    return list(history)


def extract_committers(history: CommitHistory | None) -> list[CommitterIdentity]:
    """Reduce a commit history to its distinct committers.

    Args:
        history: Commit records newest first, or the degraded {} form

    Returns:
        Committer identities in order of first appearance
    """
    committers: list[CommitterIdentity] = []
    seen: set[tuple[str | None, str]] = set()

    for commit in _records(history):
        if not isinstance(commit, Mapping) or not commit.get("author"):
            continue
        author = (commit.get("commit") or {}).get("author") or {}
        identity = CommitterIdentity(
            avatar_url=commit["author"].get("avatar_url"),
            display=f"{author.get('name', '')} | {author.get('email', '')}",
        )
        if identity.key in seen:
            continue
        seen.add(identity.key)
        committers.append(identity)

    return committers


def _parse_date(raw: str | None) -> datetime | None:
    """Parse an ISO-8601 author date, None when it can't be read."""
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        return None


def extract_last_modified(history: CommitHistory | None, logger: Any) -> LastModified:
    """Read the author date of the newest commit.

    Only the first record is looked at. A mapping (the degraded history)
    has no first record. A date that doesn't parse keeps its raw value
    and displays as "Unknown".
    """
    logger.debug("getting_last_modified")
    records = [] if isinstance(history, Mapping) else _records(history)

    raw = None
    if records and isinstance(records[0], Mapping):
        author = (records[0].get("commit") or {}).get("author")
        if author and author.get("date") is not None:
            raw = str(author["date"])

    logger.debug("last_modified_resolved", raw=raw)
    return LastModified(raw=raw, display=_parse_date(raw) or UNKNOWN_DATE)
