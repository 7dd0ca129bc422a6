"""GitHub API client for fetching the commit history of a single file.

This module asks GitHub's commits endpoint for every commit touching one
path at one ref. The raw JSON list is handed back unchanged so the
extractors and the templates can read whatever fields they need.

Design notes:
- Uses httpx for async HTTP requests
- One best-effort attempt per call: no retries, caching or pagination
- A failed fetch is logged and degrades to an empty history ({}) so the
  rest of the enrichment can still run with defaults
- Uses a Protocol so the enricher doesn't depend on the concrete
  implementation (makes testing with mocks easy)

GitHub API docs: https://docs.github.com/en/rest/commits/commits
"""

from __future__ import annotations

import os
from typing import Any, Protocol

import httpx
from pydantic import BaseModel, Field

from gitmeta.schemas import CommitHistory, RequestDescriptor


class CommitFetchError(Exception):
    """The commits endpoint answered with a non-success status."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f'{status_code} - "{body}"')
        self.status_code = status_code
        self.body = body


class FetcherConfig(BaseModel):
    """Configuration for the commit history client.

    Attributes:
        api_host: Base URL of the GitHub-compatible API
        user_agent: Value of the User-Agent header sent with every request
        headers: Extra static headers (e.g. an Authorization header supplied
                 by the hosting framework)
        timeout: Request timeout in seconds, None for no deadline
        context_path: Marker written to ``contextPath`` in the content
    """

    api_host: str = "https://api.github.com"
    user_agent: str = "Request-Promise"
    headers: dict[str, str] = Field(default_factory=dict)
    timeout: float | None = None
    context_path: str = "myinjectedcontextpath"

    @classmethod
    def from_env(cls) -> FetcherConfig:
        """Build a config, reading GITMETA_API_HOST and GITMETA_TIMEOUT."""
        values: dict[str, Any] = {}
        if host := os.environ.get("GITMETA_API_HOST"):
            values["api_host"] = host
        if timeout := os.environ.get("GITMETA_TIMEOUT"):
            values["timeout"] = float(timeout)
        return cls(**values)


# ---------------------------------------------------------------------------
# Protocol (Interface)
# ---------------------------------------------------------------------------


class CommitsClientProtocol(Protocol):
    """Protocol defining the interface for commit history fetching."""

    async def fetch_commit_history(
        self, descriptor: RequestDescriptor, logger: Any
    ) -> CommitHistory:
        """Fetch the commits touching ``descriptor.path`` at ``descriptor.ref``.

        Args:
            descriptor: The file revision to look up
            logger: Logger exposing debug() and error()

        Returns:
            The commit records (newest first), or {} if the fetch failed
        """
        ...


# ---------------------------------------------------------------------------
# Concrete Implementation
# ---------------------------------------------------------------------------


class GitHubCommitsClient:
    """Real GitHub commits client using httpx.

    Usage:
        client = GitHubCommitsClient()
        history = await client.fetch_commit_history(descriptor, logger)
    """

    def __init__(
        self,
        config: FetcherConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Fetcher configuration. Uses defaults if not provided.
            transport: Optional httpx transport, used by tests to stand in
                       for the remote API.
        """
        self.config = config or FetcherConfig()
        self._transport = transport
        self._headers: dict[str, str] = {
            **self.config.headers,
            "User-Agent": self.config.user_agent,
            "Accept": "application/json",
        }

    def build_url(self, descriptor: RequestDescriptor) -> httpx.URL:
        """Return the commits URL for a descriptor.

        path and ref go into the query string as given; encoding is left
        to httpx.
        """
        url = httpx.URL(
            f"{self.config.api_host.rstrip('/')}"
            f"/repos/{descriptor.owner}/{descriptor.repo}/commits"
        )
        return url.copy_merge_params({"path": descriptor.path, "sha": descriptor.ref})

    async def fetch_commit_history(
        self, descriptor: RequestDescriptor, logger: Any
    ) -> CommitHistory:
        """Fetch the commit history, degrading to {} on any fetch failure."""
        url = self.build_url(descriptor)
        logger.debug("fetching_git_metadata", uri=str(url))
        try:
            async with httpx.AsyncClient(
                headers=self._headers,
                timeout=self.config.timeout,
                transport=self._transport,
            ) as client:
                resp = await client.get(url)
                if not resp.is_success:
                    raise CommitFetchError(resp.status_code, resp.text)
                metadata = resp.json()
        except CommitFetchError as e:
            logger.error(
                "git_metadata_fetch_failed",
                uri=str(url),
                status_code=e.status_code,
                error=str(e),
            )
            return {}
        except (httpx.HTTPError, ValueError) as e:
            # ValueError covers a body that is not valid JSON
            logger.error("git_metadata_fetch_failed", uri=str(url), error=str(e))
            return {}

        logger.debug("git_metadata_received", uri=str(url))
        return metadata


# ---------------------------------------------------------------------------
# Mock Implementation (for testing)
# ---------------------------------------------------------------------------


class MockCommitsClient:
    """Mock commits client that returns a predefined history.

    Use this in tests and local development when you don't want to hit
    the real GitHub API.

    Usage:
        client = MockCommitsClient(history=[{"author": {...}, "commit": {...}}])
        history = await client.fetch_commit_history(descriptor, logger)
    """

    def __init__(self, history: CommitHistory | None = None) -> None:
        self._history = history if history is not None else []
        self.calls: list[RequestDescriptor] = []

    async def fetch_commit_history(
        self, descriptor: RequestDescriptor, logger: Any
    ) -> CommitHistory:
        self.calls.append(descriptor)
        logger.debug("git_metadata_received", mock=True)
        return self._history
