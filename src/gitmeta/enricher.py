"""Orchestrates the git metadata pre-step.

This module ties together:
- Commit history fetching (context/github.py)
- Committer and last-modified derivation (extract.py)

The enrichment follows this flow:
1. Write the context path marker
2. Fetch the commit history for the requested file revision
3. Derive the distinct committers
4. Derive the last-modified date

Each result is written onto ``context.content`` as soon as it is
available. The rendering framework calls ``pre()`` once per request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from gitmeta.context.github import (
    CommitsClientProtocol,
    FetcherConfig,
    GitHubCommitsClient,
)
from gitmeta.extract import extract_committers, extract_last_modified
from gitmeta.logging_config import get_logger
from gitmeta.schemas import RequestDescriptor

_default_logger = get_logger(__name__)


@dataclass
class PreConfig:
    """What the rendering framework hands to the pre-step.

    Attributes:
        logger: Logger exposing debug() and error()
        request: The file revision being rendered
    """

    logger: Any
    request: RequestDescriptor


class MetadataEnricher:
    """Writes git metadata for one file revision into a render context.

    Stateless apart from its client; one instance can serve every request.

    Usage:
        enricher = MetadataEnricher()
        await enricher.enrich(context, descriptor, logger)
    """

    def __init__(
        self,
        client: CommitsClientProtocol | None = None,
        config: FetcherConfig | None = None,
    ) -> None:
        """Initialize the enricher.

        Args:
            client: Commit history client. Defaults to a GitHubCommitsClient
                    built from ``config``.
            config: Fetcher configuration. Uses defaults if None.
        """
        self.config = config or FetcherConfig()
        self.client = client or GitHubCommitsClient(config=self.config)

    async def enrich(
        self,
        context: Any,
        descriptor: RequestDescriptor,
        logger: Any = None,
    ) -> None:
        """Enrich ``context.content`` in place.

        Args:
            context: Object with a mutable ``content`` mapping
            descriptor: The file revision to look up
            logger: Logger exposing debug() and error(). Defaults to the
                    module logger.

        Raises:
            Exception: Anything raised while enriching is logged and
                       re-raised; fields already written are left in place.
        """
        if logger is None:
            logger = _default_logger
        try:
            logger.debug("setting_context_path")
            context.content["contextPath"] = self.config.context_path

            logger.debug("collecting_metadata", owner=descriptor.owner,
                         repo=descriptor.repo, path=descriptor.path,
                         ref=descriptor.ref)
            history = await self.client.fetch_commit_history(descriptor, logger)

            logger.debug("metadata_arrived")
            context.content["gitmetadata"] = history
            context.content["committers"] = extract_committers(history)
            context.content["lastModified"] = extract_last_modified(history, logger)
        except Exception as e:
            logger.error("enrichment_failed", error=str(e), exc_info=True)
            raise


async def pre(context: Any, config: PreConfig,
              enricher: MetadataEnricher | None = None) -> None:
    """Framework entry point for the pre-step.

    Args:
        context: Object with a mutable ``content`` mapping
        config: The logger and request for this invocation
        enricher: Shared enricher. A default one is built if omitted.
    """
    enricher = enricher or MetadataEnricher(config=FetcherConfig.from_env())
    await enricher.enrich(context, config.request, config.logger)
