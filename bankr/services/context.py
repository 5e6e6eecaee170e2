"""Process-wide search context, built once at startup and read-only afterwards."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

from elasticsearch import Elasticsearch

from bankr.config import Settings
from bankr.search.executor import SearchExecutor
from bankr.search.matcher import AbbreviationMatcher
from bankr.search.registry import RegistrySnapshot, load_registry
from bankr.services.indexing import ensure_index, load_records

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchContext:
    """Everything a search request needs, shared by all request handlers."""

    settings: Settings
    client: Elasticsearch
    registry: RegistrySnapshot
    matcher: AbbreviationMatcher
    executor: SearchExecutor

    @classmethod
    def create(
        cls, settings: Settings, client: Elasticsearch, registry: RegistrySnapshot
    ) -> SearchContext:
        return cls(
            settings=settings,
            client=client,
            registry=registry,
            matcher=AbbreviationMatcher(registry),
            executor=SearchExecutor(
                client, settings.index_name, explain=settings.search_explain
            ),
        )


def create_client(settings: Settings) -> Elasticsearch:
    """Engine client for the configured cluster."""
    return Elasticsearch(
        settings.elasticsearch_url,
        request_timeout=settings.elasticsearch_timeout,
    )


def build_context(
    settings: Settings,
    client: Elasticsearch | None = None,
    *,
    re_index: bool | None = None,
) -> SearchContext:
    """Open (or build) the index and load the abbreviation registry.

    Runs synchronously before the service accepts traffic. Errors propagate
    to the caller, which decides whether to abort.

    Raises:
        StartupError: If the data sources are unusable.
        EngineError: If the engine cannot open or build the index.
    """
    if client is None:
        client = create_client(settings)

    # The CSV is read at most once, whether indexing or the registry needs it
    records_loader = lru_cache(maxsize=1)(lambda: tuple(load_records(settings.data_path)))

    ensure_index(client, settings, records_loader, re_index=re_index)

    registry = load_registry(settings.banks_list_path, records_loader)
    if registry.degraded:
        logger.warning(
            "Abbreviation registry degraded: %d entries rejected, %d loaded",
            registry.rejected,
            len(registry),
        )
    if not registry.entries:
        logger.warning("Abbreviation registry is empty; queries run without bank detection")

    return SearchContext.create(settings, client, registry)
