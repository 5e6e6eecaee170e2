"""Paginated query execution against the branch index."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from elasticsearch import ApiError, Elasticsearch, TransportError
from elasticsearch.dsl.query import Query
from pydantic import ValidationError

from bankr.core.exceptions import EngineError
from bankr.schemas.bank import BankRecord
from bankr.schemas.search import SearchResultItem

logger = logging.getLogger(__name__)

# Return every stored field of the matched record
FIELD_PROJECTION = ["*"]


def page_offset(page: int, page_size: int) -> int:
    """Zero-based engine offset for a 1-based page."""
    return (page - 1) * page_size


def total_pages(total_hits: int, page_size: int) -> int:
    return math.ceil(total_hits / page_size) if total_hits else 0


def has_more(total_hits: int, page: int, page_size: int) -> bool:
    return total_hits > page * page_size


@dataclass(frozen=True)
class ResultPage:
    """Ranked hits for one page plus the bookkeeping around them."""

    total_hits: int
    page: int
    page_size: int
    took_ms: int
    hits: tuple[SearchResultItem, ...]

    @property
    def total_pages(self) -> int:
        return total_pages(self.total_hits, self.page_size)

    @property
    def has_more(self) -> bool:
        return has_more(self.total_hits, self.page, self.page_size)


class SearchExecutor:
    """Runs built queries against the index and shapes the hits."""

    def __init__(self, client: Elasticsearch, index_name: str, *, explain: bool = False):
        self.client = client
        self.index_name = index_name
        self.explain = explain

    def execute(self, query: Query, page: int, page_size: int) -> ResultPage:
        """Fetch one page of hits.

        Raises:
            ValueError: If ``page`` or ``page_size`` is below 1.
            EngineError: If the engine rejects or fails the request.
        """
        if page < 1 or page_size < 1:
            raise ValueError(f"Invalid pagination: page={page}, page_size={page_size}")

        offset = page_offset(page, page_size)
        try:
            response = self.client.search(
                index=self.index_name,
                query=query.to_dict(),
                from_=offset,
                size=page_size,
                source=FIELD_PROJECTION,
                track_total_hits=True,
                explain=self.explain,
            )
        except (ApiError, TransportError) as e:
            logger.error(
                "Search failed on index %s (offset=%d, size=%d): %s",
                self.index_name,
                offset,
                page_size,
                e,
            )
            raise EngineError("Search request failed", operation="search", cause=e) from e

        return ResultPage(
            total_hits=self._total(response["hits"]),
            page=page,
            page_size=page_size,
            took_ms=int(response["took"]),
            hits=tuple(self._to_item(hit) for hit in response["hits"]["hits"]),
        )

    @staticmethod
    def _total(hits: dict) -> int:
        total = hits.get("total", 0)
        # Older engines report a bare integer
        if isinstance(total, dict):
            return int(total.get("value", 0))
        return int(total)

    def _to_item(self, hit: dict) -> SearchResultItem:
        try:
            fields = BankRecord.model_validate(hit.get("_source") or {})
        except ValidationError as e:
            logger.error("Malformed document %s in index %s: %s", hit.get("_id"), self.index_name, e)
            raise EngineError(
                "Search returned a malformed document", operation="search", cause=e
            ) from e
        if self.explain and "_explanation" in hit:
            logger.debug("Explanation for %s: %s", hit["_id"], hit["_explanation"])
        return SearchResultItem(
            id=str(hit["_id"]),
            score=float(hit.get("_score") or 0.0),
            fields=fields,
        )
