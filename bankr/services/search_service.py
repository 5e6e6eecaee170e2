"""Search service: raw query in, page of ranked branches out."""

import logging

from fastapi import Request

from bankr.core.exceptions import QueryValidationError
from bankr.schemas.search import SearchResponse
from bankr.search.normalizer import normalize_query
from bankr.search.query_builder import build_query
from bankr.services.context import SearchContext

logger = logging.getLogger(__name__)


class BankSearchService:
    """Runs the normalize -> match -> build -> execute pipeline for one request."""

    def __init__(self, context: SearchContext):
        self.context = context
        self.settings = context.settings

    def validate_query(self, query: str | None) -> str:
        """Return the trimmed query or raise if it is too short."""
        query = (query or "").strip()
        if len(query) < self.settings.min_query_length:
            raise QueryValidationError(
                f"Search query should be of minimum {self.settings.min_query_length} characters"
            )
        return query

    @staticmethod
    def parse_page(page: str | int | None) -> int:
        """Parse a 1-based page number; missing or blank means page 1."""
        if page is None or (isinstance(page, str) and not page.strip()):
            return 1
        try:
            number = int(page)
        except (TypeError, ValueError):
            raise QueryValidationError("Invalid page number.") from None
        if number < 1:
            raise QueryValidationError("Invalid page number.")
        return number

    def search(self, query: str | None, page: str | int | None = None) -> SearchResponse:
        """Search branches for a free-text query.

        Raises:
            QueryValidationError: For a short query, a bad page number, or a
                query with nothing left to search after normalization.
            EngineError: If the engine fails.
        """
        query = self.validate_query(query)
        page_number = self.parse_page(page)
        page_size = self.settings.page_size

        tokens = normalize_query(query)
        match = self.context.matcher.match(tokens)
        built = build_query(match.free_text, match.abbreviation)

        result = self.context.executor.execute(built, page_number, page_size)

        logger.info(
            "Searched for term q=%r abbreviation=%s - %d results generated in %dms",
            query,
            match.abbreviation,
            result.total_hits,
            result.took_ms,
        )

        return SearchResponse(
            query=query,
            abbreviation=match.abbreviation,
            page=page_number,
            page_size=page_size,
            total_hits=result.total_hits,
            total_results_pages=result.total_pages,
            more_results=result.has_more,
            took_ms=result.took_ms,
            results=list(result.hits),
        )


def get_search_context(request: Request) -> SearchContext:
    """FastAPI dependency: the context built during application startup."""
    return request.app.state.context


def get_search_service(request: Request) -> BankSearchService:
    """FastAPI dependency: a search service bound to the startup context."""
    return BankSearchService(get_search_context(request))
