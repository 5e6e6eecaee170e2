"""Business logic services."""

from bankr.services.context import SearchContext, build_context, create_client
from bankr.services.geocode_service import GeocodeError, GeocodeService
from bankr.services.indexing import ensure_index, index_records, load_records
from bankr.services.search_service import BankSearchService

__all__ = [
    "SearchContext",
    "build_context",
    "create_client",
    "GeocodeError",
    "GeocodeService",
    "ensure_index",
    "index_records",
    "load_records",
    "BankSearchService",
]
