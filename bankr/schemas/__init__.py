"""Pydantic schemas for request/response validation."""

from bankr.schemas.bank import CSV_COLUMNS, AbbreviationEntry, BankRecord
from bankr.schemas.common import HealthResponse, MessageResponse
from bankr.schemas.search import SearchResponse, SearchResultItem

__all__ = [
    "CSV_COLUMNS",
    "AbbreviationEntry",
    "BankRecord",
    "HealthResponse",
    "MessageResponse",
    "SearchResponse",
    "SearchResultItem",
]
