"""Search-related Pydantic schemas."""

from pydantic import BaseModel, Field

from bankr.schemas.bank import BankRecord


class SearchResultItem(BaseModel):
    """Individual search hit."""

    id: str = Field(..., description="Stable document identifier")
    score: float = Field(0.0, description="Engine relevance score")
    fields: BankRecord = Field(..., description="Full projection of the matched branch")


class SearchResponse(BaseModel):
    """One page of ranked search hits."""

    query: str = Field(..., description="Query as received")
    abbreviation: str | None = Field(None, description="Bank abbreviation detected in the query")

    # Pagination
    page: int = Field(1, ge=1, description="Current page, 1-based")
    page_size: int = Field(..., ge=1, description="Hits per page")
    total_hits: int = Field(0, ge=0, description="Total number of matching branches")
    total_results_pages: int = Field(0, ge=0, description="Number of pages for total_hits")
    more_results: bool = Field(False, description="Whether hits exist beyond this page")

    took_ms: int = Field(0, ge=0, description="Engine search time in milliseconds")
    results: list[SearchResultItem] = Field(default_factory=list)
