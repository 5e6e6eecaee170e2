"""Search router for bank branch lookup."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from bankr.schemas.common import MessageResponse
from bankr.schemas.search import SearchResponse
from bankr.services.search_service import BankSearchService, get_search_service

router = APIRouter(prefix="/search", tags=["Search"])


@router.get(
    "",
    response_model=SearchResponse,
    responses={400: {"model": MessageResponse}, 500: {"model": MessageResponse}},
)
def search(
    q: Annotated[str | None, Query(description="Search query, at least 3 characters")] = None,
    p: Annotated[str | None, Query(description="Page number, 1-based")] = None,
    service: BankSearchService = Depends(get_search_service),
) -> SearchResponse:
    """Search bank branches by bank, place, branch or code.

    The query may mix a bank abbreviation, place names and noise words;
    a confidently detected abbreviation restricts hits to that bank.

    **Examples:**
    - `GET /api/search?q=sbi jp nagar` - SBI branches in JP Nagar
    - `GET /api/search?q=hdfc koramangala&p=2` - second page
    - `GET /api/search?q=HDFC0000123` - lookup by IFSC
    """
    return service.search(q, p)
