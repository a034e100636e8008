"""
Character endpoints for API v1.

These routes expose the ranked listing, keyword search and deletion
of character records.  Query parameters arrive as raw strings and
are coerced here; every business rule lives in ``RankingService``.
Classified service errors are turned into JSON responses by the
exception handler installed in ``main.create_app``.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from ranking_admin_api.app.core.parsing import parse_leading_int
from ranking_admin_api.app.schemas.character import (
    DeleteResult,
    ErrorResponse,
    RankedPage,
    SearchResult,
)
from ranking_admin_api.app.services.ranking_service import RankingService

router = APIRouter()

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def get_ranking_service(request: Request) -> RankingService:
    """Build a service around the store opened at application start‑up."""
    return RankingService(request.app.state.character_store)


def _coerce_int(raw: Optional[str], default: int) -> int:
    """Parse the leading integer of a query string value.

    ``"2.5"`` and ``"2abc"`` give 2.  Missing values and values that do
    not start with an integer fall back to ``default``.
    """
    value = parse_leading_int(raw)
    return default if value is None else value


@router.get("/ranked", response_model=RankedPage, responses=_ERROR_RESPONSES)
async def list_ranked(
    page: Optional[str] = Query(None, description="1‑indexed page number"),
    page_size: Optional[str] = Query(None, alias="pageSize", description="Records per page (1‑1000)"),
    service: RankingService = Depends(get_ranking_service),
) -> RankedPage:
    """Return a page of characters ordered by level, then experience.

    Values are read up to the first non‑digit; missing or non‑numeric
    values fall back to page 1 and 10 records per page.  Numeric values
    outside the allowed range are rejected with HTTP 400; a page past
    the end is HTTP 404.
    """
    return await service.list_ranked(
        _coerce_int(page, DEFAULT_PAGE),
        _coerce_int(page_size, DEFAULT_PAGE_SIZE),
    )


@router.get("/search", response_model=SearchResult, responses=_ERROR_RESPONSES)
async def search(
    keyword: Optional[str] = Query(None, description="2‑30 characters matched against user ID and nickname"),
    service: RankingService = Depends(get_ranking_service),
) -> SearchResult:
    """Search characters by user ID or nickname (case insensitive, max 50 results)."""
    return await service.search(keyword if keyword is not None else "")


@router.delete(
    "/{user_id:path}",
    response_model=DeleteResult,
    status_code=status.HTTP_200_OK,
    responses=_ERROR_RESPONSES,
)
async def delete_character(
    user_id: str,
    service: RankingService = Depends(get_ranking_service),
) -> DeleteResult:
    """Permanently delete a character.  There is no way to undo this.

    The identifier may contain ``/`` (sent percent‑encoded or raw).
    """
    return await service.delete(user_id)
