"""
Pydantic schemas for character records and ranking responses.

Field names follow Python conventions internally and are serialised
in camelCase (``userId``, ``jobCode``, ``totalCount`` ...) because the
admin front‑end consumes that shape.  Both spellings are accepted on
input.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class CharacterBase(CamelModel):
    user_id: str = Field(..., max_length=30, examples=["hero01"])
    nickname: str = Field(..., examples=["Hero"])
    level: int = Field(1, ge=1, examples=[120])
    job: Optional[str] = Field(None, examples=["Warrior"])
    job_code: Optional[int] = Field(None, examples=[100])
    meso: Optional[int] = Field(None, description="Currency amount held by the character")
    play_time: Optional[int] = Field(None, description="Cumulative play time")
    exp: Optional[int] = Field(None, description="Experience points")


class CharacterCreate(CharacterBase):
    """Schema used by the bulk import.

    Timestamps are deliberately absent: they are always assigned by
    the database.
    """


class CharacterRead(CharacterBase):
    """A stored character as returned by the API."""

    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class RankedPage(CamelModel):
    """One page of the ranked listing."""

    records: List[CharacterRead]
    total_count: int
    current_page: int
    total_pages: int
    has_more: bool


class SearchResult(CamelModel):
    """Keyword search result, capped at a fixed number of matches.

    ``returned_count`` is the number of matches in this response, not
    the number of records in the store that match.
    """

    matches: List[CharacterRead]
    returned_count: int
    normalized_keyword: str


class DeleteResult(CamelModel):
    success: bool
    message: str


class ErrorResponse(BaseModel):
    detail: str = Field(..., examples=["Page size must be an integer between 1 and 1000"])
    error: str = Field(..., examples=["invalid_argument"])
