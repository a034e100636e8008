"""
Business logic for the character ranking admin.

``RankingService`` turns raw pagination, search and delete requests
into validated store operations and normalized responses.  It holds
no state besides the store handed to it, so a new instance can be
built per request.

Validation always happens before the store is touched and stops at
the first failing rule.  Every failure that leaves this module is a
``ServiceError``:

* validation problems are ``InvalidArgumentError`` / ``NotFoundError``
  with a specific message;
* ``StorageError`` from the store becomes ``StorageUnavailableError``
  with a generic message (the original error is only logged);
* anything else becomes ``InternalError``.
"""

from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from typing import Any, Iterator

from ranking_admin_api.app.core.errors import (
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    ServiceError,
    StorageUnavailableError,
)
from ranking_admin_api.app.repositories.character_repository import (
    SEARCH_RESULT_LIMIT,
    CharacterStore,
    StorageError,
)
from ranking_admin_api.app.schemas.character import DeleteResult, RankedPage, SearchResult

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 1000
MIN_KEYWORD_LENGTH = 2
MAX_KEYWORD_LENGTH = 30
MAX_USER_ID_LENGTH = 30
FORBIDDEN_CHARACTERS = frozenset("<>{}[]\\")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _has_forbidden_characters(value: str) -> bool:
    return any(ch in FORBIDDEN_CHARACTERS for ch in value)


class RankingService:
    """Ranked listing, keyword search and deletion of character records."""

    def __init__(self, store: CharacterStore) -> None:
        self.store = store

    async def list_ranked(self, page: int, page_size: int) -> RankedPage:
        """Return one page of records ordered by level, then experience.

        Raises ``InvalidArgumentError`` for a bad ``page``/``page_size``
        and ``NotFoundError`` when ``page`` is past the last page.  An
        empty store yields an empty page for any valid ``page``.
        """
        self._validate_page_params(page, page_size)

        with self._classify_errors("list ranked characters"):
            total_count = self.store.count()
            if total_count == 0:
                return RankedPage(
                    records=[],
                    total_count=0,
                    current_page=page,
                    total_pages=0,
                    has_more=False,
                )

            total_pages = math.ceil(total_count / page_size)
            if page > total_pages:
                raise NotFoundError(f"Page {page} does not exist. Total pages: {total_pages}")

            skip = (page - 1) * page_size
            records = self.store.find_page(skip, page_size)
            return RankedPage(
                records=records,
                total_count=total_count,
                current_page=page,
                total_pages=total_pages,
                has_more=skip + page_size < total_count,
            )

    async def search(self, keyword: str) -> SearchResult:
        """Find records whose user ID or nickname contains ``keyword``.

        The keyword is trimmed first.  At most ``SEARCH_RESULT_LIMIT``
        matches are returned; callers are not told whether more exist.
        """
        self._validate_keyword(keyword)
        normalized = keyword.strip()

        with self._classify_errors("search characters"):
            matches = self.store.find_by_keyword_substring(normalized, limit=SEARCH_RESULT_LIMIT)
        return SearchResult(
            matches=matches,
            returned_count=len(matches),
            normalized_keyword=normalized,
        )

    async def delete(self, user_id: str) -> DeleteResult:
        """Permanently delete the record identified by ``user_id``."""
        self._validate_user_id(user_id)

        with self._classify_errors("delete character"):
            if self.store.find_by_identifier(user_id) is None:
                raise NotFoundError("User not found")
            # Another request may have removed the row since the lookup.
            if not self.store.delete_by_identifier(user_id):
                raise NotFoundError("User not found")

        logger.info("Deleted character %s", user_id)
        return DeleteResult(
            success=True,
            message=f"User with userId {user_id} has been deleted.",
        )

    @staticmethod
    def _validate_page_params(page: Any, page_size: Any) -> None:
        if not _is_int(page) or page < 1:
            raise InvalidArgumentError("Page number must be a positive integer")
        if not _is_int(page_size) or page_size < 1 or page_size > MAX_PAGE_SIZE:
            raise InvalidArgumentError(
                f"Page size must be an integer between 1 and {MAX_PAGE_SIZE}"
            )

    @staticmethod
    def _validate_keyword(keyword: Any) -> None:
        if not isinstance(keyword, str) or not keyword.strip():
            raise InvalidArgumentError("Search keyword cannot be empty")

        trimmed = keyword.strip()
        if len(trimmed) < MIN_KEYWORD_LENGTH:
            raise InvalidArgumentError(
                f"Search keyword must be at least {MIN_KEYWORD_LENGTH} characters long"
            )
        if len(trimmed) > MAX_KEYWORD_LENGTH:
            raise InvalidArgumentError(
                f"Search keyword cannot exceed {MAX_KEYWORD_LENGTH} characters"
            )
        if _has_forbidden_characters(trimmed):
            raise InvalidArgumentError("Search keyword contains invalid characters")

    @staticmethod
    def _validate_user_id(user_id: Any) -> None:
        if not isinstance(user_id, str) or not user_id:
            raise InvalidArgumentError("Invalid userId format")
        if len(user_id) > MAX_USER_ID_LENGTH:
            raise InvalidArgumentError(f"UserId cannot exceed {MAX_USER_ID_LENGTH} characters")
        if _has_forbidden_characters(user_id):
            raise InvalidArgumentError("UserId contains invalid characters")

    @contextmanager
    def _classify_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except ServiceError:
            raise
        except StorageError as exc:
            logger.exception("Database error during %s", operation)
            raise StorageUnavailableError() from exc
        except Exception as exc:
            logger.exception("Unexpected error during %s", operation)
            raise InternalError() from exc
