from typing import Optional

from app.config.settings import settings
from app.core.exceptions.exceptions import InvalidCursorError, InvalidSearchQueryError


class Security:
    """Request parameter sanitizer for the stories endpoint.

    Behavior:
    - Search queries are stripped; a blank query means "no filter".
    - Queries longer than `max_query_length` are rejected rather than truncated.
    - Control characters are removed from the query before matching.
    - Page sizes must be within 1..`max_page_size`.
    - Ids supplied in the cursor must be positive (Hacker News ids start at 1).
    """

    def __init__(self, max_page_size: Optional[int] = None, max_query_length: Optional[int] = None):
        self.max_page_size = settings.MAX_PAGE_SIZE if max_page_size is None else max_page_size
        self.max_query_length = settings.MAX_SEARCH_QUERY_LENGTH if max_query_length is None else max_query_length

    def clean_search_query(self, query: Optional[str]) -> Optional[str]:
        if query is None:
            return None

        cleaned = ''.join(ch for ch in query if ch.isprintable()).strip()
        if not cleaned:
            return None

        if len(cleaned) > self.max_query_length:
            raise InvalidSearchQueryError(self.max_query_length)
        return cleaned

    def check_page_size(self, page_size: int) -> int:
        if page_size < 1 or page_size > self.max_page_size:
            raise InvalidCursorError(f"pageSize must be between 1 and {self.max_page_size}")
        return page_size

    def check_story_id(self, name: str, story_id: Optional[int]) -> Optional[int]:
        if story_id is not None and story_id < 1:
            raise InvalidCursorError(f"{name} must be a positive story id")
        return story_id
