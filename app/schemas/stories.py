from typing import List, Optional
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ItemType(str, Enum):
    JOB = "job"
    STORY = "story"
    COMMENT = "comment"
    POLL = "poll"
    POLLOPT = "pollopt"


class Item(BaseModel):
    """A Hacker News item as returned by ``/item/{id}.json``.

    Field names follow the upstream wire format (``by`` is the author,
    ``text`` the body and ``time`` a unix timestamp).
    """
    model_config = ConfigDict(frozen=True)

    id: int
    deleted: Optional[bool] = None
    type: Optional[ItemType] = None
    by: Optional[str] = None
    time: Optional[int] = None
    text: Optional[str] = None
    dead: Optional[bool] = None
    parent: Optional[int] = None
    poll: Optional[int] = None
    kids: Optional[List[int]] = None
    url: Optional[str] = None
    score: Optional[int] = None
    title: Optional[str] = None
    parts: Optional[List[int]] = None
    descendants: Optional[int] = None

    @property
    def has_link(self) -> bool:
        return bool(self.url and self.url.strip())

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on title, author, body or url."""
        needle = query.casefold()
        return any(
            field is not None and needle in field.casefold()
            for field in (self.title, self.by, self.text, self.url)
        )


class StoryCursor(BaseModel):
    """Client-held paging state, echoed back on every request."""
    model_config = ConfigDict(frozen=True)

    start_after_id: Optional[int] = None
    current_head: Optional[int] = None
    next_head: Optional[int] = None
    search_query: Optional[str] = None
    page_size: int = 20


class StoriesPage(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    items: List[Item] = Field(default_factory=list)
    current_head: Optional[int] = Field(None, description="Newest id the client has fully paged through")
    next_head: Optional[int] = Field(None, description="Becomes current_head once the walk wraps around")
    has_more_stories: bool = False
