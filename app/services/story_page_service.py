from enum import Enum
from typing import List, Optional, Protocol, Sequence

from app.config.settings import settings
from app.core.exceptions.exceptions import InvalidCursorError
from app.schemas.stories import Item, StoriesPage
from app.services.freshness_cache import FreshnessCache
from app.utils.log import app_logger

STORY_IDS_CACHE_KEY = "newstories"


def story_cache_key(story_id: int) -> str:
    return f"story:{story_id}"


class StorySource(Protocol):
    """Upstream capabilities the page assembler depends on."""

    def fetch_new_story_ids(self) -> List[int]: ...

    def get_item(self, item_id: int) -> Optional[Item]: ...


class WalkState(str, Enum):
    SCANNING = "scanning"
    HEAD_REACHED = "head_reached"
    WRAPPED = "wrapped"
    CAUGHT_UP = "caught_up"


class _HeadWalk:
    """Position and head bookkeeping for one pass over a story id snapshot.

    The snapshot is treated as a ring. ``current_head`` is the newest story
    the client has already paged through; ``next_head`` is the story that
    takes its place once the walk comes back around to ``current_head``.
    """

    def __init__(self, ids: Sequence[int], current_head: Optional[int], next_head: Optional[int]):
        self.ids = ids
        self._members = frozenset(ids)
        self.current_head = current_head
        self.next_head = next_head
        self.index = 0
        self.state = WalkState.SCANNING

    @property
    def newest(self) -> int:
        return self.ids[0]

    @property
    def current_id(self) -> int:
        return self.ids[self.index]

    def _is_present(self, story_id: Optional[int]) -> bool:
        return story_id is not None and story_id in self._members

    def _wrap(self) -> None:
        self.index = 0
        self.next_head = self.newest

    def start_after(self, start_after_id: Optional[int]) -> None:
        if start_after_id is None:
            return
        if self._is_present(start_after_id):
            self.index = self.ids.index(start_after_id) + 1
        else:
            # the client's last story fell off the end of the list
            self.next_head = self.newest
        if self.index >= len(self.ids):
            self._wrap()

    def at_head(self) -> bool:
        if self.current_id == self.current_head:
            return True
        # the old head was evicted before we ever reached it
        return (
            self.index == len(self.ids) - 1
            and self.current_head is not None
            and not self._is_present(self.current_head)
        )

    def reach_head(self, lookahead_only: bool) -> None:
        """Move past ``current_head``.

        A hit while only the lookahead story is missing settles
        ``has_more_stories`` and leaves the heads alone. Any other hit wraps
        to the newest story. The walk is caught up when the story under the
        cursor is ``current_head`` itself.
        """
        self.state = WalkState.HEAD_REACHED
        if not lookahead_only:
            self.wrap_to_next_head()
        if self.current_id == self.current_head:
            self.state = WalkState.CAUGHT_UP

    def wrap_to_next_head(self) -> None:
        self.current_head = self.next_head
        self.next_head = self.newest
        self.index = 0
        self.state = WalkState.WRAPPED

    def normalize_heads(self) -> None:
        if not self._is_present(self.current_head):
            self.current_head = self.newest
        if not self._is_present(self.next_head):
            self.next_head = self.newest

    def advance(self) -> None:
        self.index += 1
        if self.index >= len(self.ids):
            self._wrap()
        self.state = WalkState.SCANNING


class StoryPageService:
    """Assembles pages of linkable stories over the volatile "new stories" list.

    Paging is cursor based: the client sends back the last story id it saw
    along with the two head ids from the previous page. Stories inserted at
    the front of the list since the client started are picked up when the
    walk wraps around past ``current_head``; stories that dropped off the end
    reset the window to the newest story.
    """

    def __init__(self, source: StorySource, cache: FreshnessCache,
                 ids_ttl: Optional[float] = None, item_ttl: Optional[float] = None):
        self.source = source
        self.cache = cache
        self.ids_ttl = settings.STORY_IDS_CACHE_TTL if ids_ttl is None else ids_ttl
        self.item_ttl = settings.STORY_ITEM_CACHE_TTL if item_ttl is None else item_ttl

    def _story_ids(self) -> List[int]:
        return self.cache.get_or_fetch(STORY_IDS_CACHE_KEY, self.ids_ttl, self.source.fetch_new_story_ids) or []

    def _story(self, story_id: int) -> Optional[Item]:
        return self.cache.get_or_fetch(
            story_cache_key(story_id), self.item_ttl, lambda: self.source.get_item(story_id)
        )

    @staticmethod
    def _accepts(story: Optional[Item], search_query: Optional[str]) -> bool:
        if story is None or story.deleted or not story.has_link:
            return False
        return search_query is None or story.matches(search_query)

    def get_page(self, start_after_id: Optional[int] = None,
                 current_head: Optional[int] = None,
                 next_head: Optional[int] = None,
                 search_query: Optional[str] = None,
                 page_size: int = 20) -> StoriesPage:
        """Return up to `page_size` stories following `start_after_id`.

        One extra matching story is looked up past the end of the page to
        decide ``has_more_stories``; it is not included in the result.
        Upstream failures propagate as ``UpstreamError`` and no partial page
        is returned.
        """
        if page_size < 1:
            raise InvalidCursorError(f"page_size must be positive, got {page_size}")
        if search_query is not None and not search_query.strip():
            search_query = None

        ids = self._story_ids()
        if not ids:
            app_logger.info("stories.empty_snapshot")
            return StoriesPage()

        walk = _HeadWalk(ids, current_head, next_head)
        walk.start_after(start_after_id)

        items: List[Item] = []
        accepted = 0
        has_more_stories = False

        while accepted < page_size + 1:
            if walk.at_head():
                walk.reach_head(lookahead_only=accepted == page_size)
                if walk.state is WalkState.CAUGHT_UP:
                    break
                app_logger.debug(
                    "stories.head_passed",
                    state=walk.state.value,
                    current_head=walk.current_head,
                    next_head=walk.next_head,
                )

            walk.normalize_heads()

            story = self._story(walk.current_id)
            if self._accepts(story, search_query):
                if accepted == page_size:
                    has_more_stories = True
                else:
                    items.append(story)
                accepted += 1

            walk.advance()

        app_logger.info(
            "stories.page",
            start_after_id=start_after_id,
            returned=len(items),
            current_head=walk.current_head,
            next_head=walk.next_head,
            has_more_stories=has_more_stories,
            state=walk.state.value,
        )
        return StoriesPage(
            items=items,
            current_head=walk.current_head,
            next_head=walk.next_head,
            has_more_stories=has_more_stories,
        )
