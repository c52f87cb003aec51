"""Pytest configuration and shared fixtures.

Organization:
    - Clock Fixtures: a manually advanced clock for cache expiry
    - Source Fixtures: an in-memory stand-in for the Hacker News API
    - Service Fixtures: cache and page service wired to the fakes
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

import pytest

from app.schemas.stories import Item
from app.services.freshness_cache import FreshnessCache
from app.services.story_page_service import StoryPageService


# ============================================================================
# Clock Fixtures
# ============================================================================


class ManualClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


# ============================================================================
# Source Fixtures
# ============================================================================


class FakeStorySource:
    """In-memory story source with a mutable id snapshot.

    Records every upstream call so tests can assert on cache behaviour.
    """

    def __init__(self, ids: Iterable[int] = (), items: Optional[Dict[int, Optional[Item]]] = None):
        self.ids: List[int] = list(ids)
        self.items: Dict[int, Optional[Item]] = dict(items or {})
        self.id_fetches = 0
        self.item_fetches: List[int] = []
        self.fail_on: Optional[int] = None
        self.error: Optional[Exception] = None

    def linked(self, *ids: int) -> "FakeStorySource":
        """Register plain stories that all have a url."""
        for story_id in ids:
            self.items[story_id] = Item(id=story_id, url=f"url{story_id}")
        return self

    def fetch_new_story_ids(self) -> List[int]:
        self.id_fetches += 1
        if self.error is not None and self.fail_on is None:
            raise self.error
        return list(self.ids)

    def get_item(self, item_id: int) -> Optional[Item]:
        self.item_fetches.append(item_id)
        if self.error is not None and self.fail_on == item_id:
            raise self.error
        return self.items.get(item_id)


@pytest.fixture
def source() -> FakeStorySource:
    return FakeStorySource()


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def cache(clock: ManualClock) -> FreshnessCache:
    return FreshnessCache(default_ttl=600, clock=clock)


@pytest.fixture
def service(source: FakeStorySource, cache: FreshnessCache) -> StoryPageService:
    return StoryPageService(source=source, cache=cache, ids_ttl=60, item_ttl=600)
