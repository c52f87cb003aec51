from typing import List, Optional

import requests
from pydantic import ValidationError

from app.clients.base_http_client import BaseHTTPClient
from app.config.settings import settings
from app.core.exceptions.exceptions import UpstreamError
from app.schemas.stories import Item
from app.utils.log import app_logger


class HackerNewsClient(BaseHTTPClient):
    def __init__(self, base_url: Optional[str] = None,
                 new_stories_path: Optional[str] = None,
                 session: Optional[requests.Session] = None):
        super().__init__(
            base_url=base_url or settings.HACKER_NEWS_BASE_URL,
            service_name="hacker-news",
            timeout=settings.HTTP_TIMEOUT,
            max_retries=settings.HTTP_MAX_RETRIES,
            retry_delay=settings.HTTP_RETRY_DELAY,
            session=session,
        )
        self.new_stories_path = (new_stories_path or settings.HACKER_NEWS_NEW_STORIES_PATH).strip('/')

    def fetch_new_story_ids(self) -> List[int]:
        """ fetch the current newest-first list of story ids """
        payload = self.get(f"{self.new_stories_path}.json")
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise UpstreamError(self.service_name, f"expected a list of ids, got {type(payload).__name__}")
        # bools are ints too; floats and strings would be coerced into other ids
        malformed = [story_id for story_id in payload if isinstance(story_id, bool) or not isinstance(story_id, int)]
        if malformed:
            raise UpstreamError(self.service_name, f"malformed story ids: {malformed[:5]!r}")
        return payload

    def get_item(self, item_id: int) -> Optional[Item]:
        """ fetch a single item; None when it doesn't exist or can't be parsed """
        payload = self.get(f"item/{item_id}.json")
        if not payload:
            return None
        try:
            return Item.model_validate(payload)
        except ValidationError as e:
            app_logger.warning("hackernews.item_invalid", item_id=item_id, errors=e.error_count())
            return None
