from fastapi import Request

from app.clients.hacker_news_client import HackerNewsClient
from app.services.freshness_cache import FreshnessCache
from app.services.story_page_service import StoryPageService


def get_cache(request: Request) -> FreshnessCache:
    return request.app.state.cache


def get_hacker_news_client(request: Request) -> HackerNewsClient:
    return request.app.state.hacker_news_client


def get_story_page_service(request: Request) -> StoryPageService:
    """ build the page service around the process-wide client and cache """
    return StoryPageService(
        source=get_hacker_news_client(request),
        cache=get_cache(request),
    )
