from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.config.settings import settings
from app.core.exceptions.exceptions import DomainError, UpstreamError
from app.middleware.security import Security
from app.schemas.stories import StoriesPage, StoryCursor
from app.services.story_page_service import StoryPageService
from app.api.dependencies import get_story_page_service
from app.utils.log import app_logger

router = APIRouter(prefix="/api/HackerNews", tags=["Hacker_News"])


@router.get(
    "/GetStoriesWithLinks",
    response_model=StoriesPage,
    summary="Page through the newest stories that link somewhere",
    responses={
        400: {"description": "Invalid cursor or search query"},
        502: {"description": "Hacker News API unavailable"},
    },
)
def get_stories_with_links(
    start_after_id: Optional[int] = Query(None, alias="startAfterId"),
    current_head: Optional[int] = Query(None, alias="currentHead"),
    next_head: Optional[int] = Query(None, alias="nextHead"),
    search_query: Optional[str] = Query(None, alias="searchQuery"),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, alias="pageSize"),
    service: StoryPageService = Depends(get_story_page_service),
) -> StoriesPage:
    """Return the next page of stories for the client's cursor.

    The cursor is entirely client-held: pass back the id of the last story
    shown as `startAfterId`, together with `currentHead` and `nextHead` from
    the previous response. Omit all three for the first page.
    """
    sec = Security()

    try:
        cursor = StoryCursor(
            start_after_id=sec.check_story_id("startAfterId", start_after_id),
            current_head=sec.check_story_id("currentHead", current_head),
            next_head=sec.check_story_id("nextHead", next_head),
            search_query=sec.clean_search_query(search_query),
            page_size=sec.check_page_size(page_size),
        )

        return service.get_page(**cursor.model_dump())
    except DomainError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except UpstreamError as e:
        app_logger.error("api.stories.upstream_error", service=e.service, status_code=e.status_code, error=str(e))
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
