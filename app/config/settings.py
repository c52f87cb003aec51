from pydantic_settings import BaseSettings
from dotenv import load_dotenv, find_dotenv
from typing import List

_env_path = find_dotenv()  # locate a .env file in this folder or parent folders
if _env_path:
    load_dotenv(_env_path)


class Settings(BaseSettings):
    # Hacker News API
    HACKER_NEWS_BASE_URL: str = 'https://hacker-news.firebaseio.com/v0'
    HACKER_NEWS_NEW_STORIES_PATH: str = 'newstories'

    # Outbound HTTP
    HTTP_TIMEOUT: int = 10
    HTTP_MAX_RETRIES: int = 2
    HTTP_RETRY_DELAY: float = 0.5

    # Cache lifetimes (seconds). Story ids churn constantly, items barely change.
    STORY_IDS_CACHE_TTL: float = 60
    STORY_ITEM_CACHE_TTL: float = 600

    # Paging
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100
    MAX_SEARCH_QUERY_LENGTH: int = 200

    # Frontend dev server
    CORS_ORIGINS: List[str] = ['http://localhost:4200']

    LOG_LEVEL: str = 'INFO'

settings = Settings()
