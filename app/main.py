from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from app.api.stories import router as stories_router
from app.clients.hacker_news_client import HackerNewsClient
from app.config.settings import settings
from app.services.freshness_cache import FreshnessCache
from app.utils.log import app_logger

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup logic: one cache and one HTTP session shared by every request
    app.state.cache = FreshnessCache(default_ttl=settings.STORY_ITEM_CACHE_TTL)
    app.state.hacker_news_client = HackerNewsClient()
    app_logger.info("app.startup", base_url=settings.HACKER_NEWS_BASE_URL)
    yield
    # Shutdown logic
    app.state.hacker_news_client.close()
    app.state.cache.clear_all()
    app_logger.info("app.shutdown")

app = FastAPI(title="Hacker Feed", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# include routes
app.include_router(stories_router)


@app.get("/health", tags=["Health"])
def health() -> dict:
    return {"status": "ok"}
