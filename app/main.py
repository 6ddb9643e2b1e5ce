from contextlib import asynccontextmanager
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.config import get_settings
from app.routers import messages, profiles, follows, posts, health
from app.ws import init_redis, close_redis

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    init_redis()
    yield
    # Shutdown
    await close_redis()


app = FastAPI(
    title="Crewnet API",
    description="Backend API for the film crew network: messages, profiles, follows and posts",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(messages.router, prefix="/api/v1/messages", tags=["Direct Messages"])
app.include_router(profiles.router, prefix="/api/v1/profiles", tags=["Profiles"])
app.include_router(follows.router, prefix="/api/v1/follows", tags=["Follows"])
app.include_router(posts.router, prefix="/api/v1/posts", tags=["Posts"])
app.include_router(posts.feed_router, prefix="/api/v1/feed", tags=["Feed"])
app.include_router(health.router, prefix="/api/v1/health", tags=["Health"])


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
