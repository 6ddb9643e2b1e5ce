from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite+aiosqlite:///./crewnet.db"
    database_echo: bool = False

    # Security (tokens are issued by the identity provider, we only verify them)
    secret_key: str
    algorithm: str = "HS256"
    session_cookie_name: str = "crew_session"

    # Redis
    redis_url: str = ""  # Optional Redis URL for pub/sub (local: redis://localhost:6379)

    # Content limits
    message_max_length: int = 1000
    post_max_length: int = 1000
    feed_limit: int = 25

    log_level: str = "INFO"

    cors_origins: list[str] = [
        "http://localhost:3000",
    ]

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()
