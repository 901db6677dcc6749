from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings
import os
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # PostgreSQL Configuration
    postgres_user: str = Field(default="admin", env="POSTGRES_USER")
    postgres_password: str = Field(default="admin", env="POSTGRES_PASSWORD")
    postgres_db: str = Field(default="swipematch", env="POSTGRES_DB")
    postgres_host: str = Field(default="db", env="POSTGRES_HOST")
    postgres_port: int = Field(default=5432, env="POSTGRES_PORT")
    # Full URL override (any async SQLAlchemy driver)
    database_url_override: Optional[str] = Field(default=None, alias="DATABASE_URL")

    # Application Configuration
    app_env: str = Field(default="dev", env="APP_ENV")
    api_port: int = Field(default=8000, env="API_PORT")
    jwt_secret: str = Field(
        default="change-me-in-production-use-a-secure-random-string",
        env="JWT_SECRET"
    )
    access_token_expires: int = Field(default=900, env="ACCESS_TOKEN_EXPIRES")  # 15 minutes

    # Redis (rate limiting + ARQ queue)
    redis_url: str = Field(default="redis://redis:6379/0", env="REDIS_URL")
    redis_pool_size: int = Field(default=20, env="REDIS_POOL_SIZE")

    # Matching
    default_cooldown_days: int = Field(default=30, env="DEFAULT_COOLDOWN_DAYS")
    min_cooldown_days: int = 1
    max_cooldown_days: int = 90
    feed_max_results: int = Field(default=50, env="FEED_MAX_RESULTS")

    # Rate limits
    swipe_daily_limit: int = Field(default=100, env="SWIPE_DAILY_LIMIT")
    message_rate_limit: int = Field(default=30, env="MESSAGE_RATE_LIMIT")
    message_rate_window_seconds: int = 60
    message_max_length: int = 2000

    # WebSocket
    websocket_auth_timeout: float = Field(default=10.0, env="WEBSOCKET_AUTH_TIMEOUT")
    websocket_heartbeat_interval: int = Field(default=30, env="WEBSOCKET_HEARTBEAT_INTERVAL")

    # Analytics sink; events are only logged when unset
    analytics_url: Optional[str] = Field(default=None, env="ANALYTICS_URL")

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"

    # CORS - allow frontend origins (filter out None values)
    allowed_origins: List[str] = [
        origin for origin in [
            "http://localhost:3000",
            os.getenv("FRONTEND_URL")
        ] if origin is not None
    ]

    class Config:
        env_file = ".env"
        extra = "ignore"
        populate_by_name = True


settings = Settings()
