from pydantic_settings import BaseSettings, SettingsConfigDict

from brewlog.listing import DEFAULT_PAGE_SIZE


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Pydantic Settings reads env vars matching field names (case-insensitive),
    and a .env file when present.
    """

    # Format: sqlite+aiosqlite:///path/to/file.db
    database_url: str = "sqlite+aiosqlite:///./brewlog.db"

    # Pool tuning; ignored for in-memory databases, which use a single static connection.
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_pool_pre_ping: bool = True
    db_echo: bool = False
    db_busy_timeout: int = 30  # Seconds SQLite waits on a locked database

    default_page_size: int = DEFAULT_PAGE_SIZE

    openrouter_url: str = "https://openrouter.ai/api/v1/chat/completions"
    openrouter_api_key: str = ""
    openrouter_model: str = "openai/gpt-4o-mini"
    openrouter_timeout: float = 90.0

    # Pending AI usage records held in memory before new ones are dropped.
    usage_queue_size: int = 100

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
