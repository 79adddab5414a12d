from pydantic_settings import BaseSettings
import os
import logging
from pathlib import Path
from dotenv import load_dotenv

_logger = logging.getLogger(__name__)

# Look for .env in api directory (parent of vocadeck directory)
api_dir = Path(__file__).parent.parent.parent
env_path = api_dir / ".env"

if env_path.exists():
    load_dotenv(env_path, override=True)
    _logger.info(f"Loaded .env file from: {env_path}")
else:
    # Fallback to current directory
    current_env = Path(".env")
    if current_env.exists():
        load_dotenv(current_env, override=True)
        _logger.info(f"Loaded .env file from: {current_env.absolute()}")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database - hosted Postgres provides DATABASE_URL (uppercase)
    database_url: str = ""

    # API
    api_v1_prefix: str = "/api/v1"

    # CORS
    cors_origins: list[str] = ["*"]

    # "development" enables tracebacks in 500 responses
    environment: str = "production"
    log_level: str = "INFO"

    # Deck ordering: spacing between consecutive display_order keys
    order_gap: int = 1000

    # How many times a conflicting write is retried before surfacing
    conflict_retry_attempts: int = 3

    class Config:
        env_file = ".env"
        case_sensitive = False

    def __init__(self, **kwargs):
        # Ensure we read DATABASE_URL from environment (hosting provides it uppercase)
        if not kwargs.get("database_url"):
            kwargs["database_url"] = os.getenv("DATABASE_URL", "")
        super().__init__(**kwargs)

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev", "local")

    @property
    def sqlalchemy_url(self) -> str:
        """Database URL normalised for SQLAlchemy, falling back to a local SQLite file."""
        db_url = self.database_url
        if not db_url:
            return f"sqlite:///{api_dir / 'vocadeck.db'}"
        if db_url.startswith("postgres://"):
            # SQLAlchemy prefers postgresql:// over postgres://
            db_url = db_url.replace("postgres://", "postgresql://", 1)
        return db_url


# Create settings instance
settings = Settings()

if not settings.database_url:
    _logger.warning("DATABASE_URL not set, using local SQLite database")
