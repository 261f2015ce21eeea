from pathlib import Path
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """ETL job settings.

    Uses pydantic BaseSettings to load configuration from environment variables
    prefixed with ``ETL_`` (e.g. ``ETL_INPUT_PATH``).
    """
    # File locations
    INPUT_PATH: Path = Path("./data/input")
    PROCESSED_PATH: Path = Path("./data/processed")
    ERROR_PATH: Path = Path("./data/error")
    FILE_PATTERN: str = "*.csv"
    CSV_SEPARATOR: str = ","

    # Load strategy
    USE_DATABASE_MODE: bool = False
    DATABASE_PATH: Optional[str] = None  # DuckDB file acting as the durable store

    # Logging
    LOG_LEVEL: str = "INFO"
    LOGS_DIR_NAME: str = "logs"
    LOG_FILENAME: str = "oilgas_etl.log"

    # Business metrics (rough industry averages)
    OIL_PRICE_PER_BARREL: float = 75.0
    GAS_PRICE_PER_MCF: float = 3.0

    model_config = SettingsConfigDict(env_prefix="ETL_", extra="ignore")

    @property
    def database_mode_enabled(self) -> bool:
        """Database mode needs both the toggle and a connection string."""
        return self.USE_DATABASE_MODE and bool(self.DATABASE_PATH)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
