"""Runtime settings loaded from the environment and an optional .env file."""
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    PROJECT_NAME: str = "Chemical Vendor Price Lookup"

    # PubChem (CID resolution and vendor listing)
    PUBCHEM_BASE_URL: str = "https://pubchem.ncbi.nlm.nih.gov"
    PUBCHEM_TIMEOUT_SECONDS: float = 15.0

    # Commerce API backing the "api" vendors
    COMMERCE_API_BASE_URL: Optional[str] = None
    COMMERCE_API_KEY: Optional[str] = None
    COMMERCE_API_SECRET: Optional[str] = None
    COMMERCE_TIMEOUT_SECONDS: float = 15.0

    # JSON file mapping identifiers to commerce product keys
    CATALOG_PATH: Optional[str] = None

    # Browser crawling
    CRAWL_HEADLESS: bool = True
    CRAWL_NAVIGATION_TIMEOUT_MS: int = 30000
    BLD_POPUP_TIMEOUT_MS: int = 5000
    SCREENSHOT_DIR: str = "screenshots"

    AGGREGATOR_MAX_WORKERS: int = 8

    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    class Config:
        case_sensitive = True
        env_file = ".env"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
