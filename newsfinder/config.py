from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

PACKAGE_DIR = Path(__file__).parent


class Settings(BaseSettings):
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    news_api_key: str = ""
    news_api_base: str = "https://newsapi.org/v2"
    # None leaves requests without a timeout
    news_api_timeout: float | None = None
    templates_dir: Path = PACKAGE_DIR / "templates"
    assets_dir: Path = PACKAGE_DIR / "assets"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
