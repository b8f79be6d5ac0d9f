"""Application configuration."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Site
    site_url: str = "https://w.linovelib.com"

    # Storage
    data_dir: str = "./data"

    # HTTP
    request_timeout: float = 30.0
    retry_times: int = 3
    retry_backoff: float = 1.0

    # Crawl policy
    skip_failed_images: bool = True

    # Environment
    environment: str = "development"
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
