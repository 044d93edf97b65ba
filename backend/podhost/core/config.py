from pathlib import Path
from typing import Optional
from functools import lru_cache
from urllib.parse import urlparse

from pydantic import field_validator
from pydantic_settings import BaseSettings

CATALOG_FILE = "podhost.db"
PODCASTS_DIR_NAME = "podcasts"


class Settings(BaseSettings):
    # App
    app_name: str = "podhost"
    debug: bool = False
    port: int = 80

    # Public base URL, used for feed links and cover URLs
    host: str

    # Storage
    root: str = "/podhost"
    database_url: Optional[str] = None  # defaults to sqlite file under root

    # Security
    credential: str = ""  # "user:password" or bare password

    # Optional admin UI build directory
    frontend_dir: Optional[str] = None

    class Config:
        env_file = ".env"
        case_sensitive = False

    @field_validator("host")
    @classmethod
    def normalize_host(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("host must be set to the public URL of the service")
        if not value.startswith("http://") and not value.startswith("https://"):
            value = f"https://{value}"
        return value.rstrip("/")

    @property
    def base_path(self) -> str:
        """Path prefix of the public URL, e.g. "/podcasts" for https://example.com/podcasts"""
        return urlparse(self.host).path.rstrip("/")

    @property
    def content_root(self) -> Path:
        return Path(self.root) / PODCASTS_DIR_NAME

    @property
    def catalog_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite:///{Path(self.root) / CATALOG_FILE}"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
