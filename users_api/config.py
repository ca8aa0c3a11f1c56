import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    host: str = "127.0.0.1"
    port: int = 3000
    database_url: str = "sqlite:///./users.db"
    jwt_secret: Optional[str] = None
    node_env: Optional[str] = None          # "development" exposes stack traces
    users_file: Path = Path("users.json")
    log_level: str = "INFO"

    @property
    def is_development(self) -> bool:
        return self.node_env == "development"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
