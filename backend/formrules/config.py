from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Localization
    LANGUAGE: str = "en"  # Language code for default validation messages

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for production (structured JSON), False for dev (colored)

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
