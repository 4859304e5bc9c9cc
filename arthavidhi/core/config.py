from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # SQLite file under the project root by default
    DATABASE_URL: str = "sqlite:///./arthavidhi_data/arthavidhi.db"

    # Soft auth: requests without an X-User-Id header act as this user
    DEFAULT_USER_ID: int = 1
    DEFAULT_USER_NAME: str = "Demo User"
    DEFAULT_USER_EMAIL: str = "demo@arthavidhi.com.np"
    DEFAULT_USER_PHONE: str = "9800000000"

    CORS_ORIGINS: List[str] = ["*"]

    LOG_LEVEL: str = "INFO"

    APP_NAME: str = "ArthaVidhi Billing API"
    APP_VERSION: str = "1.0.0"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
