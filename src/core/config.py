import os

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional


class Settings(BaseSettings):
    HOST: str = Field(default="127.0.0.1")
    PORT: int = Field(default=3000)
    ADMIN_USER: str = Field(default="admin")
    ADMIN_PASS: str = Field(default="admin123")
    SMTP_HOST: Optional[str] = Field(default=None)
    SMTP_PORT: int = Field(default=587)
    SMTP_SECURE: bool = Field(default=False)
    SMTP_USER: Optional[str] = Field(default=None)
    SMTP_PASS: Optional[str] = Field(default=None)
    SMTP_FROM: str = Field(default="noreply@example.com")
    DATA_DIR: str = Field(default="data")
    DATABASE_URL: Optional[str] = Field(default=None)
    LOG_LEVEL: str = Field(default="INFO")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"sqlite:///{os.path.join(self.DATA_DIR, 'app.db')}"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
