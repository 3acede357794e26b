# config.py
from functools import lru_cache
from typing import Literal
from pydantic import SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

TURNSTILE_SITEVERIFY_URL = "https://challenges.cloudflare.com/turnstile/v0/siteverify"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Required secrets
    SESSION_HMAC_SECRET: SecretStr
    TURNSTILE_SECRET: SecretStr
    DATABASE_URL: str

    # Environment and CORS
    ENV: Literal["development", "production", "test"] = "development"
    ALLOWED_ORIGIN: str = "https://words.socolagames.com"

    # Game rules
    SESSION_WINDOW_SECONDS: int = 180
    LEADERBOARD_LIMIT: int = 10
    MAX_PLAYER_SCORE: int = 1000

    # Human verification
    TURNSTILE_VERIFY_URL: str = TURNSTILE_SITEVERIFY_URL
    TURNSTILE_TIMEOUT_SECONDS: float = 5.0
    CLIENT_IP_HEADER: str = "CF-Connecting-IP"

    DB_AUTO_CREATE: bool = True
    LOG_LEVEL: str = "INFO"

    @field_validator("DATABASE_URL")
    @classmethod
    def normalize_db_url(cls, v: str) -> str:
        if v.startswith("postgres://"):
            v = v.replace("postgres://", "postgresql+psycopg2://", 1)
        return v

    @field_validator("SESSION_WINDOW_SECONDS")
    @classmethod
    def positive_window(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("SESSION_WINDOW_SECONDS must be positive")
        return v

    @model_validator(mode="after")
    def validate_cors(self):
        if self.ENV == "production":
            if not self.ALLOWED_ORIGIN.strip():
                raise ValueError("ALLOWED_ORIGIN is empty in production.")
            if self.ALLOWED_ORIGIN.strip() == "*":
                raise ValueError("CORS wildcard (*) is not allowed in production.")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
