# backend/citizen_feedback/core/config.py

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB_NAME: str = "citizen_feedback"

    # --- Auth ---
    JWT_SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7
    OTP_EXPIRE_MINUTES: int = 10
    OTP_LENGTH: int = 6
    OTP_MAX_ATTEMPTS: int = 5
    MIN_PASSWORD_LENGTH: int = 6

    # --- Mail ---
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    MAIL_FROM: str = "noreply@ahilyanagarpolice.in"
    MAIL_FROM_NAME: str = "Ahilyanagar Police"

    # --- HTTP ---
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:3001"
    UPLOAD_DIR: str = "./uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # --- Dashboard ---
    API_BASE_URL: str = "http://localhost:8000"
    POLL_INTERVAL_SECONDS: float = 60.0
    DASHBOARD_TIMEZONE: str = "Asia/Kolkata"

    # --- Aggregation ---
    IMPROVEMENT_THRESHOLD: float = 5.0
    TREND_WINDOW_DAYS: int = 10
    NAME_MATCH_MIN_TOKEN_LENGTH: int = 3
    NAME_MATCH_TIERS: str = "exact,substring,token"
    RATING_MIN: int = 1
    RATING_MAX: int = 10
    SENTIMENT_NEGATIVE_MAX: int = 4
    SENTIMENT_NEUTRAL_MAX: int = 6
    SENTIMENT_FALLBACK: str = "neutral"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
