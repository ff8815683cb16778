import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()


def _env_int(name, default):
    value = os.getenv(name)
    return int(value) if value not in (None, "") else default


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Auth
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=_env_int("JWT_EXPIRES_HOURS", 24))
    LOGIN_MAX_ATTEMPTS = _env_int("LOGIN_MAX_ATTEMPTS", 5)
    LOGIN_LOCKOUT_SECONDS = _env_int("LOGIN_LOCKOUT_SECONDS", 5 * 60)
    LOGIN_ATTEMPT_CAPACITY = _env_int("LOGIN_ATTEMPT_CAPACITY", 10_000)

    # Media
    MEDIA_BACKEND = os.getenv("MEDIA_BACKEND", "local")  # local | s3
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "uploads")
    MEDIA_BASE_URL = os.getenv("MEDIA_BASE_URL", "/uploads")
    S3_MEDIA_BUCKET = os.getenv("S3_MEDIA_BUCKET")
    S3_MEDIA_REGION = os.getenv("S3_MEDIA_REGION")
    S3_PUBLIC_BASE_URL = os.getenv("S3_PUBLIC_BASE_URL")
    MAX_CONTENT_LENGTH = _env_int("MAX_CONTENT_LENGTH", 10 * 1024 * 1024)

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT = os.getenv("LOG_FORMAT", "json")
    EXPOSE_ERROR_DETAILS = False

    # Cross-origin access
    FRONTEND_URL = os.getenv("FRONTEND_URL")
    CORS_ORIGINS = [
        origin
        for origin in (
            FRONTEND_URL,
            "http://localhost:3000",
            "http://localhost:5173",
            "http://localhost:3001",
        )
        if origin
    ]

    # Rate limiting (flask-limiter)
    RATELIMIT_ENABLED = True
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "100 per 15 minutes")
    API_RATE_LIMIT = os.getenv("API_RATE_LIMIT", "50 per 15 minutes")
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_HEADERS_ENABLED = True


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URI", "sqlite:///entyre-dev.db")
    LOG_FORMAT = os.getenv("LOG_FORMAT", "text")
    EXPOSE_ERROR_DETAILS = True


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "testing-secret-key-that-is-long-enough"
    LOG_FORMAT = "text"
    LOG_LEVEL = "WARNING"
    RATELIMIT_ENABLED = False


class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")


config_by_name = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig
}
