from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings
from enum import Enum

class BaseConfig(BaseSettings):
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name":True
    }

class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

class CompressionType(str, Enum):
    GZIP = "gz"
    BZIP2 = "bz2"
    ZIP = "zip"

class AppSettings(BaseSettings):
    app_name: str = Field(
        default="vidshare",
        min_length=1,
        max_length=100,
        alias="APP_NAME"
    )
    app_port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        alias="APP_PORT"
    )

    app_host: str = Field(default="0.0.0.0")
    app_reload: bool = Field(default=False)
    app_log_level: LogLevel = Field(default=LogLevel.INFO)
    log_format: str = Field(default="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}")
    log_file: str = Field(default="logs/app.log")
    log_rotation: str = Field(default="1 day")
    log_compression: CompressionType = Field(default=CompressionType.GZIP)

    model_config = BaseConfig.model_config

class DatabaseSettings(BaseSettings):
    postgres_user: str = Field(..., min_length=1, alias="POSTGRES_USER")
    postgres_password: str = Field(..., min_length=1, alias="POSTGRES_PASSWORD")
    postgres_db: str = Field(..., min_length=1, alias="POSTGRES_DB")
    postgres_host: str = Field(default="localhost", alias="POSTGRES_HOST")
    postgres_port: int = Field(default=5432, ge=1, le=65535, alias="POSTGRES_PORT")
    debug_sql: bool = Field(default=False, alias="DEBUG_SQL")

    @property
    def database_url(self) -> str:
        return f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"

    model_config = BaseConfig.model_config


class RedisSettings(BaseSettings):
    redis_host: str = Field(default="localhost", alias="REDIS_HOST")
    redis_port: int = Field(default=6379, ge=1, le=65535, alias="REDIS_PORT")
    redis_password: Optional[str] = Field(default=None, alias="REDIS_PASSWORD")
    job_timeout: int = Field(default=60, ge=1, alias="REDIS_JOB_TIMEOUT")
    model_config = BaseConfig.model_config

class JWTSettings(BaseSettings):
    secret_key: str = Field(..., min_length=32, alias="SECRET_KEY")
    refresh_token_secret_key: str = Field(..., min_length=32, alias="REFRESH_TOKEN_SECRET_KEY")
    algorithm: str = Field(default="HS256", alias="ALGORITHM")
    access_token_expire_minutes: int = Field(default=30, alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    refresh_token_expire_minutes: int = Field(default=60 * 24 * 7, alias="REFRESH_TOKEN_EXPIRE_MINUTES")

    model_config = BaseConfig.model_config

class TelegramSettings(BaseSettings):
    bot_token: str = Field(..., alias="TELEGRAM_BOT_TOKEN")

    model_config = BaseConfig.model_config


class MuxSettings(BaseSettings):
    mux_token_id: str = Field(default="", alias="MUX_TOKEN_ID")
    mux_token_secret: str = Field(default="", alias="MUX_TOKEN_SECRET")
    mux_webhook_signing_secret: Optional[str] = Field(default=None, alias="MUX_WEBHOOK_SIGNING_SECRET")
    mux_api_url: str = Field(default="https://api.mux.com", alias="MUX_API_URL")
    mux_stream_url: str = Field(default="https://stream.mux.com", alias="MUX_STREAM_URL")
    mux_image_url: str = Field(default="https://image.mux.com", alias="MUX_IMAGE_URL")
    mux_cors_origin: str = Field(default="*", alias="MUX_CORS_ORIGIN")
    webhook_tolerance_seconds: int = Field(default=300, ge=0, alias="MUX_WEBHOOK_TOLERANCE")

    model_config = BaseConfig.model_config


class GigaChatSettings(BaseSettings):
    giga_auth_key: str = Field(..., min_length=1, alias="GIGA_AUTH_KEY")
    giga_scope: str = Field(default="GIGACHAT_API_PERS", alias="GIGA_SCOPE")
    giga_verify_ssl_certs: bool = Field(default=False, alias="GIGA_VERIFY_SSL_CERTS")
    giga_model: str = Field(default="GigaChat", alias="GIGA_MODEL")

    model_config = BaseConfig.model_config


class PaginationSettings(BaseSettings):
    comments_page_size: int = Field(default=5, ge=1, le=100, alias="COMMENTS_PAGE_SIZE")
    videos_page_size: int = Field(default=10, ge=1, le=100, alias="VIDEOS_PAGE_SIZE")

    model_config = BaseConfig.model_config
