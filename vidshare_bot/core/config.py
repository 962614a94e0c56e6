from pydantic import Field
from pydantic_settings import BaseSettings

from vidshare.core.config import BaseConfig


class BotSettings(BaseSettings):
    bot_token: str = Field(..., alias="TELEGRAM_BOT_TOKEN")
    backend_api_url: str = Field(..., alias="BACKEND_API_URL")
    request_timeout: float = Field(default=30.0, gt=0, alias="BOT_REQUEST_TIMEOUT")
    comments_page_size: int = Field(default=5, ge=1, le=100, alias="BOT_COMMENTS_PAGE_SIZE")
    videos_page_size: int = Field(default=10, ge=1, le=100, alias="BOT_VIDEOS_PAGE_SIZE")
    log_file: str = Field(default="logs/bot.log", alias="BOT_LOG_FILE")

    model_config = BaseConfig.model_config
