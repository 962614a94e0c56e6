import asyncio
import sys
from contextlib import asynccontextmanager

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from loguru import logger

from vidshare_bot.clients.api_client import APIClient
from vidshare_bot.core.config import BotSettings
from vidshare_bot.core.middleware import BotContextMiddleware
from vidshare_bot.handlers import lists, start, videos
from vidshare_bot.pagination.sessions import SessionRegistry


def setup_logging(settings: BotSettings):
    logger.add(
        settings.log_file,
        rotation="1 day",
        compression="gz",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
    )


@asynccontextmanager
async def lifespan(bot: Bot, api_client: APIClient):
    logger.info("Bot starting...")
    yield
    logger.info("Bot shutting down...")
    await api_client.close()
    await bot.session.close()


def create_dispatcher(api_client: APIClient, settings: BotSettings) -> Dispatcher:
    middleware = BotContextMiddleware(api_client, SessionRegistry(), settings)

    dp = Dispatcher()
    dp.message.middleware(middleware)
    dp.callback_query.middleware(middleware)
    dp.include_router(start.router)
    dp.include_router(videos.router)
    dp.include_router(lists.router)
    return dp


async def main():
    settings = BotSettings()
    setup_logging(settings)

    bot = Bot(
        token=settings.bot_token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML)
    )

    api_client = APIClient(settings)
    dp = create_dispatcher(api_client, settings)

    async with lifespan(bot, api_client):
        logger.info("Bot is running...")
        await dp.start_polling(bot)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)
