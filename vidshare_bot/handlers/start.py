from aiogram import Router, html
from aiogram.filters import Command, CommandStart
from aiogram.types import Message
from loguru import logger

from vidshare_bot.clients.api_client import APIClient
from vidshare_bot.pagination.sessions import SessionRegistry

router = Router()

HELP_TEXT = (
    "/video <id> - open a video\n"
    "/comments <id> - read comments on a video\n"
    "/suggest <id> - videos similar to one you liked\n"
    "/studio - your uploads\n"
    "/comment <id> <text> - comment on a video\n"
    "/reply <comment id> <text> - reply to a comment"
)


@router.message(CommandStart())
async def cmd_start(message: Message, api_client: APIClient, sessions: SessionRegistry):
    chat_id = message.chat.id
    name = message.from_user.full_name if message.from_user else ""

    logger.info(f"User {chat_id} started the bot")
    sessions.close_chat(chat_id)

    registration = await api_client.register_user(telegram_chat_id=chat_id, name=name)

    if registration:
        greeting = "Welcome" if registration.get("is_new") else "Welcome back"
        await message.answer(f"{greeting}, {html.quote(name or 'friend')}!\n\n{HELP_TEXT}")
        logger.info(f"User {chat_id} authorized with ID {registration['user']['id']}")
    else:
        await message.answer("Could not sign you in. Please try again later.")
        logger.error(f"Failed to authorize user {chat_id}")


@router.message(Command("help"))
async def cmd_help(message: Message):
    await message.answer(HELP_TEXT)
