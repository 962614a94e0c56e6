from functools import partial
from typing import Optional
from uuid import UUID

from aiogram import Router, html
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command, CommandObject
from aiogram.types import CallbackQuery, Message
from loguru import logger

from vidshare_bot.clients.api_client import APIClient
from vidshare_bot.core.callbacks import ListCallback, ListKind, MoreCallback
from vidshare_bot.core.config import BotSettings
from vidshare_bot.handlers.render import parse_uuid, render_page, without_more_button
from vidshare_bot.pagination.accumulator import PageFetcher
from vidshare_bot.pagination.sessions import ListSession, SessionRegistry
from vidshare_bot.pagination.trigger import TriggerState

router = Router()


def make_fetcher(
    api_client: APIClient,
    sessions: SessionRegistry,
    chat_id: int,
    kind: ListKind,
    target: Optional[UUID],
) -> Optional[PageFetcher]:
    if kind == ListKind.COMMENTS:
        return partial(api_client.get_comments, chat_id, target)
    if kind == ListKind.REPLIES:
        parent = sessions.find_item(chat_id, ListKind.COMMENTS, target)
        if parent is None:
            return None
        return partial(api_client.get_comments, chat_id, UUID(parent["video_id"]), parent_id=target)
    if kind == ListKind.SUGGESTIONS:
        return partial(api_client.get_suggestions, chat_id, target)
    return partial(api_client.get_studio_videos, chat_id)


def page_size(settings: BotSettings, kind: ListKind) -> int:
    if kind in (ListKind.COMMENTS, ListKind.REPLIES):
        return settings.comments_page_size
    return settings.videos_page_size


async def send_next_page(message: Message, session: ListSession) -> None:
    accumulator = session.accumulator
    already_shown = len(accumulator.items)
    first = not accumulator.pages

    await session.trigger.request()

    if accumulator.error is not None:
        error = accumulator.error
        text = f"Could not load the list: {html.quote(error.detail)}"
        if error.is_transient and session.trigger.state == TriggerState.IDLE:
            page = render_page(session, [], first=False)
            await message.answer(f"{text}\nTap \"Show more\" to try again.", reply_markup=page["reply_markup"])
        else:
            await message.answer(text)
        return

    page = render_page(session, accumulator.items[already_shown:], first=first)
    await message.answer(**page)


async def open_list(
    message: Message,
    api_client: APIClient,
    sessions: SessionRegistry,
    settings: BotSettings,
    kind: ListKind,
    target: Optional[UUID] = None,
) -> bool:
    chat_id = message.chat.id
    fetch = make_fetcher(api_client, sessions, chat_id, kind, target)
    if fetch is None:
        return False

    session = sessions.open(chat_id, kind, target, fetch, page_size(settings, kind))
    logger.info(f"Chat {chat_id} opened {kind.value} list for {target}")
    await send_next_page(message, session)
    return True


@router.message(Command("comments"))
async def cmd_comments(message: Message, command: CommandObject, api_client: APIClient, sessions: SessionRegistry, settings: BotSettings):
    video_id = parse_uuid(command.args)
    if video_id is None:
        await message.answer("Usage: /comments <video id>")
        return
    await open_list(message, api_client, sessions, settings, ListKind.COMMENTS, video_id)


@router.message(Command("suggest"))
async def cmd_suggest(message: Message, command: CommandObject, api_client: APIClient, sessions: SessionRegistry, settings: BotSettings):
    video_id = parse_uuid(command.args)
    if video_id is None:
        await message.answer("Usage: /suggest <video id>")
        return
    await open_list(message, api_client, sessions, settings, ListKind.SUGGESTIONS, video_id)


@router.message(Command("studio"))
async def cmd_studio(message: Message, api_client: APIClient, sessions: SessionRegistry, settings: BotSettings):
    await open_list(message, api_client, sessions, settings, ListKind.STUDIO)


@router.callback_query(ListCallback.filter())
async def open_list_callback(callback: CallbackQuery, callback_data: ListCallback, api_client: APIClient, sessions: SessionRegistry, settings: BotSettings):
    opened = await open_list(
        callback.message, api_client, sessions, settings, callback_data.kind, callback_data.target
    )
    if not opened:
        await callback.answer("This list has expired. Open the comments again.", show_alert=True)
        return
    await callback.answer()


@router.callback_query(MoreCallback.filter())
async def show_more(callback: CallbackQuery, callback_data: MoreCallback, sessions: SessionRegistry):
    chat_id = callback.message.chat.id
    session = sessions.get(chat_id, callback_data.kind, callback_data.target)
    if session is None:
        await callback.answer("This list has expired. Open it again.", show_alert=True)
        return

    state = session.trigger.state
    if state == TriggerState.FETCHING:
        await callback.answer("Still loading...")
        return
    if state == TriggerState.EXHAUSTED:
        await callback.answer("That's everything.")
        return

    await callback.answer()
    try:
        await callback.message.edit_reply_markup(reply_markup=without_more_button(callback.message.reply_markup))
    except TelegramBadRequest as e:
        logger.debug(f"Could not strip the show more button: {e.message}")
    await send_next_page(callback.message, session)
