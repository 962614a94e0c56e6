from typing import Any, Dict, Optional
from uuid import UUID

from aiogram import F, Router, html
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command, CommandObject
from aiogram.types import CallbackQuery, Message
from loguru import logger

from vidshare_bot.clients.api_client import APIClient
from vidshare_bot.core.callbacks import ListKind, OpenVideoCallback, VideoAction, VideoCallback
from vidshare_bot.core.exceptions import APIError
from vidshare_bot.handlers.render import parse_uuid, video_card_keyboard, video_card_text
from vidshare_bot.pagination.optimistic import (
    OptimisticUpdate,
    toggle_reaction_counts,
    toggle_subscription_counts,
)
from vidshare_bot.pagination.sessions import SessionRegistry

router = Router()


async def send_video_card(message: Message, api_client: APIClient, sessions: SessionRegistry, video_id: UUID):
    chat_id = message.chat.id
    try:
        card = await api_client.get_video(chat_id, video_id)
    except APIError as e:
        await message.answer(f"Could not open the video: {html.quote(e.detail)}")
        return

    sent = await message.answer(video_card_text(card), reply_markup=video_card_keyboard(card))
    sessions.set_card(chat_id, sent.message_id, card)


def card_update(message: Message, api_client: APIClient, sessions: SessionRegistry, video_id: UUID) -> OptimisticUpdate:
    chat_id = message.chat.id

    async def write(card: Dict[str, Any]) -> None:
        sessions.set_card(chat_id, message.message_id, card)
        try:
            await message.edit_text(video_card_text(card), reply_markup=video_card_keyboard(card))
        except TelegramBadRequest as e:
            logger.debug(f"Video card {message.message_id} left as is: {e.message}")

    return OptimisticUpdate(
        read=lambda: sessions.get_card(chat_id, message.message_id),
        write=write,
        refetch=lambda: api_client.get_video(chat_id, video_id),
    )


async def _load_card(callback: CallbackQuery, api_client: APIClient, sessions: SessionRegistry, video_id: UUID) -> Optional[Dict[str, Any]]:
    chat_id = callback.message.chat.id
    card = sessions.get_card(chat_id, callback.message.message_id)
    if card is None:
        card = await api_client.get_video(chat_id, video_id)
        sessions.set_card(chat_id, callback.message.message_id, card)
    return card


@router.message(Command("video"))
async def cmd_video(message: Message, command: CommandObject, api_client: APIClient, sessions: SessionRegistry):
    video_id = parse_uuid(command.args)
    if video_id is None:
        await message.answer("Usage: /video <video id>")
        return
    await send_video_card(message, api_client, sessions, video_id)


@router.callback_query(OpenVideoCallback.filter())
async def open_video(callback: CallbackQuery, callback_data: OpenVideoCallback, api_client: APIClient, sessions: SessionRegistry):
    await callback.answer()
    await send_video_card(callback.message, api_client, sessions, callback_data.video_id)


@router.callback_query(VideoCallback.filter(F.action.in_({VideoAction.LIKE, VideoAction.DISLIKE})))
async def react_to_video(callback: CallbackQuery, callback_data: VideoCallback, api_client: APIClient, sessions: SessionRegistry):
    chat_id = callback.message.chat.id
    video_id = callback_data.video_id
    reaction = callback_data.action.value

    try:
        await _load_card(callback, api_client, sessions, video_id)
        await card_update(callback.message, api_client, sessions, video_id).run(
            apply=lambda card: toggle_reaction_counts(card, reaction),
            commit=lambda: api_client.react_to_video(chat_id, video_id, reaction),
        )
    except APIError as e:
        await callback.answer(f"Could not save your reaction: {e.detail}", show_alert=True)
        return

    await callback.answer()


@router.callback_query(VideoCallback.filter(F.action == VideoAction.SUBSCRIBE))
async def toggle_subscription(callback: CallbackQuery, callback_data: VideoCallback, api_client: APIClient, sessions: SessionRegistry):
    chat_id = callback.message.chat.id
    video_id = callback_data.video_id

    try:
        card = await _load_card(callback, api_client, sessions, video_id)
        channel_id = UUID(card["uploader_id"])
        subscribed = await card_update(callback.message, api_client, sessions, video_id).run(
            apply=toggle_subscription_counts,
            commit=lambda: api_client.toggle_subscription(chat_id, channel_id),
        )
    except APIError as e:
        await callback.answer(f"Could not update your subscription: {e.detail}", show_alert=True)
        return

    await callback.answer("Subscribed" if subscribed else "Unsubscribed")


@router.message(Command("comment"))
async def cmd_comment(message: Message, command: CommandObject, api_client: APIClient):
    video_arg, _, content = (command.args or "").partition(" ")
    video_id = parse_uuid(video_arg)
    if video_id is None or not content.strip():
        await message.answer("Usage: /comment <video id> <text>")
        return

    try:
        await api_client.create_comment(message.chat.id, video_id, content.strip())
    except APIError as e:
        await message.answer(f"Could not post your comment: {html.quote(e.detail)}")
        return
    await message.answer("Comment posted.")


@router.message(Command("reply"))
async def cmd_reply(message: Message, command: CommandObject, api_client: APIClient, sessions: SessionRegistry):
    comment_arg, _, content = (command.args or "").partition(" ")
    comment_id = parse_uuid(comment_arg)
    if comment_id is None or not content.strip():
        await message.answer("Usage: /reply <comment id> <text>")
        return

    parent = sessions.find_item(message.chat.id, ListKind.COMMENTS, comment_id)
    if parent is None:
        parent = sessions.find_item(message.chat.id, ListKind.REPLIES, comment_id)
    if parent is None:
        await message.answer("Open the comments of that video first, then reply.")
        return

    try:
        await api_client.create_comment(
            message.chat.id, UUID(parent["video_id"]), content.strip(), parent_id=comment_id
        )
    except APIError as e:
        await message.answer(f"Could not post your reply: {html.quote(e.detail)}")
        return
    await message.answer("Reply posted.")
