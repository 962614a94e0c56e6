from typing import Any, Dict, List, Optional
from uuid import UUID

from aiogram import html
from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from vidshare_bot.core.callbacks import (
    ListCallback,
    ListKind,
    MoreCallback,
    OpenVideoCallback,
    VideoAction,
    VideoCallback,
)
from vidshare_bot.pagination.sessions import ListSession
from vidshare_bot.pagination.trigger import TriggerState

LIST_TITLES = {
    ListKind.COMMENTS: "Comments",
    ListKind.REPLIES: "Replies",
    ListKind.SUGGESTIONS: "Suggested videos",
    ListKind.STUDIO: "Your videos",
}

EMPTY_TEXT = {
    ListKind.COMMENTS: "No comments yet.",
    ListKind.REPLIES: "No replies yet.",
    ListKind.SUGGESTIONS: "Nothing to suggest yet.",
    ListKind.STUDIO: "You have not uploaded any videos yet.",
}

MORE_PREFIX = "more:"


def parse_uuid(value: Optional[str]) -> Optional[UUID]:
    if not value:
        return None
    try:
        return UUID(value.strip())
    except ValueError:
        return None


def format_duration(milliseconds: int) -> str:
    seconds = (milliseconds or 0) // 1000
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def video_card_text(card: Dict[str, Any]) -> str:
    lines = [
        html.bold(html.quote(card["title"])),
        f"by {html.quote(card['user']['name'] or 'unknown')} · "
        f"{card.get('subscriber_count', 0)} subscribers",
        f"{card.get('view_count', 0)} views · {format_duration(card.get('duration', 0))}",
    ]
    if card.get("description"):
        lines.append("")
        lines.append(html.quote(card["description"]))
    return "\n".join(lines)


def video_card_keyboard(card: Dict[str, Any]) -> InlineKeyboardMarkup:
    video_id = UUID(card["id"])
    reaction = card.get("viewer_reaction")
    builder = InlineKeyboardBuilder()
    builder.button(
        text=f"{'✅ ' if reaction == 'like' else ''}👍 {card.get('like_count', 0)}",
        callback_data=VideoCallback(action=VideoAction.LIKE, video_id=video_id),
    )
    builder.button(
        text=f"{'✅ ' if reaction == 'dislike' else ''}👎 {card.get('dislike_count', 0)}",
        callback_data=VideoCallback(action=VideoAction.DISLIKE, video_id=video_id),
    )
    builder.button(
        text="Unsubscribe" if card.get("viewer_subscribed") else "Subscribe",
        callback_data=VideoCallback(action=VideoAction.SUBSCRIBE, video_id=video_id),
    )
    builder.button(text="💬 Comments", callback_data=ListCallback(kind=ListKind.COMMENTS, target=video_id))
    builder.button(text="More like this", callback_data=ListCallback(kind=ListKind.SUGGESTIONS, target=video_id))
    builder.adjust(2, 1, 2)
    return builder.as_markup()


def comment_line(item: Dict[str, Any]) -> str:
    author = html.bold(html.quote(item["user"]["name"] or "unknown"))
    stats = f"👍 {item.get('like_count', 0)} 👎 {item.get('dislike_count', 0)}"
    if item.get("parent_id") is None:
        stats += f" · {item.get('reply_count', 0)} replies"
    return f"{author}: {html.quote(item['content'])}\n{stats} · {html.code(item['id'])}"


def video_line(item: Dict[str, Any]) -> str:
    title = html.bold(html.quote(item["title"]))
    details = f"{item.get('view_count', 0)} views" if "view_count" in item else item["visibility"]
    return f"{title} · {format_duration(item.get('duration', 0))} · {details}"


def render_page(session: ListSession, items: List[Dict[str, Any]], first: bool) -> Dict[str, Any]:
    """Text and keyboard for a freshly loaded page of a list."""
    accumulator = session.accumulator
    lines = []
    if first:
        title = LIST_TITLES[session.kind]
        if accumulator.total_count is not None:
            title = f"{title} ({accumulator.total_count})"
        lines.append(html.bold(title))

    if not items:
        lines.append(EMPTY_TEXT[session.kind] if first else "Nothing new to show.")

    builder = InlineKeyboardBuilder()
    for item in items:
        if session.kind in (ListKind.COMMENTS, ListKind.REPLIES):
            lines.append(comment_line(item))
            if session.kind == ListKind.COMMENTS and item.get("reply_count"):
                builder.button(
                    text=f"↳ {item['reply_count']} replies to {item['user']['name'] or 'comment'}",
                    callback_data=ListCallback(kind=ListKind.REPLIES, target=UUID(item["id"])),
                )
        else:
            lines.append(video_line(item))
            builder.button(
                text=f"▶ {item['title'][:40]}",
                callback_data=OpenVideoCallback(video_id=UUID(item["id"])),
            )

    if session.trigger.state == TriggerState.IDLE:
        builder.button(text="Show more", callback_data=MoreCallback(kind=session.kind, target=session.target))
    builder.adjust(1)

    return {"text": "\n\n".join(lines), "reply_markup": builder.as_markup()}


def without_more_button(markup: Optional[InlineKeyboardMarkup]) -> Optional[InlineKeyboardMarkup]:
    if markup is None:
        return None
    rows = [
        [button for button in row if not (button.callback_data or "").startswith(MORE_PREFIX)]
        for row in markup.inline_keyboard
    ]
    rows = [row for row in rows if row]
    return InlineKeyboardMarkup(inline_keyboard=rows) if rows else None
