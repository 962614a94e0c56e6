import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional
from uuid import UUID

from dateutil import parser as date_parser
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.db.database import utcnow
from vidshare.models.categories import Category
from vidshare.models.users import Users
from vidshare.models.videos import Video, VideoVisibility


class SeedService:
    """Loads categories, and optionally demo users and videos, from a JSON document.

    Expected shape::

        {
          "categories": [{"name": "Music", "description": "..."}],
          "users": [{"telegram_chat_id": 1, "name": "Demo"}],
          "videos": [{"title": "...", "uploader_chat_id": 1, "category": "Music",
                      "visibility": "public", "updated_at": "2024-05-01T10:00:00Z"}]
        }

    Rows that already exist (category name, user chat id, video id) are skipped.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def load_from_json_file(self, json_file_path: str) -> Dict[str, int]:
        file_path = Path(json_file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"JSON file not found: {json_file_path}")

        logger.info(f"Loading seed data from {json_file_path}")

        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        return await self.load(data)

    async def load(self, data: Dict[str, Any]) -> Dict[str, int]:
        loaded = {
            'categories': await self._load_categories(data.get('categories', [])),
            'users': await self._load_users(data.get('users', [])),
        }
        loaded['videos'] = await self._load_videos(data.get('videos', []))

        try:
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error committing seed data: {e}")
            raise

        logger.info(
            f"Seed completed: {loaded['categories']} categories, "
            f"{loaded['users']} users, {loaded['videos']} videos"
        )
        return loaded

    async def _load_categories(self, categories_data) -> int:
        existing = set((await self.db.execute(select(Category.name))).scalars().all())
        loaded = 0
        for category_data in categories_data:
            name = (category_data.get('name') or '').strip()
            if not name or name in existing:
                logger.debug(f"Category {name!r} skipped")
                continue
            self.db.add(Category(name=name, description=category_data.get('description')))
            existing.add(name)
            loaded += 1
        await self.db.flush()
        return loaded

    async def _load_users(self, users_data) -> int:
        loaded = 0
        seen = set()
        for user_data in users_data:
            chat_id = user_data.get('telegram_chat_id')
            if chat_id is None or chat_id in seen:
                logger.warning(f"User entry skipped: {user_data}")
                continue
            existing = await self.db.execute(select(Users.id).where(Users.telegram_chat_id == chat_id))
            if existing.scalar_one_or_none() is not None:
                logger.debug(f"User for chat {chat_id} already exists, skipping")
                continue
            self.db.add(Users(telegram_chat_id=chat_id, name=user_data.get('name', '')))
            seen.add(chat_id)
            loaded += 1
        await self.db.flush()
        return loaded

    async def _load_videos(self, videos_data) -> int:
        categories = {
            category.name: category.id
            for category in (await self.db.execute(select(Category))).scalars().all()
        }
        loaded = 0
        for video_data in videos_data:
            try:
                video = await self._build_video(video_data, categories)
            except (KeyError, ValueError) as e:
                logger.error(f"Error processing video {video_data.get('title', 'unknown')}: {e}")
                continue
            if video is None:
                continue
            self.db.add(video)
            loaded += 1
        await self.db.flush()
        return loaded

    async def _build_video(self, video_data: Dict[str, Any], categories: Dict[str, UUID]) -> Optional[Video]:
        if 'id' in video_data:
            video_id = UUID(video_data['id'])
            existing = await self.db.execute(select(Video.id).where(Video.id == video_id))
            if existing.scalar_one_or_none() is not None:
                logger.debug(f"Video {video_id} already exists, skipping")
                return None
        else:
            video_id = None

        uploader = await self.db.execute(
            select(Users.id).where(Users.telegram_chat_id == video_data['uploader_chat_id'])
        )
        uploader_id = uploader.scalar_one_or_none()
        if uploader_id is None:
            raise ValueError(f"unknown uploader chat {video_data['uploader_chat_id']}")

        created_at = self._parse_datetime(video_data.get('created_at'))
        video = Video(
            title=video_data['title'],
            description=video_data.get('description', ''),
            visibility=VideoVisibility(video_data.get('visibility', VideoVisibility.PRIVATE.value)),
            duration=video_data.get('duration', 0),
            uploader_id=uploader_id,
            category_id=categories.get(video_data.get('category')),
            created_at=created_at,
            updated_at=self._parse_datetime(video_data.get('updated_at')) if video_data.get('updated_at') else created_at,
        )
        if video_id is not None:
            video.id = video_id
        return video

    def _parse_datetime(self, date_string) -> datetime:
        if date_string is None:
            return utcnow()
        if isinstance(date_string, datetime):
            return date_string
        return date_parser.parse(date_string)
