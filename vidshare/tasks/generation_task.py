from typing import Any, Dict
from uuid import UUID

from loguru import logger

from vidshare.core.exceptions import ValidationError, VidshareError
from vidshare.db.database import get_async_sessionmaker
from vidshare.ml.llm import LLMService
from vidshare.services.mux_client import MuxClient
from vidshare.services.video_service import VideoService


async def generate_title_task(ctx: Dict[str, Any], video_id: str, user_id: str) -> str:
    return await _generate(ctx, video_id, user_id, "title")


async def generate_description_task(ctx: Dict[str, Any], video_id: str, user_id: str) -> str:
    return await _generate(ctx, video_id, user_id, "description")


async def _generate(ctx: Dict[str, Any], video_id: str, user_id: str, field: str) -> str:
    llm: LLMService = ctx["llm"]
    mux: MuxClient = ctx["mux"]
    sessionmaker = ctx.get("sessionmaker") or get_async_sessionmaker()

    try:
        async with sessionmaker() as session:
            service = VideoService(session, mux)
            video = await service.get_owned(UUID(user_id), UUID(video_id))
            if not video.mux_playback_id or not video.mux_track_id:
                raise ValidationError("Video has no transcript yet")

            transcript = await mux.fetch_transcript(video.mux_playback_id, video.mux_track_id)
            if field == "title":
                value = await llm.generate_title(transcript)
            else:
                value = await llm.generate_description(transcript)

            await service.apply_generated(UUID(user_id), UUID(video_id), **{field: value})
            logger.info(f"Generated {field} for video {video_id}: {value[:50]}")
            return value

    except (VidshareError, ValueError) as e:
        logger.error(f"Could not generate {field} for video {video_id}: {e}")
        raise
    except Exception as e:
        logger.exception(f"Error generating {field} for video {video_id}: {e}")
        raise
