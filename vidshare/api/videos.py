from typing import Optional
from uuid import UUID

from arq import ArqRedis
from fastapi import APIRouter, Depends, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.api.deps import get_arq_pool, get_mux_client
from vidshare.core.exceptions import ExternalServiceError
from vidshare.db.database import get_db
from vidshare.models.users import Users
from vidshare.schemas.comment import ReactionResult
from vidshare.schemas.video import (
    GenerationJobResponse,
    VideoCreateResponse,
    VideoDetail,
    VideoResponse,
    VideoUpdate,
)
from vidshare.services.mux_client import MuxClient
from vidshare.services.video_service import VideoService
from vidshare.utils.security import get_optional_user, get_user

videos_router = APIRouter()


@videos_router.post("", response_model=VideoCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_video(
    db: AsyncSession = Depends(get_db),
    user: Users = Depends(get_user),
    mux: MuxClient = Depends(get_mux_client),
):
    video, upload_url = await VideoService(db, mux).create(user)
    return VideoCreateResponse(video=VideoResponse.model_validate(video), upload_url=upload_url)


@videos_router.get("/{video_id}", response_model=VideoDetail)
async def get_video(
    video_id: UUID,
    db: AsyncSession = Depends(get_db),
    viewer: Optional[Users] = Depends(get_optional_user),
):
    return await VideoService(db).get_one(video_id, viewer)


@videos_router.patch("/{video_id}", response_model=VideoResponse)
async def update_video(
    video_id: UUID,
    payload: VideoUpdate,
    db: AsyncSession = Depends(get_db),
    user: Users = Depends(get_user),
):
    return await VideoService(db).update(user, video_id, payload)


@videos_router.delete("/{video_id}", response_model=VideoResponse)
async def remove_video(
    video_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: Users = Depends(get_user),
    mux: MuxClient = Depends(get_mux_client),
):
    return await VideoService(db, mux).remove(user, video_id)


@videos_router.post("/{video_id}/restore-thumbnail", response_model=VideoResponse)
async def restore_thumbnail(
    video_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: Users = Depends(get_user),
    mux: MuxClient = Depends(get_mux_client),
):
    return await VideoService(db, mux).restore_thumbnail(user, video_id)


@videos_router.post("/{video_id}/like", response_model=ReactionResult)
async def like_video(
    video_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: Users = Depends(get_user),
):
    return ReactionResult(reaction=await VideoService(db).like(user, video_id))


@videos_router.post("/{video_id}/dislike", response_model=ReactionResult)
async def dislike_video(
    video_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: Users = Depends(get_user),
):
    return ReactionResult(reaction=await VideoService(db).dislike(user, video_id))


@videos_router.post("/{video_id}/views", status_code=status.HTTP_204_NO_CONTENT)
async def add_view(
    video_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: Users = Depends(get_user),
):
    await VideoService(db).add_view(user, video_id)


async def _enqueue_generation(
    task_name: str,
    video_id: UUID,
    user: Users,
    db: AsyncSession,
    pool: ArqRedis,
) -> GenerationJobResponse:
    await VideoService(db).get_owned(user.id, video_id)

    job = await pool.enqueue_job(task_name, str(video_id), str(user.id))
    if job is None:
        raise ExternalServiceError("Generation job could not be enqueued")

    logger.info(f"Enqueued {task_name} for video {video_id} as job {job.job_id}")
    return GenerationJobResponse(job_id=job.job_id, video_id=video_id)


@videos_router.post(
    "/{video_id}/generate-title",
    response_model=GenerationJobResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def generate_title(
    video_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: Users = Depends(get_user),
    pool: ArqRedis = Depends(get_arq_pool),
):
    return await _enqueue_generation("generate_title_task", video_id, user, db, pool)


@videos_router.post(
    "/{video_id}/generate-description",
    response_model=GenerationJobResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def generate_description(
    video_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: Users = Depends(get_user),
    pool: ArqRedis = Depends(get_arq_pool),
):
    return await _enqueue_generation("generate_description_task", video_id, user, db, pool)
