from loguru import logger
from sqlalchemy import delete, update
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.exceptions import ValidationError
from vidshare.models.videos import Video
from vidshare.schemas.webhook import MuxAssetData, MuxTrackData, MuxWebhookEvent
from vidshare.services.mux_client import MuxClient


class WebhookService:
    """Maps media pipeline events onto video rows. Later events overwrite earlier ones."""

    def __init__(self, db: AsyncSession, mux: MuxClient):
        self.db = db
        self.mux = mux

    async def handle_event(self, event: MuxWebhookEvent) -> bool:
        event_type = event.type

        if event_type == "video.asset.created":
            await self._asset_created(MuxAssetData.model_validate(event.data))
        elif event_type == "video.asset.ready":
            await self._asset_ready(MuxAssetData.model_validate(event.data))
        elif event_type == "video.asset.errored":
            await self._asset_errored(MuxAssetData.model_validate(event.data))
        elif event_type == "video.asset.deleted":
            await self._asset_deleted(MuxAssetData.model_validate(event.data))
        elif event_type == "video.asset.track.ready":
            await self._track_ready(MuxTrackData.model_validate(event.data))
        else:
            logger.debug(f"Ignoring webhook event {event_type}")
            return False

        await self.db.commit()
        logger.info(f"Processed webhook event {event_type}")
        return True

    @staticmethod
    def _require_upload_id(data: MuxAssetData) -> str:
        if not data.upload_id:
            raise ValidationError("Missing upload ID in webhook payload")
        return data.upload_id

    async def _asset_created(self, data: MuxAssetData) -> None:
        upload_id = self._require_upload_id(data)
        await self.db.execute(
            update(Video)
            .where(Video.mux_upload_id == upload_id)
            .values(mux_asset_id=data.id, mux_status=data.status)
        )

    async def _asset_ready(self, data: MuxAssetData) -> None:
        upload_id = self._require_upload_id(data)
        if not data.playback_ids:
            raise ValidationError("Missing playback ID in webhook payload")
        playback_id = data.playback_ids[0].id
        duration = round(data.duration * 1000) if data.duration else 0

        await self.db.execute(
            update(Video)
            .where(Video.mux_upload_id == upload_id)
            .values(
                mux_status=data.status,
                mux_asset_id=data.id,
                mux_playback_id=playback_id,
                thumbnail_url=self.mux.thumbnail_url(playback_id),
                preview_url=self.mux.preview_url(playback_id),
                duration=duration,
            )
        )

    async def _asset_errored(self, data: MuxAssetData) -> None:
        upload_id = self._require_upload_id(data)
        await self.db.execute(
            update(Video).where(Video.mux_upload_id == upload_id).values(mux_status=data.status)
        )

    async def _asset_deleted(self, data: MuxAssetData) -> None:
        upload_id = self._require_upload_id(data)
        await self.db.execute(delete(Video).where(Video.mux_upload_id == upload_id))

    async def _track_ready(self, data: MuxTrackData) -> None:
        if not data.asset_id:
            raise ValidationError("Missing asset ID in webhook payload")
        await self.db.execute(
            update(Video)
            .where(Video.mux_asset_id == data.asset_id)
            .values(mux_track_id=data.id, mux_track_state=data.status)
        )
