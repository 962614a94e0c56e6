from dataclasses import dataclass

import httpx
from loguru import logger

from vidshare.core.config import MuxSettings
from vidshare.core.exceptions import ExternalServiceError


@dataclass
class MuxUpload:
    id: str
    url: str


class MuxClient:
    """Thin client for the hosted media pipeline (direct uploads, assets, text tracks)."""

    def __init__(self, settings: MuxSettings, transport: httpx.AsyncBaseTransport = None):
        self.settings = settings
        self.client = httpx.AsyncClient(
            base_url=settings.mux_api_url,
            auth=(settings.mux_token_id, settings.mux_token_secret),
            timeout=30.0,
            transport=transport,
        )

    async def create_upload(self, passthrough: str) -> MuxUpload:
        payload = {
            "new_asset_settings": {
                "passthrough": passthrough,
                "playback_policy": ["public"],
                "static_renditions": [
                    {"resolution": "1080p"},
                    {"resolution": "audio-only"},
                    {"resolution": "480p"},
                    {"resolution": "720p"},
                ],
                "inputs": [
                    {
                        "generated_subtitles": [
                            {"language_code": "en", "name": "English Auto-Generated"},
                        ],
                    },
                ],
            },
            "cors_origin": self.settings.mux_cors_origin,
        }
        try:
            response = await self.client.post("/video/v1/uploads", json=payload)
            response.raise_for_status()
            data = response.json()["data"]
            return MuxUpload(id=data["id"], url=data["url"])
        except httpx.HTTPStatusError as e:
            logger.error(f"Mux error creating upload: {e.response.status_code} - {e.response.text}")
            raise ExternalServiceError("Failed to create upload")
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.exception(f"Error creating upload: {e}")
            raise ExternalServiceError("Failed to create upload")

    async def delete_asset(self, asset_id: str) -> None:
        try:
            response = await self.client.delete(f"/video/v1/assets/{asset_id}")
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Mux error deleting asset {asset_id}: {e.response.status_code} - {e.response.text}")
            raise ExternalServiceError("Failed to delete asset")
        except httpx.HTTPError as e:
            logger.exception(f"Error deleting asset {asset_id}: {e}")
            raise ExternalServiceError("Failed to delete asset")

    async def fetch_transcript(self, playback_id: str, track_id: str) -> str:
        url = f"{self.settings.mux_stream_url}/{playback_id}/text/{track_id}.txt"
        try:
            response = await self.client.get(url, auth=None)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Error fetching transcript for {playback_id}: {e}")
            raise ExternalServiceError("Failed to fetch transcript")
        return response.text

    def thumbnail_url(self, playback_id: str) -> str:
        return f"{self.settings.mux_image_url}/{playback_id}/thumbnail.jpg"

    def preview_url(self, playback_id: str) -> str:
        return f"{self.settings.mux_image_url}/{playback_id}/animated.gif"

    async def close(self):
        await self.client.aclose()
