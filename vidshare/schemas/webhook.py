from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class MuxWebhookEvent(BaseModel):
    type: str
    data: Dict[str, Any] = {}

    model_config = ConfigDict(extra="ignore")


class MuxPlaybackId(BaseModel):
    id: str
    policy: Optional[str] = None


class MuxAssetData(BaseModel):
    id: str
    status: Optional[str] = None
    upload_id: Optional[str] = None
    playback_ids: List[MuxPlaybackId] = []
    # seconds, fractional
    duration: Optional[float] = None

    model_config = ConfigDict(extra="ignore")


class MuxTrackData(BaseModel):
    id: str
    status: Optional[str] = None
    asset_id: Optional[str] = None

    model_config = ConfigDict(extra="ignore")
