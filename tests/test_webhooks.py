"""Tests for media pipeline webhooks."""

import json
import time

import pytest
from sqlalchemy import select

from vidshare.api.deps import get_mux_settings
from vidshare.core.config import MuxSettings
from vidshare.core.exceptions import UnauthorizedError
from vidshare.main import app
from vidshare.models.videos import Video
from vidshare.utils.security import verify_mux_signature

from helpers import WEBHOOK_SECRET, mux_signature


async def post_event(client, payload: dict, signature: str = None):
    body = json.dumps(payload).encode()
    return await client.post(
        "/webhooks/mux",
        content=body,
        headers={
            "content-type": "application/json",
            "mux-signature": signature if signature is not None else mux_signature(body),
        },
    )


@pytest.fixture
async def uploading_video(make_video, alice):
    return await make_video(alice, mux_upload_id="upload-1", mux_status="waiting")


class TestSignature:
    def test_valid_signature(self):
        body = b'{"type": "video.asset.created"}'
        verify_mux_signature(body, mux_signature(body), WEBHOOK_SECRET)

    def test_tampered_body(self):
        signature = mux_signature(b'{"a": 1}')
        with pytest.raises(UnauthorizedError, match="Invalid"):
            verify_mux_signature(b'{"a": 2}', signature, WEBHOOK_SECRET)

    def test_stale_timestamp(self):
        body = b"{}"
        signature = mux_signature(body, timestamp=int(time.time()) - 301)
        with pytest.raises(UnauthorizedError, match="tolerance"):
            verify_mux_signature(body, signature, WEBHOOK_SECRET)

    def test_timestamp_within_tolerance(self):
        body = b"{}"
        signature = mux_signature(body, timestamp=1_000_000)
        verify_mux_signature(body, signature, WEBHOOK_SECRET, now=1_000_000 + 299)

    @pytest.mark.parametrize("header", [None, "", "v1=abc", "t=123"])
    def test_missing_or_malformed_header(self, header):
        with pytest.raises(UnauthorizedError):
            verify_mux_signature(b"{}", header, WEBHOOK_SECRET)


class TestMuxWebhook:
    async def test_asset_lifecycle(self, client, db_session, uploading_video):
        await post_event(
            client,
            {"type": "video.asset.created", "data": {"id": "asset-1", "upload_id": "upload-1", "status": "preparing"}},
        )
        response = await post_event(
            client,
            {
                "type": "video.asset.ready",
                "data": {
                    "id": "asset-1",
                    "upload_id": "upload-1",
                    "status": "ready",
                    "playback_ids": [{"id": "play-1", "policy": "public"}],
                    "duration": 12.3456,
                },
            },
        )
        await post_event(
            client,
            {"type": "video.asset.track.ready", "data": {"id": "track-1", "asset_id": "asset-1", "status": "ready"}},
        )

        assert response.status_code == 200
        assert response.json()["handled"] is True

        await db_session.refresh(uploading_video)
        assert uploading_video.mux_asset_id == "asset-1"
        assert uploading_video.mux_status == "ready"
        assert uploading_video.mux_playback_id == "play-1"
        assert uploading_video.thumbnail_url == "https://image.mux.com/play-1/thumbnail.jpg"
        assert uploading_video.preview_url == "https://image.mux.com/play-1/animated.gif"
        assert uploading_video.duration == 12346
        assert uploading_video.mux_track_id == "track-1"
        assert uploading_video.mux_track_state == "ready"

    async def test_asset_deleted_removes_video(self, client, db_session, uploading_video):
        video_id = uploading_video.id

        await post_event(client, {"type": "video.asset.deleted", "data": {"id": "asset-1", "upload_id": "upload-1"}})

        result = await db_session.execute(select(Video.id).where(Video.id == video_id))
        assert result.scalar_one_or_none() is None

    async def test_asset_errored(self, client, db_session, uploading_video):
        await post_event(
            client,
            {"type": "video.asset.errored", "data": {"id": "asset-1", "upload_id": "upload-1", "status": "errored"}},
        )

        await db_session.refresh(uploading_video)
        assert uploading_video.mux_status == "errored"

    async def test_unknown_event_is_acknowledged(self, client):
        response = await post_event(client, {"type": "video.live_stream.idle", "data": {"id": "x"}})

        assert response.status_code == 200
        assert response.json()["handled"] is False

    async def test_missing_upload_id_is_bad_request(self, client):
        response = await post_event(client, {"type": "video.asset.created", "data": {"id": "asset-1"}})

        assert response.status_code == 400

    async def test_ready_without_playback_id_is_bad_request(self, client, uploading_video):
        response = await post_event(
            client, {"type": "video.asset.ready", "data": {"id": "asset-1", "upload_id": "upload-1"}}
        )

        assert response.status_code == 400

    async def test_bad_signature_is_unauthorized(self, client, uploading_video):
        response = await post_event(
            client,
            {"type": "video.asset.created", "data": {"id": "asset-1", "upload_id": "upload-1"}},
            signature="t=1,v1=deadbeef",
        )

        assert response.status_code == 401
        assert response.json()["code"] == "unauthorized"

    async def test_unconfigured_secret_is_server_error(self, client):
        app.dependency_overrides[get_mux_settings] = lambda: MuxSettings()

        response = await post_event(client, {"type": "video.asset.created", "data": {}})

        assert response.status_code == 500
