"""Tests for the owner's studio listing."""

import pytest

from vidshare.core.exceptions import NotFoundError
from vidshare.models.videos import VideoVisibility
from vidshare.services.studio_service import StudioService

from helpers import at, bot_headers, uid


@pytest.fixture
def service(db_session):
    return StudioService(db_session)


class TestStudioService:
    async def test_only_own_videos_are_listed(self, service, make_video, alice, bob):
        mine = await make_video(alice, title="Mine", visibility=VideoVisibility.PRIVATE, updated_at=at(1))
        await make_video(bob, title="Theirs", updated_at=at(2))

        page = await service.get_many(alice)

        assert [video.id for video in page.items] == [mine.id]
        assert page.items[0].visibility == VideoVisibility.PRIVATE
        assert page.total_count == 1

    async def test_pages_follow_updated_at_then_id(self, service, make_video, alice):
        for n in range(1, 6):
            await make_video(alice, id=uid(n), updated_at=at(n // 2))

        first = await service.get_many(alice, limit=2)
        second = await service.get_many(alice, cursor=first.next_cursor, limit=2)
        third = await service.get_many(alice, cursor=second.next_cursor, limit=2)

        ids = [v.id for page in (first, second, third) for v in page.items]
        assert ids == [uid(5), uid(4), uid(3), uid(2), uid(1)]
        assert third.next_cursor is None
        assert first.total_count == 5

    async def test_get_one_of_someone_else_is_not_found(self, service, make_video, alice, bob):
        video = await make_video(bob)

        with pytest.raises(NotFoundError):
            await service.get_one(alice, video.id)


class TestStudioApi:
    async def test_listing_requires_identity(self, client):
        response = await client.get("/studio/videos")
        assert response.status_code == 401

    async def test_cursor_walk_over_http(self, client, make_video, alice):
        for n in range(1, 4):
            await make_video(alice, id=uid(n), updated_at=at(n))

        first = await client.get("/studio/videos", params={"limit": 2}, headers=bot_headers(alice))
        body = first.json()

        assert first.status_code == 200
        assert [item["id"] for item in body["items"]] == [str(uid(3)), str(uid(2))]
        assert body["has_more"] is True
        assert body["total_count"] == 3

        second = await client.get(
            "/studio/videos",
            params={"limit": 2, "cursor": body["next_cursor"]},
            headers=bot_headers(alice),
        )
        assert [item["id"] for item in second.json()["items"]] == [str(uid(1))]
        assert second.json()["next_cursor"] is None

    async def test_cursor_of_another_owner_is_rejected(self, client, make_video, alice, bob):
        """A studio cursor is bound to the owner it was issued for."""
        for n in range(1, 4):
            await make_video(alice, id=uid(n), updated_at=at(n))

        first = await client.get("/studio/videos", params={"limit": 1}, headers=bot_headers(alice))
        replay = await client.get(
            "/studio/videos",
            params={"limit": 1, "cursor": first.json()["next_cursor"]},
            headers=bot_headers(bob),
        )

        assert replay.status_code == 400
        assert replay.json()["code"] == "bad_request"

    async def test_get_one(self, client, make_video, alice, bob):
        video = await make_video(alice)

        own = await client.get(f"/studio/videos/{video.id}", headers=bot_headers(alice))
        other = await client.get(f"/studio/videos/{video.id}", headers=bot_headers(bob))

        assert own.status_code == 200
        assert other.status_code == 404
