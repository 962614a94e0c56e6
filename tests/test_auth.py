"""Tests for registration, tokens and identity resolution."""

from helpers import BOT_TOKEN, bot_headers


async def register(client, chat_id: int, name: str = "Carol", token: str = BOT_TOKEN):
    return await client.post(
        "/auth/telegram/create",
        json={"telegram_chat_id": chat_id, "name": name},
        headers={"X-Bot-Token": token},
    )


class TestTelegramRegistration:
    async def test_new_chat_creates_user_with_tokens(self, client):
        response = await register(client, 555)

        assert response.status_code == 200
        body = response.json()
        assert body["is_new"] is True
        assert body["user"]["telegram_chat_id"] == 555
        assert body["token"]["access_token"]
        assert body["token"]["refresh_token"]

    async def test_known_chat_returns_existing_user(self, client):
        first = await register(client, 556)
        second = await register(client, 556, name="Carol B.")

        assert second.json()["is_new"] is False
        assert second.json()["user"]["id"] == first.json()["user"]["id"]
        assert second.json()["user"]["name"] == "Carol B."

    async def test_wrong_bot_token(self, client):
        response = await register(client, 557, token="nope")
        assert response.status_code == 403

    async def test_inactive_user_is_refused(self, client, make_user):
        user = await make_user("Dormant", is_active=False)

        response = await register(client, user.telegram_chat_id, name="Dormant")

        assert response.status_code == 403


class TestTokens:
    async def test_bearer_token_resolves_user(self, client):
        tokens = (await register(client, 600)).json()["token"]

        response = await client.get(
            "/studio/videos", headers={"Authorization": f"Bearer {tokens['access_token']}"}
        )

        assert response.status_code == 200
        assert response.json()["items"] == []

    async def test_refresh_issues_new_access_token(self, client):
        tokens = (await register(client, 601)).json()["token"]

        response = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})

        assert response.status_code == 200
        assert response.json()["access_token"]

    async def test_access_token_cannot_refresh(self, client):
        tokens = (await register(client, 602)).json()["token"]

        response = await client.post("/auth/refresh", json={"refresh_token": tokens["access_token"]})

        assert response.status_code == 401

    async def test_garbage_bearer_token(self, client):
        response = await client.get("/studio/videos", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401


class TestBotIdentity:
    async def test_unlinked_chat_is_not_found(self, client):
        response = await client.get(
            "/studio/videos", headers={"X-Bot-Token": BOT_TOKEN, "X-Telegram-Chat-Id": "999999"}
        )
        assert response.status_code == 404

    async def test_bad_bot_token_on_optional_route(self, client, make_video, alice):
        video = await make_video(alice)

        response = await client.get(f"/videos/{video.id}", headers={"X-Bot-Token": "nope"})

        assert response.status_code == 403

    async def test_bot_without_chat_is_anonymous(self, client, make_video, alice):
        video = await make_video(alice)

        response = await client.get(f"/videos/{video.id}", headers={"X-Bot-Token": BOT_TOKEN})

        assert response.status_code == 200

    async def test_viewer_sees_own_reaction(self, client, make_video, alice, bob):
        video = await make_video(alice)
        await client.post(f"/videos/{video.id}/dislike", headers=bot_headers(bob))

        response = await client.get(f"/videos/{video.id}", headers=bot_headers(bob))

        assert response.json()["viewer_reaction"] == "dislike"


async def test_health(client):
    response = await client.get("/health")
    assert response.json() == {"status": "ok"}
