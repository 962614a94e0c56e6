"""Tests for the background title and description generation jobs."""

import pytest

from vidshare.core.exceptions import NotFoundError, ValidationError
from vidshare.tasks.generation_task import generate_description_task, generate_title_task


class FakeLLM:
    def __init__(self):
        self.transcripts = []

    async def generate_title(self, transcript: str) -> str:
        self.transcripts.append(transcript)
        return "Keyset Pagination Explained"

    async def generate_description(self, transcript: str) -> str:
        self.transcripts.append(transcript)
        return "How cursors keep long lists stable."


@pytest.fixture
def ctx(mux_client, session_factory):
    return {"llm": FakeLLM(), "mux": mux_client, "sessionmaker": session_factory}


@pytest.fixture
async def transcribed_video(make_video, alice):
    return await make_video(alice, title="Untitled", mux_playback_id="play-1", mux_track_id="track-1")


async def test_title_is_generated_from_transcript(ctx, db_session, mux_recorder, transcribed_video, alice):
    title = await generate_title_task(ctx, str(transcribed_video.id), str(alice.id))

    assert title == "Keyset Pagination Explained"
    assert ctx["llm"].transcripts == [mux_recorder.transcript]
    assert str(mux_recorder.requests[-1].url) == "https://stream.mux.com/play-1/text/track-1.txt"
    assert "authorization" not in mux_recorder.requests[-1].headers

    await db_session.refresh(transcribed_video)
    assert transcribed_video.title == "Keyset Pagination Explained"


async def test_description_is_generated(ctx, db_session, transcribed_video, alice):
    await generate_description_task(ctx, str(transcribed_video.id), str(alice.id))

    await db_session.refresh(transcribed_video)
    assert transcribed_video.description == "How cursors keep long lists stable."


async def test_video_without_transcript(ctx, make_video, alice):
    video = await make_video(alice)

    with pytest.raises(ValidationError):
        await generate_title_task(ctx, str(video.id), str(alice.id))


async def test_only_the_owner_can_generate(ctx, transcribed_video, bob):
    with pytest.raises(NotFoundError):
        await generate_title_task(ctx, str(transcribed_video.id), str(bob.id))
