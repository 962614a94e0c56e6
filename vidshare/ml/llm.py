from gigachat import GigaChat
from gigachat.models import Chat, Messages, MessagesRole
from loguru import logger

from vidshare.core.config import GigaChatSettings

TITLE_SYSTEM_PROMPT = """Your task is to generate an SEO-focused title for a video based on its transcript. Please follow these guidelines:
- Be concise but descriptive, using relevant keywords to improve discoverability.
- Highlight the most compelling or unique aspect of the video content.
- Avoid jargon or overly complex language unless it directly supports searchability.
- Use action-oriented phrasing or clear value propositions where applicable.
- Ensure the title is 3-8 words long and no more than 100 characters.
- ONLY return the title as plain text. Do not add quotes or any additional formatting."""

DESCRIPTION_SYSTEM_PROMPT = """Your task is to summarize the transcript of a video. Please follow these guidelines:
- Be brief. Condense the content into a summary that captures the key points and main ideas without losing important details.
- Avoid jargon or overly complex language unless necessary for the context.
- Focus on the most critical information, ignoring filler, repetitive statements, or irrelevant tangents.
- ONLY return the summary, no other text, annotations, or comments.
- Aim for a summary that is 3-5 sentences long and no more than 200 characters."""

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 5000


class LLMService:
    def __init__(self, settings: GigaChatSettings):
        self.settings = settings
        self.client = GigaChat(
            credentials=settings.giga_auth_key,
            scope=settings.giga_scope,
            model=settings.giga_model,
            verify_ssl_certs=settings.giga_verify_ssl_certs,
        )

    async def generate_title(self, transcript: str) -> str:
        title = await self._complete(TITLE_SYSTEM_PROMPT, transcript)
        return title.strip().strip('"').strip()[:TITLE_MAX_LENGTH]

    async def generate_description(self, transcript: str) -> str:
        description = await self._complete(DESCRIPTION_SYSTEM_PROMPT, transcript)
        return description.strip()[:DESCRIPTION_MAX_LENGTH]

    async def _complete(self, system_prompt: str, text: str) -> str:
        if not text or not text.strip():
            raise ValueError("Transcript is empty")

        payload = Chat(
            messages=[
                Messages(role=MessagesRole.SYSTEM, content=system_prompt),
                Messages(role=MessagesRole.USER, content=text),
            ],
            temperature=0.8,
        )

        logger.debug(f"Sending transcript to LLM: {text[:100]}...")
        response = await self.client.achat(payload)
        content = response.choices[0].message.content.strip()
        logger.debug(f"LLM response: {content[:200]}...")

        if not content:
            raise ValueError("LLM returned an empty completion")
        return content
