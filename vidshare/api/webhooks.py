from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from loguru import logger
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.api.deps import get_mux_client, get_mux_settings
from vidshare.core.config import MuxSettings
from vidshare.core.exceptions import ValidationError
from vidshare.db.database import get_db
from vidshare.schemas.webhook import MuxWebhookEvent
from vidshare.services.mux_client import MuxClient
from vidshare.services.webhook_service import WebhookService
from vidshare.utils.security import verify_mux_signature

webhooks_router = APIRouter()


@webhooks_router.post("/mux")
async def mux_webhook(
    request: Request,
    mux_signature: str = Header(None, alias="mux-signature"),
    db: AsyncSession = Depends(get_db),
    settings: MuxSettings = Depends(get_mux_settings),
    mux: MuxClient = Depends(get_mux_client),
):
    if not settings.mux_webhook_signing_secret:
        logger.error("Mux webhook signing secret is not configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Mux webhook signing secret not configured",
        )

    body = await request.body()
    verify_mux_signature(
        body,
        mux_signature,
        settings.mux_webhook_signing_secret,
        tolerance_seconds=settings.webhook_tolerance_seconds,
    )

    try:
        event = MuxWebhookEvent.model_validate_json(body)
        handled = await WebhookService(db, mux).handle_event(event)
    except PydanticValidationError as e:
        logger.warning(f"Malformed webhook payload: {e}")
        raise ValidationError("Malformed webhook payload")

    return {"message": "Webhook processed", "handled": handled}
