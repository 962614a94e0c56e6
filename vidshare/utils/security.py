import hashlib
import hmac
import time
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, Header, status
from fastapi import Request
from fastapi.security import APIKeyHeader
import jwt
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from vidshare.core.config import JWTSettings, TelegramSettings
from vidshare.core.exceptions import UnauthorizedError
from vidshare.db.database import get_db
from vidshare.models.users import Users
from vidshare.schemas.token import Token
from vidshare.services.telegram_service import TelegramService

auth_scheme = APIKeyHeader(name="Authorization", scheme_name="Bearer", auto_error=False)

jwt_settings = JWTSettings()
telegram_settings = TelegramSettings()


async def verify_bot_token(x_bot_token: Optional[str] = Header(None, alias="X-Bot-Token")) -> str:
    if not x_bot_token or not hmac.compare_digest(x_bot_token, telegram_settings.bot_token):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid bot token",
        )
    return x_bot_token

async def create_access_token(to_encode: dict):
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=jwt_settings.access_token_expire_minutes
    )
    payload = dict(to_encode)
    payload.update({"exp": expire, "type": "access"})
    encoded_jwt = jwt.encode(
        payload, jwt_settings.secret_key, algorithm=jwt_settings.algorithm
    )

    return encoded_jwt

async def create_refresh_token(to_encode: dict):
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=jwt_settings.refresh_token_expire_minutes
    )
    payload = dict(to_encode)
    payload.update({"exp": expire, "type": "refresh"})
    encoded_jwt = jwt.encode(
        payload, jwt_settings.refresh_token_secret_key, algorithm=jwt_settings.algorithm
    )

    return encoded_jwt

async def issue_tokens(user: Users) -> Token:
    claims = {"id": str(user.id)}
    return Token(
        access_token=await create_access_token(claims),
        refresh_token=await create_refresh_token(claims),
    )

async def verify_token(token: str, secret_key: str, algorithm: str):
    try:
        payload = jwt.decode(token, secret_key, algorithms=[algorithm])
        return payload
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token has expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Could not validate credentials")

async def refresh_access_token(refresh_token: str):
    refresh_token_payload = await verify_token(
        refresh_token,
        jwt_settings.refresh_token_secret_key,
        jwt_settings.algorithm
    )
    if refresh_token_payload.get("type") != "refresh":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token type")
    user_id = refresh_token_payload.get("id")
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")

    return await create_access_token({"id": str(user_id)})

async def get_current_user(request: Request, token: str = Depends(auth_scheme), db: AsyncSession = Depends(get_db)):
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise credentials_exception

    try:
        if token.startswith("Bearer "):
            token = token[7:]

        payload = await verify_token(token, jwt_settings.secret_key, jwt_settings.algorithm)
        user_id: str = payload.get("id")
        if user_id is None:
            raise credentials_exception
        if payload.get("type") != "access":
            raise credentials_exception
    except HTTPException:
        raise credentials_exception

    try:
        user_uuid = UUID(user_id)
    except (ValueError, TypeError):
        raise credentials_exception

    result = await db.execute(select(Users).where(Users.id == user_uuid))
    user = result.scalar_one_or_none()

    if user is None or not user.is_active:
        raise credentials_exception

    return user

async def get_user_from_telegram(
    request: Request,
    x_bot_token: Optional[str] = Header(None, alias="X-Bot-Token"),
    x_telegram_chat_id: Optional[int] = Header(None, alias="X-Telegram-Chat-Id"),
    db: AsyncSession = Depends(get_db),
) -> Users:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate telegram credentials",
    )

    await verify_bot_token(x_bot_token)

    if not x_telegram_chat_id:
        raise credentials_exception

    telegram_service = TelegramService(db)
    user = await telegram_service.get_user_by_chat_id(x_telegram_chat_id)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Telegram chat is not linked to any user",
        )

    return user

async def get_user(
    request: Request,
    token: str = Depends(auth_scheme),
    x_bot_token: Optional[str] = Header(None, alias="X-Bot-Token"),
    x_telegram_chat_id: Optional[int] = Header(None, alias="X-Telegram-Chat-Id"),
    db: AsyncSession = Depends(get_db),
) -> Users:
    if x_bot_token:
        return await get_user_from_telegram(request, x_bot_token, x_telegram_chat_id, db)
    else:
        return await get_current_user(request, token, db)

async def get_optional_user(
    request: Request,
    token: str = Depends(auth_scheme),
    x_bot_token: Optional[str] = Header(None, alias="X-Bot-Token"),
    x_telegram_chat_id: Optional[int] = Header(None, alias="X-Telegram-Chat-Id"),
    db: AsyncSession = Depends(get_db),
) -> Optional[Users]:
    # anonymous viewers are allowed; bad credentials are still rejected
    if not token and not x_bot_token:
        return None
    if x_bot_token and not x_telegram_chat_id:
        await verify_bot_token(x_bot_token)
        return None
    return await get_user(request, token, x_bot_token, x_telegram_chat_id, db)


def verify_mux_signature(
    body: bytes,
    signature_header: Optional[str],
    secret: str,
    tolerance_seconds: int = 300,
    now: Optional[float] = None,
) -> None:
    """Check a ``mux-signature: t=<unix>,v1=<hex>`` header against the raw body."""
    if not signature_header:
        raise UnauthorizedError("Missing Mux signature")

    timestamp = None
    signatures = []
    for item in signature_header.split(","):
        key, _, value = item.strip().partition("=")
        if key == "t":
            timestamp = value
        elif key == "v1":
            signatures.append(value)

    if not timestamp or not signatures:
        raise UnauthorizedError("Malformed Mux signature")

    signed_payload = timestamp.encode() + b"." + body
    expected = hmac.new(secret.encode(), signed_payload, hashlib.sha256).hexdigest()
    if not any(hmac.compare_digest(expected, candidate) for candidate in signatures):
        logger.warning("Rejected webhook with invalid Mux signature")
        raise UnauthorizedError("Invalid Mux signature")

    try:
        age = abs((now if now is not None else time.time()) - int(timestamp))
    except ValueError:
        raise UnauthorizedError("Malformed Mux signature")
    if tolerance_seconds and age > tolerance_seconds:
        raise UnauthorizedError("Mux signature timestamp is outside the tolerance window")
