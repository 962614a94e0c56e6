from typing import Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.exceptions import ConflictError
from vidshare.models.reactions import ReactionType


async def toggle_reaction(
    db: AsyncSession,
    model,
    reaction_type: ReactionType,
    **keys,
) -> Optional[ReactionType]:
    """Apply a like/dislike toggle and return the caller's resulting reaction.

    Repeating the current reaction removes it, the opposite one replaces it.
    """
    result = await db.execute(select(model).filter_by(**keys))
    existing = result.scalar_one_or_none()

    if existing is not None and existing.type == reaction_type:
        await db.delete(existing)
        await db.commit()
        logger.info(f"Removed {reaction_type.value} on {model.__tablename__} {keys}")
        return None

    if existing is not None:
        existing.type = reaction_type
    else:
        db.add(model(type=reaction_type, **keys))

    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Concurrent reaction write on {model.__tablename__} {keys}: {e}")
        raise ConflictError("Reaction was changed concurrently, retry the request")

    logger.info(f"Set {reaction_type.value} on {model.__tablename__} {keys}")
    return reaction_type
