"""Opaque keyset cursors.

A cursor names the last row of a page by its ``(updated_at, id)`` sort key.
On the wire it travels as url-safe base64 JSON carrying a hash of the filter
it was minted under, so a token handed out for one listing is rejected when
replayed against another.
"""

import base64
import hashlib
import json
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from vidshare.core.exceptions import ValidationError


class Cursor(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    updated_at: datetime

    @classmethod
    def from_entity(cls, entity: Any) -> "Cursor":
        return cls(id=entity.id, updated_at=entity.updated_at)


class CursorCodec:
    @staticmethod
    def encode(cursor: Cursor, filters: Optional[Dict[str, Any]] = None) -> str:
        cursor_data = {
            "id": str(cursor.id),
            "updated_at": cursor.updated_at.isoformat(),
        }
        if filters is not None:
            cursor_data["filters_hash"] = CursorCodec.hash_filters(filters)

        json_str = json.dumps(cursor_data, sort_keys=True)
        return base64.urlsafe_b64encode(json_str.encode()).decode()

    @staticmethod
    def decode(token: str, filters: Optional[Dict[str, Any]] = None) -> Cursor:
        """Decode a cursor token, checking it against ``filters`` when given.

        Raises:
            ValidationError: the token is malformed or was minted under a
                different filter.
        """
        try:
            json_str = base64.urlsafe_b64decode(token.encode()).decode()
            cursor_data = json.loads(json_str)
            cursor = Cursor(id=cursor_data["id"], updated_at=cursor_data["updated_at"])
        except (ValueError, KeyError, TypeError) as e:
            raise ValidationError(f"Invalid pagination cursor: {e}") from e

        if filters is not None:
            if cursor_data.get("filters_hash") != CursorCodec.hash_filters(filters):
                raise ValidationError("Pagination cursor does not match the requested filters")

        return cursor

    @staticmethod
    def hash_filters(filters: Dict[str, Any]) -> str:
        normalized = {k: str(v) for k, v in sorted(filters.items()) if v is not None}
        json_str = json.dumps(normalized, sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()
