"""Shared API dependencies: the record store and the caller's identity."""
from collections.abc import AsyncIterator

import httpx
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from db import get_db
from slipway_core.editor import Author
from slipway_core.record_store import FirebaseRecordStore, RecordStore, SqlRecordStore
from utils.config import FIREBASE_AUTH_TOKEN, FIREBASE_DATABASE_URL, STORE_BACKEND

STORE_TIMEOUT_S = 10.0


async def get_record_store(db: Session = Depends(get_db)) -> AsyncIterator[RecordStore]:
    """Yield the configured record store for one request."""
    if STORE_BACKEND == "firebase":
        async with httpx.AsyncClient(timeout=STORE_TIMEOUT_S) as http:
            yield FirebaseRecordStore(FIREBASE_DATABASE_URL, http, FIREBASE_AUTH_TOKEN)
    else:
        yield SqlRecordStore(db)


def get_current_user(
    x_user_id: str | None = Header(default=None),
    x_user_name: str | None = Header(default=None),
    x_user_email: str | None = Header(default=None),
) -> Author | None:
    """Identity forwarded by the authentication provider, or None for anonymous callers."""
    if not x_user_id or not x_user_id.strip():
        return None
    return Author(user_id=x_user_id.strip(), name=(x_user_name or "").strip(), email=(x_user_email or "").strip())


def require_user(user: Author | None = Depends(get_current_user)) -> Author:
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="You must be logged in")
    return user
