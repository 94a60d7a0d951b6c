# gateway/services/repo/sessions_async.py
from __future__ import annotations
import logging
from typing import Optional, Protocol

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from gateway import models
from gateway.core.logging import mask_token
from gateway.schemas.sessions import SessionRecord
from gateway.services.session.errors import SessionStoreError

log = logging.getLogger(__name__)


class SessionStore(Protocol):
    async def get_by_token(self, token: str) -> Optional[SessionRecord]:
        """Matching session, None when there is no such token.

        Raises SessionStoreError when the lookup itself fails.
        """
        ...


class SqlSessionStore:
    def __init__(self, sessionmaker: async_sessionmaker):
        self._sessionmaker = sessionmaker

    async def get_by_token(self, token: str) -> Optional[SessionRecord]:
        stmt = select(models.Session).where(models.Session.token == token)
        try:
            async with self._sessionmaker() as db:
                row = (await db.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise SessionStoreError(f"session lookup failed: {e}") from e

        if row is None:
            return None
        try:
            return SessionRecord.model_validate(row)
        except ValidationError as e:
            log.error("malformed session row id=%s token=%s", row.id, mask_token(token))
            raise SessionStoreError("malformed session row") from e
