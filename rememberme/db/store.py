# rememberme/db/store.py
from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rememberme.core.errors import StorageError
from rememberme.core.ledger import CredentialRecord, as_utc
from rememberme.db.models import RememberMeToken

logger = logging.getLogger(__name__)


def _to_db(value: datetime | None) -> datetime | None:
    """aware -> UTC naive (la columna es TIMESTAMP WITHOUT TIME ZONE)."""
    if value is None:
        return None
    return as_utc(value).replace(tzinfo=None, microsecond=0)


def _from_db(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc)


def _to_record(row: RememberMeToken) -> CredentialRecord:
    return CredentialRecord(
        hash=row.cookiehash,
        user_id=row.userid,
        created_at=_from_db(row.createdat),
        expires_at=_from_db(row.expiresat),
    )


class SqlCredentialStore:
    """CredentialStore sobre SQLAlchemy asyncio. Una sesión corta por operación."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def insert(self, record: CredentialRecord) -> None:
        try:
            async with self.session_factory() as s:
                s.add(
                    RememberMeToken(
                        cookiehash=record.hash,
                        userid=record.user_id,
                        createdat=_to_db(record.created_at),
                        expiresat=_to_db(record.expires_at),
                    )
                )
                await s.commit()
        except SQLAlchemyError as e:
            logger.exception("insert failed digest=%s", record.hash)
            raise StorageError(f"could not store credential: {e}") from e

    async def find_by_hash(self, digest: str) -> CredentialRecord | None:
        stmt = (
            select(RememberMeToken)
            .where(RememberMeToken.cookiehash == digest)
            .order_by(RememberMeToken.createdat.desc())
            .limit(1)
        )
        try:
            async with self.session_factory() as s:
                row = (await s.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.exception("lookup failed digest=%s", digest)
            raise StorageError(f"could not read credential: {e}") from e
        return _to_record(row) if row else None

    async def delete_by_hash(self, digest: str) -> None:
        # Borrar algo que no existe no es un error
        try:
            async with self.session_factory() as s:
                await s.execute(delete(RememberMeToken).where(RememberMeToken.cookiehash == digest))
                await s.commit()
        except SQLAlchemyError as e:
            logger.exception("delete failed digest=%s", digest)
            raise StorageError(f"could not delete credential: {e}") from e
