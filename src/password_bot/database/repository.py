"""Credential repository — data access layer for stored service credentials."""

from __future__ import annotations

import logging
from typing import NoReturn

from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from password_bot.models.credential import Credential

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """The backing store could not complete an operation."""


class CredentialRepository:
    """Encapsulates all database queries related to stored credentials.

    Every failure of the storage layer is rolled back and re-raised as
    :class:`StorageError`, so callers can tell a missing record apart
    from a broken database.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def save(self, user_id: int, service: str, login: str, password: str) -> None:
        """Insert or overwrite the record keyed by ``(user_id, service)``."""
        stmt = insert(Credential).values(
            user_id=user_id, service=service, login=login, password=password
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "service"],
            set_={"login": stmt.excluded.login, "password": stmt.excluded.password},
        )
        try:
            await self._session.execute(stmt)
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._fail("save", user_id, exc)
        logger.info("Saved credentials for user %s, service %r", user_id, service)

    async def find(self, user_id: int, service: str) -> Credential | None:
        """Look up a record by exact, case-sensitive service name."""
        # upserts bypass the identity map, so always reload attributes
        stmt = (
            select(Credential)
            .where(Credential.user_id == user_id, Credential.service == service)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            await self._fail("find", user_id, exc)
        return result.scalar_one_or_none()

    async def delete(self, user_id: int, service: str) -> None:
        """Remove the record if present; deleting a missing record is a no-op."""
        stmt = delete(Credential).where(
            Credential.user_id == user_id, Credential.service == service
        )
        try:
            await self._session.execute(stmt)
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._fail("delete", user_id, exc)
        logger.info("Deleted credentials for user %s, service %r", user_id, service)

    async def list_services(self, user_id: int) -> list[str]:
        """Return every service name owned by *user_id*, sorted ascending."""
        stmt = (
            select(Credential.service)
            .where(Credential.user_id == user_id)
            .order_by(Credential.service)
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            await self._fail("list", user_id, exc)
        return list(result.scalars().all())

    async def _fail(self, operation: str, user_id: int, exc: SQLAlchemyError) -> NoReturn:
        logger.error("Credential %s failed for user %s: %s", operation, user_id, exc)
        try:
            await self._session.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback after failed %s also failed", operation)
        raise StorageError(f"credential {operation} failed") from exc
