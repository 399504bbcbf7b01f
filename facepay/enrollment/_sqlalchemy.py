"""
SQLAlchemy enrollment store.

Usage:
    session_factory, engine = await create_enrollment_database(
        "sqlite+aiosqlite:///./enrollments.db"
    )
    store = SQLAlchemyEnrollmentStore(session_factory)
    registrar = EnrollmentRegistrar(store, resolver)

Uniqueness comes from the primary key on identity_key: add_if_absent
inserts and treats an IntegrityError as "already enrolled", which keeps
the first record regardless of how many writers race.
"""

from datetime import datetime, UTC
from typing import Any, cast

from sqlalchemy import select, delete, String, DateTime
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from facepay.enrollment._types import EnrolledIdentity


# ═══════════════════════════════════════════════════════════════════════════════
# Table
# ═══════════════════════════════════════════════════════════════════════════════


class Base(DeclarativeBase):
    pass


class EnrollmentRow(Base):
    """One enrolled face per identity key."""

    __tablename__ = "enrolled_identities"

    identity_key: Mapped[str] = mapped_column(String(255), primary_key=True)
    external_template_ref: Mapped[str] = mapped_column(String(255), nullable=False)
    enrolled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


# ═══════════════════════════════════════════════════════════════════════════════
# Store
# ═══════════════════════════════════════════════════════════════════════════════


class SQLAlchemyEnrollmentStore:
    """Enrollment store backed by an async SQLAlchemy session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, identity_key: str) -> EnrolledIdentity | None:
        async with self._session_factory() as session:
            row = await session.get(EnrollmentRow, identity_key)
            return _to_record(row) if row is not None else None

    async def add_if_absent(self, record: EnrolledIdentity) -> bool:
        async with self._session_factory() as session:
            session.add(
                EnrollmentRow(
                    identity_key=record.identity_key,
                    external_template_ref=record.external_template_ref,
                    enrolled_at=record.enrolled_at,
                )
            )
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                return False
            return True

    async def keys(self) -> frozenset[str]:
        async with self._session_factory() as session:
            result = await session.execute(select(EnrollmentRow.identity_key))
            return frozenset(result.scalars().all())

    async def clear(self) -> int:
        async with self._session_factory() as session:
            cursor = cast(CursorResult[Any], await session.execute(delete(EnrollmentRow)))
            await session.commit()
            return cursor.rowcount


def _to_record(row: EnrollmentRow) -> EnrolledIdentity:
    enrolled_at = row.enrolled_at
    # SQLite drops tzinfo; values are always written in UTC
    if enrolled_at.tzinfo is None:
        enrolled_at = enrolled_at.replace(tzinfo=UTC)
    return EnrolledIdentity(
        identity_key=row.identity_key,
        external_template_ref=row.external_template_ref,
        enrolled_at=enrolled_at,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Database Setup
# ═══════════════════════════════════════════════════════════════════════════════


async def create_enrollment_database(
    url: str = "sqlite+aiosqlite:///:memory:",
) -> tuple[async_sessionmaker[AsyncSession], AsyncEngine]:
    """Create tables and return (session_factory, engine)."""
    engine = create_async_engine(url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    return async_sessionmaker(engine, expire_on_commit=False), engine


__all__ = (
    "EnrollmentRow",
    "SQLAlchemyEnrollmentStore",
    "create_enrollment_database",
)
