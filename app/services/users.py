"""User lookups. Registration and login belong to the auth service."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models import User, UserRole


async def get_user(db: AsyncSession, user_id: UUID) -> User | None:
    """Get user by ID."""
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_charity(db: AsyncSession, charity_id: UUID) -> User | None:
    """Get a charity user with its profile loaded."""
    result = await db.execute(
        select(User)
        .where(User.id == charity_id, User.role == UserRole.CHARITY.value)
        .options(selectinload(User.charity_profile))
    )
    return result.scalar_one_or_none()
