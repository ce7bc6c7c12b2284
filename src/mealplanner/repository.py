"""Shared plumbing for SQLAlchemy repositories."""

from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mealplanner.errors import StoreError
from mealplanner.logging_config import get_logger
from mealplanner.models import User

logger = get_logger(__name__)


@contextmanager
def translate_errors(action: str) -> Iterator[None]:
    """Re-raise database failures as StoreError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Database error while trying to {action}: {e}")
        raise StoreError(f"Failed to {action}") from e


class Transactional(Protocol):
    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


@asynccontextmanager
async def unit_of_work(repo: Transactional) -> AsyncIterator[None]:
    """
    Commit the block's writes, or roll them back if anything in it fails.

    The error that aborted the block is the one re-raised; a rollback that
    fails as well is only logged.
    """
    try:
        yield
        await repo.commit()
    except Exception as e:
        try:
            await repo.rollback()
        except StoreError as rollback_error:
            logger.error(f"Rollback after {type(e).__name__} also failed: {rollback_error}")
        raise


class SqlRepository:
    """Base repository bound to one request-scoped session.

    Repositories only flush; the calling service decides when to commit.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def commit(self) -> None:
        with translate_errors("commit transaction"):
            await self.session.commit()

    async def rollback(self) -> None:
        with translate_errors("roll back transaction"):
            await self.session.rollback()

    async def ensure_user(self, user_id: str) -> User:
        """Get an existing user or create a placeholder for a new caller."""
        with translate_errors("load user"):
            result = await self.session.execute(select(User).where(User.id == user_id))
            user = result.scalar_one_or_none()

            if not user:
                user = User(id=user_id, email=f"{user_id}@placeholder.local")
                self.session.add(user)
                await self.session.flush()
                logger.info(f"Created placeholder user {user_id}")

        return user
