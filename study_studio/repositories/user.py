"""User repository."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import User, UserStatus
from .base import BaseRepository, storage_errors


class UserRepository(BaseRepository[User]):
    """Repository for users."""

    resource_name = "User"

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def count_active(self) -> int:
        """
        SQL equivalent:
            SELECT COUNT(*) FROM users WHERE status = 'active';
        """
        with storage_errors("counting active users"):
            result = await self.db.execute(
                select(func.count()).select_from(User).where(User.status == UserStatus.ACTIVE)
            )
            return result.scalar_one()

    async def find_active_id(self) -> int | None:
        """
        Id of the first active user, or None when nobody is active.

        SQL equivalent:
            SELECT id FROM users WHERE status = 'active' ORDER BY id LIMIT 1;
        """
        with storage_errors("looking up active user"):
            result = await self.db.execute(
                select(User.id).where(User.status == UserStatus.ACTIVE).order_by(User.id).limit(1)
            )
            return result.scalar_one_or_none()
