"""User service."""

from ..core.logging import get_logger
from ..core.state import AppState
from ..models import User
from ..repositories import UserRepository

logger = get_logger(__name__)


class UserService:
    """Local user accounts. The desktop app runs with one active user."""

    def __init__(self, state: AppState):
        self.state = state

    async def create_user(self, name: str) -> User:
        """
        Create an active user.

        Raises:
            InvalidName: empty name
        """
        user = User.new(name)

        async with self.state.session() as db:
            user = await UserRepository(db).create(user)

        logger.info("User created", extra={"user_id": user.id})
        return user

    async def get_active_users_count(self) -> int:
        async with self.state.session() as db:
            return await UserRepository(db).count_active()

    async def get_active_user_id(self) -> int | None:
        """Id of the first active user, or None before onboarding."""
        async with self.state.session() as db:
            return await UserRepository(db).find_active_id()
