from typing import Optional

from sqlalchemy import func, select

from sendit.app.models.user import User
from sendit.app.repositories.base import SqlAlchemyRepository


class UserRepository(SqlAlchemyRepository[User]):
    model = User

    async def get_by_email(self, email: str) -> Optional[User]:
        """E-mail lookup is case-insensitive."""
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalar_one_or_none()
