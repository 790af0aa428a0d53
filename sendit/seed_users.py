"""
Database seeding script for the initial admin user.

Admins cannot register through the API; this script creates the first one
from INITIAL_ADMIN_EMAIL / INITIAL_ADMIN_PASSWORD. Later admins are created
by an existing admin through POST /v1/admin/create-admin.
"""

import asyncio
import logging

from sendit.app.core.config import settings
from sendit.app.core.observability import configure_logging
from sendit.app.core.security import get_password_hash
from sendit.app.db.session import Database
from sendit.app.models.enums import UserRole
from sendit.app.models.user import User
from sendit.app.repositories.users import UserRepository

logger = logging.getLogger("sendit.seed")


async def seed_admin(database: Database) -> bool:
    """Create the initial admin unless the e-mail is already taken. Returns True if created."""
    async for db in database.session():
        users = UserRepository(db)
        if await users.get_by_email(settings.initial_admin_email):
            logger.info("Admin %s already exists, skipping seeding", settings.initial_admin_email)
            return False

        await users.put(User(
            email=settings.initial_admin_email.lower(),
            hashed_password=get_password_hash(settings.initial_admin_password),
            first_name="System",
            last_name="Admin",
            phone="",
            role=UserRole.ADMIN,
            is_active=True,
        ))
        await db.commit()
        logger.info("Created admin user %s", settings.initial_admin_email)
        return True
    return False


async def main():
    configure_logging(settings.log_level)
    database = Database.from_settings(settings)
    await database.connect()
    try:
        await seed_admin(database)
    finally:
        await database.disconnect()


if __name__ == "__main__":
    asyncio.run(main())
