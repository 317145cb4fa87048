"""
Seed script to create the first admin account.

Run once with env set:
  ADMIN_SEED_EMAIL=admin@yourcompany.com
  ADMIN_SEED_PASSWORD=YourSecurePassword
  ADMIN_SEED_NAME="Admin User"        (optional)

There is deliberately no built-in email/password: without both variables the
script exits without touching the database.
"""
import asyncio
import sys

from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import Admin
from app.auth.security import hash_password
from app.auth.services import get_admin_by_email
from app.core.config import settings
from app.db.session import AsyncSessionLocal, init_db

SEED_ADMIN_ROLE = "Super Admin"


async def seed_admin(db: AsyncSession) -> bool:
    """Create the seed admin if missing. Returns True when a row was inserted."""
    email = (settings.admin_seed_email or "").strip().lower()
    password = settings.admin_seed_password
    if not email or not password:
        print("ADMIN_SEED_EMAIL and ADMIN_SEED_PASSWORD must be set; nothing seeded.")
        return False

    if await get_admin_by_email(db, email):
        print("Admin already exists:", email)
        return False

    db.add(
        Admin(
            name=settings.admin_seed_name,
            email=email,
            password_hash=hash_password(password),
            role=SEED_ADMIN_ROLE,
            is_active=True,
        )
    )
    await db.commit()
    print("Created admin:", email)
    print("Please change the password after first login.")
    return True


async def main() -> int:
    await init_db()
    async with AsyncSessionLocal() as db:
        try:
            await seed_admin(db)
        except Exception as e:
            await db.rollback()
            print("Error seeding admin:", e)
            raise
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
