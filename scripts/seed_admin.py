"""
Seed Admin User

Creates an active administrator account. Credentials come from the
environment so none are kept in the repository.

Usage:
    SEED_ADMIN_EMAIL=admin@example.com SEED_ADMIN_PASSWORD='...' \
        python scripts/seed_admin.py
"""

import asyncio
import os
import sys
from pathlib import Path

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from app.core.database import async_session_maker, close_db
from app.core.security import hash_password
from app.modules.auth.helpers import password_problems
from app.modules.users.models import UserRole
from app.modules.users.repository import UserRepository


async def seed_admin() -> int:
    """Create the admin user if it doesn't exist."""
    email = os.environ.get("SEED_ADMIN_EMAIL")
    password = os.environ.get("SEED_ADMIN_PASSWORD")
    first_name = os.environ.get("SEED_ADMIN_FIRST_NAME", "Admin")
    last_name = os.environ.get("SEED_ADMIN_LAST_NAME", "Ruche")

    if not email or not password:
        print("SEED_ADMIN_EMAIL and SEED_ADMIN_PASSWORD must be set")
        return 1

    problems = password_problems(password)
    if problems:
        print(f"Password too weak, missing: {', '.join(problems)}")
        return 1

    async with async_session_maker() as db:
        existing_user = await UserRepository.get_by_email(db, email)
        if existing_user:
            print(f"Admin already exists: {email}")
            print(f"  ID: {existing_user.id}")
            print(f"  Role: {existing_user.role.value}")
            return 0

        admin_user = await UserRepository.create(
            db,
            email=email,
            first_name=first_name,
            last_name=last_name,
            role=UserRole.ADMIN,
            password_hash=hash_password(password),
            is_account_active=True,
        )
        await db.commit()

        print("Admin created successfully!")
        print(f"  Email: {email}")
        print(f"  Name: {admin_user.full_name}")
        print(f"  ID: {admin_user.id}")

    await close_db()
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(seed_admin()))
