"""Seed script to create or update a staff user.

Usage:
    python -m app.scripts.seed_admin --username=admin --email=admin@example.com --password=SecurePass123! --role=Admin

NEVER hardcode credentials in this file. Always pass via CLI arguments.
"""

import argparse
import asyncio
import sys
from sqlalchemy import select

from app.core.database import async_session_maker
from app.models.user import ROLES, User
from app.services.auth import hash_password


async def create_or_update_user(
    username: str,
    email: str,
    password: str,
    role: str = "Admin",
    session_factory=async_session_maker,
) -> User:
    """Create a user, or reset role/password on an existing one with the same username."""
    async with session_factory() as db:
        result = await db.execute(select(User).where(User.username == username))
        user = result.scalar_one_or_none()

        if user:
            print(f"✅ User {username} already exists. Updating to {role} role...")
            user.role = role
            user.email = email
            user.is_active = True
            user.hashed_password = hash_password(password)
        else:
            print(f"🆕 Creating new {role} user: {username}...")
            user = User(
                username=username,
                email=email,
                hashed_password=hash_password(password),
                role=role,
                is_active=True,
            )
            db.add(user)

        await db.commit()
        await db.refresh(user)
        print(f"✅ {role} user ready: {username} <{email}>")
        return user


def main():
    """Parse CLI arguments and run the seed script."""
    parser = argparse.ArgumentParser(description="Create or update a staff user for the lead CRM")
    parser.add_argument("--username", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True, help="Password (will be hashed before storing)")
    parser.add_argument("--role", default="Admin", choices=ROLES)

    args = parser.parse_args()

    if "@" not in args.email or "." not in args.email:
        print("❌ Error: Invalid email format.", file=sys.stderr)
        sys.exit(1)

    if len(args.password) < 8:
        print("❌ Error: Password must be at least 8 characters.", file=sys.stderr)
        sys.exit(1)

    asyncio.run(create_or_update_user(args.username, args.email, args.password, args.role))


if __name__ == "__main__":
    main()
