#!/usr/bin/env python3
"""Grant the admin role to an existing profile.

Profiles are created by the auth provider on sign-up; this only changes the role.

Usage:
    python scripts/promote_admin.py admin@example.com
"""

import asyncio
import sys

from sqlalchemy import select

from app.database import async_session_maker
from app.models.profile import Profile


async def promote_admin(email: str) -> bool:
    """Set role=admin on the profile with this email."""
    async with async_session_maker() as session:
        result = await session.execute(select(Profile).where(Profile.email == email))
        profile = result.scalar_one_or_none()

        if not profile:
            print(f"ERROR: No profile found for {email}. Sign up first.")
            return False

        if profile.role == "admin":
            print(f"{email} is already an admin")
            return True

        profile.role = "admin"
        await session.commit()
        print(f"Promoted {email} to admin")
        return True


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(1)

    ok = asyncio.run(promote_admin(sys.argv[1]))
    sys.exit(0 if ok else 1)
