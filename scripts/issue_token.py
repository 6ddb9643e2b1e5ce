"""Issue a session token for a local profile, for poking at the API without the identity provider.

Usage:
    python -m scripts.issue_token <handle>
"""
import asyncio
import sys

from sqlalchemy import select

from app.database import async_session
from app.models.profile import Profile
from app.security import create_access_token


async def main(handle: str):
    async with async_session() as session:
        result = await session.execute(select(Profile).where(Profile.handle == handle))
        profile = result.scalar_one_or_none()

        if not profile:
            print(f"No profile with handle {handle!r}.")
            return

        print(create_access_token(profile.id))


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(1)
    asyncio.run(main(sys.argv[1]))
