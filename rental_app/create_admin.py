import argparse
import asyncio
import logging

from core.get_db import AsyncSessionLocal, async_engine
from models import event_listener  # noqa: F401
from services.auth_service import AuthService

logging.basicConfig(level=logging.INFO)


async def run(name: str, email: str, password: str):
    async with AsyncSessionLocal() as db:
        await AuthService(db).create_admin(name=name, email=email, password=password)
    await async_engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create or promote an admin user")
    parser.add_argument("--name", default="Administrator")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    args = parser.parse_args()
    asyncio.run(run(args.name, args.email, args.password))
