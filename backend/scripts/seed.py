"""Seed script: creates the admin tables and the default roles.

Idempotent: existing roles are left alone.
Run: python backend/scripts/seed.py
"""
import asyncio
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from cms_admin.core.config import settings
from cms_admin.core.seed import seed_admin_roles
from cms_admin.db.base import Base
from cms_admin.db.session import build_engine, build_sessionmaker
import cms_admin.models  # noqa: F401  (registers tables on Base.metadata)


async def seed():
    engine = build_engine(settings, echo=True)
    SessionLocal = build_sessionmaker(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as db:
        await seed_admin_roles(db)
        print("Seed complete.")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed())
