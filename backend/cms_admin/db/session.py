from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from cms_admin.core.config import Settings, settings


def build_engine(config: Settings = settings, **overrides) -> AsyncEngine:
    """Async engine for DATABASE_URL. SQLite URLs get no pool sizing."""
    options = {"echo": config.DB_ECHO, "pool_pre_ping": True}
    if not config.DATABASE_URL.startswith("sqlite"):
        options.update(pool_size=config.DB_POOL_SIZE, max_overflow=config.DB_MAX_OVERFLOW)
    options.update(overrides)
    return create_async_engine(config.DATABASE_URL, **options)


def build_sessionmaker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # handlers read attributes after commit, so nothing expires
    return async_sessionmaker(bind, expire_on_commit=False, autoflush=False)


engine = build_engine()
AsyncSessionLocal = build_sessionmaker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
