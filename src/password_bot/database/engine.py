"""Database engine and async session factory."""

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from password_bot.config import settings
from password_bot.models.credential import Base

engine = create_async_engine(
    settings.database_url, echo=settings.debug, hide_parameters=True
)

async_session_factory = async_sessionmaker(engine, expire_on_commit=False)


async def init_db() -> None:
    """Create the credentials table if it doesn't yet exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
