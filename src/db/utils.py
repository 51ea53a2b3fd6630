from sqlalchemy.ext.asyncio import AsyncEngine

from src.db.models import Base


async def create_db_tables(engine: AsyncEngine):
    """Creates the tables described by the SQLAlchemy models."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
