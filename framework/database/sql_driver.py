from sqlmodel import SQLModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from .base import BaseDatabaseDriver

class SQLDriver(BaseDatabaseDriver):
    def __init__(self, url: str, echo: bool = False):
        self.engine = create_async_engine(url, echo=echo, future=True)
        self.session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

    async def connect(self):
        """Check connectivity (the engine pools connections itself)."""
        async with self.engine.begin() as conn:
            await conn.execute(text("SELECT 1"))

    async def disconnect(self):
        await self.engine.dispose()

    async def create_tables(self):
        """Create tables for every registered SQLModel table class."""
        import apps.models  # noqa: F401  registers tables in metadata
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def get_session(self):
        """Yield one session per unit of work; closed on exit."""
        async with self.session_factory() as session:
            yield session
