from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.schema import enable_sqlite_foreign_keys
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork

engine = create_async_engine(
    ApplicationConfig.DB_URI, echo=ApplicationConfig.DB_ECHO, future=True
)
enable_sqlite_foreign_keys(engine)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


@asynccontextmanager
async def get_unit_of_work() -> AsyncIterator[SqlAlchemyUnitOfWork]:
    """One database session per unit of work; closed on exit"""
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)
