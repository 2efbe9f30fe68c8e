import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.schema import create_schema, drop_schema, enable_sqlite_foreign_keys
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.domain.entities import User


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    enable_sqlite_foreign_keys(engine)
    await create_schema(engine)
    yield engine
    await drop_schema(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def uow(db_session):
    return SqlAlchemyUnitOfWork(db_session)


@pytest_asyncio.fixture
async def user_id(uow):
    # Only the id leaves the fixture; ORM instances expire on the next rollback
    async with uow:
        user = await uow.users.create(User(user_name="alice"))
        await uow.commit()
        return user.id
