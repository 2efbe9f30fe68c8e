"""
Schema management: Alembic migrations, metadata create/drop for tests,
updated_at triggers, SQLite pragmas.
"""

import os
from typing import Optional

from alembic import command
from alembic.config import Config
from sqlalchemy import event
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlmodel import SQLModel

from config import ROOT_PATH

# Registers every table on SQLModel.metadata
import src.domain.entities  # noqa: F401

ALEMBIC_INI_PATH = os.path.join(ROOT_PATH, "alembic.ini")

# table -> primary key column
UPDATED_AT_TABLES = {"users": "userId", "posts": "postId"}


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite ignores FOREIGN KEY clauses (cascades, deferred self-FK) unless enabled per connection"""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_triggers(conn: Connection) -> None:
    """Create triggers that refresh "updatedAt" on any UPDATE, including raw SQL."""
    if conn.dialect.name == "postgresql":
        conn.exec_driver_sql(
            """
            CREATE OR REPLACE FUNCTION set_updated_at()
            RETURNS TRIGGER AS $$
            BEGIN
                NEW."updatedAt" = now() AT TIME ZONE 'utc';
                RETURN NEW;
            END;
            $$ LANGUAGE plpgsql;
            """
        )
        for table in UPDATED_AT_TABLES:
            conn.exec_driver_sql(f"DROP TRIGGER IF EXISTS trg_{table}_updated_at ON {table}")
            conn.exec_driver_sql(
                f"""
                CREATE TRIGGER trg_{table}_updated_at
                BEFORE UPDATE ON {table}
                FOR EACH ROW
                EXECUTE FUNCTION set_updated_at();
                """
            )
    elif conn.dialect.name == "sqlite":
        # SQLite cannot assign NEW in a BEFORE trigger; patch the row afterwards.
        # The WHEN guard skips updates that already set updatedAt (ORM onupdate).
        for table, pk in UPDATED_AT_TABLES.items():
            conn.exec_driver_sql(
                f"""
                CREATE TRIGGER IF NOT EXISTS trg_{table}_updated_at
                AFTER UPDATE ON {table}
                FOR EACH ROW
                WHEN NEW."updatedAt" = OLD."updatedAt"
                BEGIN
                    UPDATE {table}
                    SET "updatedAt" = strftime('%Y-%m-%d %H:%M:%S', 'now')
                    WHERE "{pk}" = NEW."{pk}";
                END;
                """
            )


def drop_triggers(conn: Connection) -> None:
    if conn.dialect.name == "postgresql":
        for table in UPDATED_AT_TABLES:
            conn.exec_driver_sql(f"DROP TRIGGER IF EXISTS trg_{table}_updated_at ON {table}")
        conn.exec_driver_sql("DROP FUNCTION IF EXISTS set_updated_at()")
    elif conn.dialect.name == "sqlite":
        for table in UPDATED_AT_TABLES:
            conn.exec_driver_sql(f"DROP TRIGGER IF EXISTS trg_{table}_updated_at")


def alembic_config(db_uri: Optional[str] = None) -> Config:
    """
    Alembic config for migrations/.

    db_uri overrides MIGRATION_DB_URI; it is handed over through attributes
    because ConfigParser would interpolate any % in the URL.
    """
    cfg = Config(ALEMBIC_INI_PATH)
    cfg.set_main_option("script_location", os.path.join(ROOT_PATH, "migrations"))
    cfg.attributes["configure_logger"] = False
    if db_uri is not None:
        cfg.attributes["db_uri"] = db_uri
    return cfg


def upgrade_schema(db_uri: Optional[str] = None, revision: str = "head") -> None:
    """Run Alembic migrations up to revision (sync driver URL)."""
    command.upgrade(alembic_config(db_uri), revision)


def downgrade_schema(db_uri: Optional[str] = None, revision: str = "base") -> None:
    command.downgrade(alembic_config(db_uri), revision)


async def create_schema(engine: AsyncEngine) -> None:
    """Create all tables, indexes and triggers straight from metadata (tests)."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
        await conn.run_sync(create_triggers)


async def drop_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
