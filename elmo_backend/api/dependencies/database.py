from pathlib import Path

import sqlparse
from fastapi import Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Session
from structlog import get_logger

from elmo_backend.config import get_settings
from elmo_backend.models import Base

logger = get_logger(__name__)


async def async_create_schema(engine: AsyncEngine):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def vocabulary_statements(sql_path: Path) -> list[str]:
    """Split the seed script into statements, dropping comment-only chunks."""
    with open(sql_path, "r") as f:
        raw_sql = f.read()
    statements = (
        sqlparse.format(stmt, strip_comments=True).strip()
        for stmt in sqlparse.split(raw_sql)
    )
    return [stmt for stmt in statements if stmt]


async def async_init(db_session: async_sessionmaker, sql_path: Path):
    """Seed the controlled vocabularies; every insert skips existing rows."""
    statements = vocabulary_statements(sql_path)
    async with db_session() as db:
        for stmt in statements:
            await db.execute(text(stmt))
        await db.commit()
    logger.info("Seeded vocabularies", statements=len(statements))


def init(db: Session, sql_path: Path):
    for stmt in vocabulary_statements(sql_path):
        db.execute(text(stmt))
    db.commit()


async def get_db_session(settings=Depends(get_settings)) -> AsyncSession:
    """Get the database session then close it after the request is complete."""
    postgres_url = settings.SQLALCHEMY_DATABASE_URL
    engine = create_async_engine(postgres_url, echo=settings.DEBUG)
    AsyncSessionLocal = async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False
    )

    async with AsyncSessionLocal() as db_session:
        yield db_session
    await engine.dispose()
