from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from elmo_backend.api.dependencies.database import async_create_schema, async_init
from elmo_backend.api.routes import resources
from elmo_backend.config import get_settings
from elmo_backend.logging import configure_logging
from elmo_backend.middleware.logging import (
    ErrorHandlingMiddleware,
    LogProcessTimeMiddleware,
    LogRequestIdMiddleware,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.LOGLEVEL, settings.LOG_FORMAT)

    if settings.DB_INIT_SCHEMA:
        engine = create_async_engine(
            settings.SQLALCHEMY_DATABASE_URL, echo=settings.DEBUG
        )
        db_session = async_sessionmaker(
            bind=engine, class_=AsyncSession, expire_on_commit=False
        )
        await async_create_schema(engine)
        await async_init(db_session, Path(settings.VOCABULARIES_SQL_PATH))
        await engine.dispose()

    yield


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ErrorHandlingMiddleware)
app.add_middleware(LogProcessTimeMiddleware)
app.add_middleware(LogRequestIdMiddleware)

app.include_router(resources.router)
