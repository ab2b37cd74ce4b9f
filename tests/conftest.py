import shutil
from pathlib import Path
from typing import Optional
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.engine import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from testcontainers.postgres import PostgresContainer

import elmo_backend
from elmo_backend.api.dependencies.database import init
from elmo_backend.config import Settings, get_settings
from elmo_backend.main import app
from elmo_backend.models import Base
from elmo_backend.persistence.resource import save_resource_information_and_rights

VOCABULARIES_SQL = (
    Path(elmo_backend.__file__).parent / "api" / "dependencies" / "vocabularies.sql"
)


@pytest.fixture
def client():
    client = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
    return client


def docker_available():
    available = shutil.which("docker")
    return available


def pytest_collection_modifyitems(session, config, items):
    """Skip integration tests that rely on docker if docker is not available"""
    if not docker_available():
        skip_marker = pytest.mark.skip(
            reason="Unable to run integration tests: Docker is not available"
        )
        for item in items:
            if "mock_db_session" in item.fixturenames:
                item.add_marker(skip_marker)


@pytest.fixture(scope="session")
def pg_container() -> Optional[PostgresContainer]:
    if docker_available():
        with PostgresContainer("postgres:16", driver="asyncpg") as postgres:
            yield postgres
    else:
        yield None


@pytest.fixture(scope="session")
def db_url(pg_container) -> str:
    if pg_container:
        return pg_container.get_connection_url()
    else:
        return "No database available."


@pytest.fixture
def _sync_engine(mock_settings):
    url = mock_settings.SQLALCHEMY_DATABASE_URL
    if "postgres" not in url:
        raise ValueError(
            f"Can only run integration tests against postgres, got: {url} "
            'Try `pytest -m "not integration"`'
        )
    sync_url = url.replace("asyncpg", "psycopg2")
    engine = create_engine(sync_url)
    yield engine
    engine.dispose()


@pytest.fixture
def mock_db_session(
    mock_settings,
    override_get_settings_dependency,
    _sync_engine,
):
    """Provide a freshly created and seeded database to the test.

    override_get_settings_dependency gives get_db_session the url of the database
    so routes that need the database will automatically be given the url of the test db.
    """
    Base.metadata.create_all(_sync_engine)
    with Session(_sync_engine) as db:
        init(db, Path(mock_settings.VOCABULARIES_SQL_PATH))

    yield

    Base.metadata.drop_all(_sync_engine)


@pytest_asyncio.fixture
async def db(mock_db_session, mock_settings):
    """An async session on the test database, as the routes get one."""
    engine = create_async_engine(mock_settings.SQLALCHEMY_DATABASE_URL)
    session_maker = async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_maker() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def override_get_settings_dependency(mock_settings):
    app.dependency_overrides[get_settings] = lambda: mock_settings
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def mock_settings(db_url):
    mock_settings = MagicMock(spec=Settings)
    mock_settings.DEBUG = False
    mock_settings.LOGLEVEL = "INFO"
    mock_settings.LOG_FORMAT = "logfmt"
    mock_settings.SQLALCHEMY_DATABASE_URL = db_url
    mock_settings.DB_INIT_SCHEMA = False
    mock_settings.VOCABULARIES_SQL_PATH = str(VOCABULARIES_SQL)
    mock_settings.SHOW_CONTRIBUTOR_PERSONS = True
    mock_settings.SHOW_CONTRIBUTOR_INSTITUTIONS = True
    mock_settings.SHOW_SPATIAL_TEMPORAL_COVERAGE = True
    mock_settings.SHOW_FUNDING_REFERENCE = True
    mock_settings.SHOW_GGMS_PROPERTIES = True
    return mock_settings


@pytest.fixture
def resource_form() -> dict:
    """Minimal valid resource information and rights group."""
    return {
        "doi": "",
        "year": "2024",
        "dateCreated": "2024-01-15",
        "dateEmbargo": "",
        "resourcetype": "5",
        "version": "1.0",
        "language": "1",
        "Rights": "1",
        "title": ["Gravity field model of Mars"],
        "titleType": ["1"],
    }


@pytest_asyncio.fixture
async def resource_id(db, resource_form) -> int:
    return await save_resource_information_and_rights(db, resource_form)
