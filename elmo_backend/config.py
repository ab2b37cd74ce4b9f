from functools import lru_cache
from typing import Literal

from dotenv import find_dotenv, load_dotenv
from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

# read from .env if it exists (local development only)
_dotenv_path = find_dotenv()
load_dotenv(str(_dotenv_path), override=False)


class Settings(BaseSettings):
    # echo SQL statements
    DEBUG: bool = False
    LOGLEVEL: str = "INFO"
    LOG_FORMAT: Literal["logfmt", "json", "console"] = "logfmt"

    DB_USERNAME: str
    DB_PASSWORD: str
    DB_ENDPOINT: str
    DB_NAME: str = "elmo"

    # create tables and seed vocabularies on startup
    DB_INIT_SCHEMA: bool = True
    VOCABULARIES_SQL_PATH: str = "elmo_backend/api/dependencies/vocabularies.sql"

    # optional form groups, mirrors the feature toggles of the web form
    SHOW_CONTRIBUTOR_PERSONS: bool = True
    SHOW_CONTRIBUTOR_INSTITUTIONS: bool = True
    SHOW_SPATIAL_TEMPORAL_COVERAGE: bool = True
    SHOW_FUNDING_REFERENCE: bool = True
    SHOW_GGMS_PROPERTIES: bool = True

    @computed_field
    @property
    def SQLALCHEMY_DATABASE_URL(self) -> str:
        return f"postgresql+asyncpg://{self.DB_USERNAME}:{self.DB_PASSWORD}@{self.DB_ENDPOINT}/{self.DB_NAME}"

    model_config = SettingsConfigDict(env_file=_dotenv_path, case_sensitive=True)


# for use as dependency with `Depends(get_settings)`
@lru_cache()
def get_settings() -> Settings:
    return Settings()
