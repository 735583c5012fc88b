"""App config via env vars, and the explicit per-store configuration"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings

from core.models import IdPolicy, RecordLayout


class Settings(BaseSettings):
    # Root of the git repository holding every store
    DATABASE_ADDRESS: str = "data"

    # Branch used by show_file when none is given
    DEFAULT_BRANCH: str = "master"

    GIT_BINARY: str = "git"
    COMMIT_AUTHOR_NAME: str = "record-store"
    COMMIT_AUTHOR_EMAIL: str = "record-store@localhost"

    ID_POLICY: IdPolicy = IdPolicy.count

    # Database name -> on-disk layout of its records
    STORES: dict[str, RecordLayout] = {
        "notes": RecordLayout.flat,
        "users": RecordLayout.flat,
        "clients": RecordLayout.flat,
        "repositories": RecordLayout.flat,
    }

    model_config = {"env_prefix": "", "case_sensitive": True, "env_file": ".env"}

    def store_config(self, database: str) -> StoreConfig:
        if database not in self.STORES:
            raise KeyError(database)
        return StoreConfig(
            database_address=Path(self.DATABASE_ADDRESS),
            database=database,
            layout=self.STORES[database],
            default_branch=self.DEFAULT_BRANCH,
            id_policy=self.ID_POLICY,
            git_binary=self.GIT_BINARY,
            author_name=self.COMMIT_AUTHOR_NAME,
            author_email=self.COMMIT_AUTHOR_EMAIL,
        )


class StoreConfig(BaseModel):
    """Everything a store needs, handed over at construction.

    The store never reads the environment or a config file on its own.
    """

    database_address: Path
    database: str
    layout: RecordLayout = RecordLayout.flat
    default_branch: str = "master"
    id_policy: IdPolicy = IdPolicy.count
    git_binary: str = "git"
    author_name: str = "record-store"
    author_email: str = "record-store@localhost"

    # bagit chdirs the whole process while packaging, so relative roots are unsafe
    @field_validator("database_address")
    @classmethod
    def absolute_address(cls, value: Path) -> Path:
        return value.expanduser().resolve()

    @property
    def store_root(self) -> Path:
        return self.database_address / self.database


settings = Settings()
