"""Shared fixtures for the task conversation test suite.

Settings are read once at import time, so the environment is pointed at a
throw-away SQLite database and upload directory before any application module
is imported.
"""
import os
import shutil
import tempfile
from pathlib import Path

_TEST_ROOT = Path(tempfile.mkdtemp(prefix="ivy-tests-"))
_DB_PATH = _TEST_ROOT / "ivy.db"
_UPLOAD_ROOT = _TEST_ROOT / "uploads"

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ["AUTO_CREATE_SCHEMA"] = "true"
os.environ["UPLOAD_ROOT"] = str(_UPLOAD_ROOT)
os.environ["MAX_UPLOAD_BYTES"] = str(10 * 1024 * 1024)

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from api.shared.entities.registry import BaseEntity  # noqa: E402
from infra.resources import LocalStorageResource  # noqa: E402


@pytest.fixture(autouse=True)
def clean_state():
    """Recreate the schema and empty the upload directory around every test."""
    engine = create_engine(f"sqlite:///{_DB_PATH}")
    BaseEntity.metadata.drop_all(engine)
    BaseEntity.metadata.create_all(engine)
    engine.dispose()
    shutil.rmtree(_UPLOAD_ROOT, ignore_errors=True)
    _UPLOAD_ROOT.mkdir(parents=True, exist_ok=True)
    yield


@pytest.fixture
def upload_root() -> Path:
    return _UPLOAD_ROOT


@pytest.fixture
def storage(upload_root) -> LocalStorageResource:
    return LocalStorageResource(root_dir=str(upload_root), url_prefix="/uploads")


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(f"sqlite+aiosqlite:///{_DB_PATH}")
    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    yield factory
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session
