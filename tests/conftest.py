"""Shared fixtures.

Environment variables are set before any ``image_api`` module is imported,
because settings and the database engine are created at import time.
"""

import io
import os
import shutil
import tempfile
from pathlib import Path

import pytest
import pytest_asyncio
from PIL import Image as PILImage

TEST_ROOT = Path(tempfile.mkdtemp(prefix="image-api-tests-"))
TEST_DB_PATH = TEST_ROOT / "test.db"
TEST_STORAGE_ROOT = TEST_ROOT / "storage"
API_KEY = "test-secret"
AUTH_HEADERS = {"x-api-token": API_KEY}

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["STORAGE_ROOT"] = str(TEST_STORAGE_ROOT)
os.environ["API_KEY"] = API_KEY
os.environ["API_KEY_HEADER_NAME"] = "x-api-token"
os.environ["API_PREFIX"] = ""

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

import image_api.models  # noqa: E402,F401  registers the images table
from image_api.database import Base  # noqa: E402
from image_api.storage import FileStorage  # noqa: E402


def make_image_bytes(image_format: str = "JPEG", size: tuple[int, int] = (8, 8)) -> bytes:
    """Render a small solid-colour image in the given Pillow format."""
    buffer = io.BytesIO()
    PILImage.new("RGB", size, color=(200, 120, 40)).save(buffer, format=image_format)
    return buffer.getvalue()


def _reset_test_state() -> None:
    TEST_DB_PATH.unlink(missing_ok=True)
    shutil.rmtree(TEST_STORAGE_ROOT, ignore_errors=True)


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image_bytes("JPEG")


@pytest.fixture
def client():
    """Authenticated test client with a fresh database and storage root."""
    _reset_test_state()
    from image_api.main import app

    with TestClient(app, headers=AUTH_HEADERS) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    _reset_test_state()


@pytest.fixture
def anon_client(client):
    """Client sending no API key header, sharing the running app."""
    return TestClient(client.app)


@pytest.fixture
def blob_storage() -> FileStorage:
    return FileStorage(TEST_STORAGE_ROOT)


@pytest.fixture
def storage(tmp_path) -> FileStorage:
    """Blob storage in an isolated temporary directory."""
    file_storage = FileStorage(tmp_path / "public")
    file_storage.ensure_root()
    return file_storage


@pytest_asyncio.fixture(scope="function")
async def db_session(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'service.db'}",
        echo=False,
        poolclass=NullPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()
