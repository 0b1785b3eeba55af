"""
pytest fixtures shared by the whole suite.
"""

import io
import os
import shutil
import tempfile
import uuid
from pathlib import Path

# Settings are read once at import time, so the environment must be in
# place before anything under `app` is imported.
TEST_UPLOAD_DIR = tempfile.mkdtemp(prefix="shop-uploads-")
os.environ["SECRET_KEY"] = "test-secret-key-for-testing"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = TEST_UPLOAD_DIR

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from PIL import Image  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from app.core.security import create_access_token  # noqa: E402
from app.database import enable_sqlite_foreign_keys, get_session  # noqa: E402
from app.main import app  # noqa: E402
from app.models.user import User  # noqa: E402


def make_image(
    width: int = 100,
    height: int = 80,
    fmt: str = "JPEG",
    color: tuple[int, int, int] = (200, 30, 30),
) -> bytes:
    """Encode a solid-colour test image."""
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format=fmt)
    return buf.getvalue()


def make_token(is_admin: bool, user_id: uuid.UUID | None = None) -> str:
    user = User(id=user_id or uuid.uuid4(), is_admin=is_admin)
    return create_access_token(user)


@pytest.fixture(scope="session")
def upload_dir() -> Path:
    yield Path(TEST_UPLOAD_DIR)
    shutil.rmtree(TEST_UPLOAD_DIR, ignore_errors=True)


@pytest.fixture(autouse=True)
def clean_uploads(upload_dir):
    """Each test starts with an empty uploads directory."""
    for child in upload_dir.iterdir():
        if child.is_file():
            child.unlink()
    yield


@pytest.fixture(scope="function")
def test_db() -> Session:
    """
    In-memory SQLite session with foreign keys enforced; a fresh schema
    per test.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", enable_sqlite_foreign_keys)
    SQLModel.metadata.create_all(engine)

    with Session(engine) as session:
        yield session

    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def client(test_db):
    """TestClient wired to the per-test database."""

    def override_get_session():
        yield test_db

    app.dependency_overrides[get_session] = override_get_session

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(is_admin=True)}"}


@pytest.fixture
def user_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(is_admin=False)}"}


@pytest.fixture
def category(client, admin_headers) -> dict:
    response = client.post(
        "/api/v1/categories",
        json={"name": "Shoes", "icon": "shoe", "color": "#333333"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def product(client, admin_headers, category) -> dict:
    response = client.post(
        "/api/v1/products",
        data={
            "name": "Runner",
            "price": "49.99",
            "countInStock": "10",
            "category": category["id"],
        },
        files={"image": ("runner.jpg", make_image(), "image/jpeg")},
        headers=admin_headers,
    )
    assert response.status_code == 200, response.text
    return response.json()
