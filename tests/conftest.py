import pytest
from fastapi.testclient import TestClient

from wanderlust.app.core.config import settings
from wanderlust.app.core.db import init_db
from wanderlust.app.main import app


@pytest.fixture(autouse=True)
def test_settings(tmp_path, monkeypatch):
    """Run every test against a fresh database and upload directory."""
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "test.db"))
    monkeypatch.setattr(settings, "upload_dir", str(tmp_path / "uploads"))
    monkeypatch.setattr(settings, "cloud_name", "")
    monkeypatch.setattr(settings, "cloud_api_key", "")
    monkeypatch.setattr(settings, "cloud_api_secret", "")
    init_db()
    yield settings


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def other_client():
    """A second browser with its own cookie jar."""
    with TestClient(app) as c:
        yield c
