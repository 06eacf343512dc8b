import pytest
from fastapi.testclient import TestClient

from lecturer_api.app.core.config import Settings
from lecturer_api.app.core.security import create_access_token
from lecturer_api.app.core.store import KeyValueStore
from lecturer_api.app.main import create_app
from lecturer_api.app.services.catalog_service import CatalogService
from lecturer_api.app.services.lecturer_service import LecturerService

DEFAULT_COURSES = ["ENG 101-1", "ENG 101-2", "MATH 101-1", "MATH 101-2"]
SECRET = "test-secret"


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "lecturers.db")


@pytest.fixture
def store(db_path):
    """Initialised key-value store on a fresh database file."""
    kv = KeyValueStore(db_path, timeout=1.0)
    kv.initialize()
    return kv


@pytest.fixture
def broken_store(tmp_path):
    """Store pointing into a directory that does not exist."""
    return KeyValueStore(str(tmp_path / "missing" / "lecturers.db"), timeout=0.1)


@pytest.fixture
def catalog(store):
    return CatalogService(store, DEFAULT_COURSES)


@pytest.fixture
def lecturers(store):
    return LecturerService(store)


@pytest.fixture
def settings(db_path):
    return Settings(
        database_url=db_path,
        secret_key=SECRET,
        default_courses=",".join(DEFAULT_COURSES),
        store_timeout=1.0,
    )


@pytest.fixture
def client(settings):
    """Test client with startup (schema creation and seeding) applied."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    """Build an Authorization header for a caller id."""

    def _headers(uid):
        token = create_access_token({"sub": uid}, secret_key=SECRET)
        return {"Authorization": f"Bearer {token}"}

    return _headers
