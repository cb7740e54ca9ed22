import pytest
from fastapi.testclient import TestClient

from catalog import Catalog
from database import Store
from main import create_app
from planner import TargetPlanner
from settings import Settings


@pytest.fixture
def tmp_db_url(tmp_path):
    """Provide a temporary SQLite database URL for tests."""
    return f"sqlite:///{tmp_path / 'test_study_tracker.db'}"


@pytest.fixture
def store(tmp_db_url):
    store = Store(tmp_db_url)
    store.create_all()
    yield store
    store.dispose()


@pytest.fixture
def catalog(store):
    return Catalog(store)


@pytest.fixture
def planner(store, catalog):
    return TargetPlanner(store, catalog=catalog)


@pytest.fixture
def settings(tmp_db_url):
    return Settings(database_url=tmp_db_url)


@pytest.fixture
def client(settings):
    """Create test client backed by an isolated database."""
    with TestClient(create_app(settings)) as client:
        yield client
