import pytest
from fastapi.testclient import TestClient

from book_inventory_api.app.core.config import Settings
from book_inventory_api.app.core.db import ConnectionPool, init_db
from book_inventory_api.app.main import create_app
from book_inventory_api.app.services.book_service import BookService


@pytest.fixture
def db_file(tmp_path, request):
    # Unique database file per test
    return str(tmp_path / f"books_{request.node.name}.db")


@pytest.fixture
def app_settings(db_file):
    return Settings(database_url=db_file, database_pool_size=2, database_pool_timeout=1.0)


@pytest.fixture
def client(app_settings):
    app = create_app(app_settings)
    # Entering the context runs the lifespan, which opens the pool.
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def pool(db_file):
    pool = ConnectionPool(db_file, size=2, timeout=1.0)
    init_db(pool)
    yield pool
    pool.close()


@pytest.fixture
def service(pool):
    return BookService(pool)
