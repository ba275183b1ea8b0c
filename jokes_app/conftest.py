"""Shared test configuration — must run before the app modules are imported."""

import os
import tempfile

import pytest

# Point the DB at a temp file so tests don't touch real data
_test_db = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
_test_db.close()

os.environ["JOKES_DB_PATH"] = _test_db.name
os.environ["JOKES_SEED_DATA"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-unit-tests-1234567890")


@pytest.fixture(autouse=True)
def _clean_db():
    """Wipe all tables between tests."""
    from jokes_app import database

    # TestClient without a context manager doesn't run the lifespan
    database.init_db()
    db = database.get_session()
    db.query(database.DBJoke).delete()
    db.query(database.DBUser).delete()
    db.commit()
    db.close()
    yield
