"""Fixtures for multi-threaded tests against a file-backed SQLite database.

These tests need real commits visible across connections, so they do not
use the SAVEPOINT session from the top-level conftest.
"""

from __future__ import annotations

import pytest

from plantbook.core.config import TestingConfig
from plantbook.core.extensions import db as _db
from plantbook.factory import create_app


@pytest.fixture(autouse=True)
def _factories_session():
    """Factories are not used here; override the transactional wiring."""
    yield


@pytest.fixture()
def file_app(tmp_path):
    class _FileConfig(TestingConfig):
        JWT_ACCESS_SECRET = "test-access-secret"
        JWT_REFRESH_SECRET = "test-refresh-secret"
        LOG_LEVEL = "WARNING"
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'concurrency.db'}"
        SQLALCHEMY_ENGINE_OPTIONS = {"connect_args": {"timeout": 30}}
        UPLOAD_FOLDER = str(tmp_path / "uploads")

    app = create_app(_FileConfig)
    with app.app_context():
        _db.create_all()
    yield app
    with app.app_context():
        _db.session.remove()
        _db.drop_all()
        _db.engine.dispose()
