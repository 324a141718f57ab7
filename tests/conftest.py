"""
Shared fixtures for LearnDeck tests
"""

import os
import tempfile

import pytest

from learndeck.config import Settings
from learndeck.core.database.database_manager import DatabaseManager
from tests.factories import NOW


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def settings():
    """Test settings"""
    return Settings(database_url="sqlite:///:memory:", log_level="DEBUG")


@pytest.fixture
def db_manager():
    """Database manager backed by a temporary SQLite file"""
    with tempfile.TemporaryDirectory() as temp_dir:
        db = DatabaseManager(os.path.join(temp_dir, "test.db"))
        db.init_database()
        yield db
