"""
Global fixtures for all unit tests.

This conftest provides autouse fixtures that prevent real external service calls:
- MongoDB connection attempts (serverSelectionTimeoutMS would stall each test)
- Configuration isolation (no real Gemini key, Mongo URI or GitHub token)

These fixtures apply automatically to ALL tests in tests/unit/.
"""

import os
import pytest
from unittest.mock import patch, MagicMock

# Set test environment BEFORE any imports so Config never sees real values
os.environ["ENVIRONMENT"] = "development"
os.environ.pop("MONGODB_URI", None)
os.environ.pop("GEMINI_API_KEY", None)

from src.common.config import Config
from src.common.types import GitHubProfileData
from tests.helpers.github_fixtures import make_profile


@pytest.fixture(autouse=True)
def mock_mongodb():
    """
    Prevent MongoDB connection attempts in all unit tests.

    The repository imports MongoClient by name, so the patch targets the
    atlas_repository module. Tests that exercise the repository configure
    the returned mock.
    """
    with patch("src.common.repositories.atlas_repository.MongoClient") as mock_client:
        mock_instance = MagicMock()
        mock_db = MagicMock()
        mock_collection = MagicMock()

        # Setup chain: client["db"]["collection"]
        mock_instance.__getitem__ = MagicMock(return_value=mock_db)
        mock_db.__getitem__ = MagicMock(return_value=mock_collection)
        mock_collection.find = MagicMock(return_value=[])

        mock_client.return_value = mock_instance
        yield mock_client


@pytest.fixture(autouse=True)
def isolate_config():
    """
    Isolate tests from real credentials.

    Config reads the environment once at import time, so the class
    attributes are patched directly rather than the environment.
    """
    with patch.object(Config, "MONGODB_URI", ""), \
         patch.object(Config, "GEMINI_API_KEY", ""), \
         patch.object(Config, "GITHUB_TOKEN", ""):
        yield


@pytest.fixture
def sample_profile() -> GitHubProfileData:
    """A small but realistic fetched profile."""
    return make_profile()
