"""
Pytest fixtures for estimator service tests.
"""

import os
from unittest.mock import MagicMock

# IMPORTANT: Set environment variables BEFORE any imports from estimator_service
# so EstimatorSettings and Config are loaded without real credentials.
os.environ["ENVIRONMENT"] = "development"
os.environ["PERSISTENCE_WORKERS"] = "1"
os.environ.pop("MONGODB_URI", None)
os.environ.pop("GEMINI_API_KEY", None)

import pytest
from fastapi.testclient import TestClient

from src.common.repositories import AnalysisRepositoryProvider


@pytest.fixture
def fake_pipeline():
    """Pipeline double; tests set run.return_value / side_effect."""
    return MagicMock()


@pytest.fixture
def fake_repository():
    return MagicMock()


@pytest.fixture
def fake_provider(fake_repository):
    """Configured provider whose repository is a MagicMock."""
    provider = MagicMock(spec=AnalysisRepositoryProvider)
    provider.enabled = True
    provider.get.return_value = fake_repository
    return provider


@pytest.fixture
def client(fake_pipeline, fake_provider):
    """
    FastAPI test client with app.state collaborators replaced.

    Not used as a context manager, so the shutdown hook (which drains the
    real persistence queue) does not run between tests.
    """
    from estimator_service.app import app
    from estimator_service.dependencies import get_pipeline, get_repository_provider

    app.dependency_overrides[get_pipeline] = lambda: fake_pipeline
    app.dependency_overrides[get_repository_provider] = lambda: fake_provider
    yield TestClient(app)
    app.dependency_overrides.clear()
