"""
Repository Pattern for MongoDB Operations

Provides an abstraction layer over the analyses collection.

Public API:
- AnalysisRepositoryProvider: owns the lazily connected repository
- AnalysisRepositoryInterface: abstract interface for the analyses collection
- RepositoryConfig: connection settings loaded from the environment
- WriteResult: result dataclass for inserts

Usage:
    from src.common.repositories import AnalysisRepositoryProvider

    provider = AnalysisRepositoryProvider()
    repo = provider.get()          # None when MONGODB_URI is unset
    if repo is not None:
        repo.find_by_username("octocat", limit=10)
"""

from .base import AnalysisRepositoryInterface, WriteResult
from .atlas_repository import AtlasAnalysisRepository
from .config import AnalysisRepositoryProvider, RepositoryConfig

__all__ = [
    "AnalysisRepositoryInterface",
    "AnalysisRepositoryProvider",
    "AtlasAnalysisRepository",
    "RepositoryConfig",
    "WriteResult",
]
