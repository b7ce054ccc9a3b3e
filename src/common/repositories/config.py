"""
Repository Configuration and Provider

RepositoryConfig is loaded from the environment. AnalysisRepositoryProvider
is the single owner of the live repository: it connects lazily on first
use, caches the connected repository, and drops the cache on connection
errors so the next call reconnects. One provider is created per process
(by the FastAPI app or the CLI) and passed explicitly to the services.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from pymongo.errors import ConnectionFailure, PyMongoError

from src.common.config import Config
from src.common.error_handling import log_on_exception

from .atlas_repository import AtlasAnalysisRepository
from .base import AnalysisRepositoryInterface

logger = logging.getLogger(__name__)


@dataclass
class RepositoryConfig:
    """
    Configuration for repository initialization.

    mongodb_uri is optional: None means persistence is disabled, which is a
    supported deployment mode rather than an error.
    """
    mongodb_uri: Optional[str] = None
    database: str = "ctc_estimator"
    collection: str = "analyses"
    timeout_ms: int = 5000

    @property
    def enabled(self) -> bool:
        return bool(self.mongodb_uri)

    @classmethod
    def from_env(cls) -> "RepositoryConfig":
        """
        Load configuration from Config (environment / .env).

        Environment variables:
        - MONGODB_URI: connection string (unset = persistence disabled)
        - MONGO_DB_NAME: database name
        - MONGO_COLLECTION: collection name
        - MONGO_TIMEOUT_MS: server selection timeout
        """
        return cls(
            mongodb_uri=Config.MONGODB_URI or None,
            database=Config.MONGO_DB_NAME,
            collection=Config.MONGO_COLLECTION,
            timeout_ms=Config.MONGO_TIMEOUT_MS,
        )


class AnalysisRepositoryProvider:
    """
    Lazily connected, process-wide analysis repository.

    Lifecycle: init-once on first get(), reused afterwards, cleared by
    invalidate() after a connection error. Safe to share across threads:
    initialization is guarded by a lock and the pymongo client is thread-safe.
    """

    def __init__(self, config: Optional[RepositoryConfig] = None):
        self._config = config or RepositoryConfig.from_env()
        self._repository: Optional[AtlasAnalysisRepository] = None
        self._lock = threading.Lock()

    @property
    def config(self) -> RepositoryConfig:
        return self._config

    @property
    def enabled(self) -> bool:
        """Whether a store is configured at all."""
        return self._config.enabled

    def _create_repository(self) -> AtlasAnalysisRepository:
        return AtlasAnalysisRepository(
            mongodb_uri=self._config.mongodb_uri,
            database=self._config.database,
            collection=self._config.collection,
            timeout_ms=self._config.timeout_ms,
        )

    def get(self) -> Optional[AnalysisRepositoryInterface]:
        """
        Get the connected repository.

        Returns:
            The repository, or None when no MongoDB URI is configured

        Raises:
            pymongo.errors.PyMongoError: If connecting fails; nothing is cached
                so the next call tries again
        """
        if not self.enabled:
            return None

        with self._lock:
            if self._repository is None:
                repository = self._create_repository()
                try:
                    with log_on_exception(logger, "MongoDB connect", level=logging.ERROR):
                        repository.connect()
                        repository.ensure_indexes()
                except PyMongoError:
                    repository.close()
                    raise
                self._repository = repository
                logger.info("Initialized analysis repository")
            return self._repository

    def invalidate(self, error: Optional[Exception] = None) -> None:
        """
        Drop the cached repository after a connection-level error.

        Non-connection errors (e.g. a rejected document) leave the cache intact.
        """
        if error is not None and not isinstance(error, ConnectionFailure):
            return
        with self._lock:
            if self._repository is not None:
                self._repository.close()
                self._repository = None
                logger.warning("Analysis repository connection reset")

    def close(self) -> None:
        """Release the connection (application shutdown)."""
        with self._lock:
            if self._repository is not None:
                self._repository.close()
                self._repository = None
                logger.info("Analysis repository closed")
