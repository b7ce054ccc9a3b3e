"""
FastAPI service for the GitHub CTC estimator.

Owns the process-wide collaborators: one MongoDB repository provider
(lazily connected), one background persistence queue and the analysis
pipeline. They live on app.state and reach the routes through
estimator_service.dependencies.
"""

import logging
from datetime import datetime, timezone

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.common.config import Config
from src.common.logger import setup_logging
from src.common.repositories import AnalysisRepositoryProvider
from src.services.analysis_pipeline import AnalysisPipeline
from src.services.analysis_store_service import AnalysisPersistenceQueue
from src.services.ctc_estimator import CTCEstimator
from src.services.github_profile_service import GitHubProfileService

from . import __version__
from .config import validate_config_on_startup
from .dependencies import get_repository_provider
from .models import HealthResponse
from .routes import analysis_router

settings = validate_config_on_startup()
setup_logging(level=settings.log_level, format=settings.log_format)
logger = logging.getLogger(__name__)

app = FastAPI(title="GitHub CTC Estimator", version=__version__)

if settings.cors_origins_list:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(analysis_router)

app.state.repository_provider = AnalysisRepositoryProvider()
app.state.persistence_queue = AnalysisPersistenceQueue(
    app.state.repository_provider,
    max_workers=settings.persistence_workers,
)
app.state.pipeline = AnalysisPipeline(
    github_service=GitHubProfileService(),
    estimator=CTCEstimator(),
    persistence=app.state.persistence_queue,
)


@app.get("/health", response_model=HealthResponse)
def health_check(
    provider: AnalysisRepositoryProvider = Depends(get_repository_provider),
) -> HealthResponse:
    """
    Health check endpoint for container orchestration.

    Reports configuration only; it does not open a MongoDB connection.
    """
    return HealthResponse(
        status="healthy",
        mongodb_configured=provider.enabled,
        gemini_configured=bool(Config.get_llm_api_key()),
        timestamp=datetime.now(timezone.utc),
    )


@app.on_event("shutdown")
def shutdown_persistence():
    """Flush queued saves, then release the MongoDB connection."""
    app.state.persistence_queue.shutdown(wait=True)
    app.state.repository_provider.close()
    logger.info("Persistence queue drained and MongoDB connection closed")
