"""
Services for the GitHub CTC estimator.

- GitHubProfileService: fetch a profile and its repositories, aggregate stats
- CTCEstimator: prompt Gemini and parse the estimate, with fixed fallbacks
- analysis_store_service: save and query analyses in MongoDB
- AnalysisPipeline: validate, fetch, estimate, hand off the save
"""

from src.services.github_profile_service import (
    GitHubProfileService,
    compute_aggregate_stats,
    extract_username_from_url,
)
from src.services.ctc_estimator import (
    PARSE_FAILURE_ESTIMATE,
    UPSTREAM_FAILURE_ESTIMATE,
    CTCEstimator,
    parse_ctc_response,
)
from src.services.analysis_store_service import (
    AnalysisPersistenceQueue,
    get_all_analyses,
    get_analysis_history,
    save_analysis,
)
from src.services.analysis_pipeline import AnalysisOutcome, AnalysisPipeline

__all__ = [
    # GitHub
    "GitHubProfileService",
    "compute_aggregate_stats",
    "extract_username_from_url",
    # Estimation
    "CTCEstimator",
    "parse_ctc_response",
    "PARSE_FAILURE_ESTIMATE",
    "UPSTREAM_FAILURE_ESTIMATE",
    # Persistence
    "AnalysisPersistenceQueue",
    "save_analysis",
    "get_analysis_history",
    "get_all_analyses",
    # Orchestration
    "AnalysisPipeline",
    "AnalysisOutcome",
]
