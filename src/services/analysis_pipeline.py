"""
Analysis Pipeline

One analysis is a strictly sequential chain:

    URL -> handle -> GitHub profile + repos -> CTC estimate -> detached save

Input and profile errors stop the chain and are raised as
CTCEstimatorError subclasses carrying a user-facing message. Estimation
never fails (fallback estimates). Persistence is submitted to the
persistence queue after the estimate exists and is never awaited.
"""

import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional

from src.common.error_handling import (
    InvalidAnalysisInputError,
    InvalidProfileUrlError,
    ProfileUnavailableError,
)
from src.common.logger import get_logger
from src.common.types import CTCEstimate, GitHubProfileData
from src.services.analysis_store_service import (
    AnalysisPersistenceQueue,
    build_analysis_payload,
)
from src.services.ctc_estimator import CTCEstimator
from src.services.github_profile_service import GitHubProfileService, extract_username_from_url


@dataclass(frozen=True)
class AnalysisOutcome:
    """What the caller gets back from one analysis."""
    run_id: str
    username: str
    profile: GitHubProfileData
    estimate: CTCEstimate
    record: Dict[str, Any]


class AnalysisPipeline:
    """Wires the profile fetcher, the estimator and the persistence queue together."""

    def __init__(
        self,
        github_service: GitHubProfileService,
        estimator: CTCEstimator,
        persistence: Optional[AnalysisPersistenceQueue] = None,
    ):
        self._github = github_service
        self._estimator = estimator
        self._persistence = persistence

    def analyze(
        self,
        github_url: str,
        years_of_experience: str,
        target_role: str,
    ) -> AnalysisOutcome:
        """
        Run fetch and estimate; do not persist.

        Raises:
            InvalidAnalysisInputError: experience or role missing
            InvalidProfileUrlError: URL is not a github.com profile URL
            ProfileUnavailableError: GitHub fetch failed
        """
        run_id = uuid.uuid4().hex
        log = get_logger(__name__, run_id=run_id, stage="analysis")

        if not (years_of_experience or "").strip() or not (target_role or "").strip():
            raise InvalidAnalysisInputError()

        username = extract_username_from_url(github_url)
        if not username:
            log.warning(f"Rejected non-GitHub URL: {github_url!r}")
            raise InvalidProfileUrlError()

        profile = self._github.fetch_profile(username)
        if profile is None:
            log.warning(f"Profile unavailable: {username}")
            raise ProfileUnavailableError()

        estimate = self._estimator.estimate(profile, years_of_experience, target_role)
        log.info(f"Analysis complete for {username} (source={estimate.source})")

        record = build_analysis_payload(
            github_url=github_url,
            years_of_experience=years_of_experience,
            target_role=target_role,
            profile=profile,
            estimate=estimate,
        )
        return AnalysisOutcome(
            run_id=run_id,
            username=username,
            profile=profile,
            estimate=estimate,
            record=record,
        )

    def run(
        self,
        github_url: str,
        years_of_experience: str,
        target_role: str,
        ip_address: Optional[str] = None,
    ) -> AnalysisOutcome:
        """
        analyze(), then submit the record to the persistence queue (if any).

        The submission is fire-and-forget; the outcome is returned without
        waiting for, or knowing about, the save.
        """
        outcome = self.analyze(github_url, years_of_experience, target_role)
        if self._persistence is not None:
            self._persistence.submit(outcome.record, ip_address=ip_address)
        return outcome
