"""
Analysis Store Service

Best-effort persistence of completed analyses.

- save_analysis(): one insert per analysis; returns a status dict and never raises
- get_analysis_history() / get_all_analyses(): filtered, sorted, limited reads
- AnalysisPersistenceQueue: fire-and-forget submission of saves to a
  background thread pool; the submitter gets no completion signal and
  failures are only logged

An unconfigured store is a supported mode: saves report
{"success": True, "skipped": True}.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from src.common.error_handling import safe_execute
from src.common.repositories import AnalysisRepositoryProvider
from src.common.types import AnalysisRecord, CTCEstimate, GitHubDataSnapshot, GitHubProfileData
from src.services.github_profile_service import compute_account_age

logger = logging.getLogger(__name__)

NOT_CONFIGURED_ERROR = "MongoDB not configured"
DEFAULT_HISTORY_LIMIT = 10
DEFAULT_RECENT_LIMIT = 100

# Fields copied verbatim from the caller's payload
RECORD_FIELDS = (
    "githubUsername",
    "githubUrl",
    "yearsOfExperience",
    "targetRole",
    "ctc",
    "message",
    "confidence",
    "githubData",
)


def build_github_data_snapshot(profile: GitHubProfileData, now: Optional[datetime] = None) -> GitHubDataSnapshot:
    """Stats subset stored with each analysis.

    Account age is measured at `now`, else at the profile's fetch time, so it
    agrees with recentActivity which was computed during the fetch.
    """
    user = profile.user
    stats = profile.stats
    now = now or profile.fetched_at
    return GitHubDataSnapshot(
        publicRepos=user.public_repos,
        followers=user.followers,
        following=user.following,
        totalStars=stats.total_stars,
        totalForks=stats.total_forks,
        languages=dict(stats.languages),
        recentActivity=stats.recent_activity,
        accountAge=compute_account_age(user.created_at, now=now) if user.created_at else "unknown",
        location=user.location,
        company=user.company,
    )


def build_analysis_payload(
    github_url: str,
    years_of_experience: str,
    target_role: str,
    profile: GitHubProfileData,
    estimate: CTCEstimate,
) -> Dict[str, Any]:
    """Denormalized request + result payload, in the shape save_analysis accepts."""
    return {
        "githubUsername": profile.user.login,
        "githubUrl": github_url,
        "yearsOfExperience": years_of_experience,
        "targetRole": target_role,
        "ctc": estimate.ctc,
        "message": estimate.message,
        "confidence": estimate.confidence,
        "githubData": build_github_data_snapshot(profile),
    }


def _to_record(params: Dict[str, Any], ip_address: Optional[str]) -> AnalysisRecord:
    missing = [name for name in RECORD_FIELDS[:-1] if params.get(name) in (None, "")]
    if missing:
        raise ValueError(f"Missing required analysis fields: {', '.join(missing)}")

    now = datetime.now(timezone.utc)
    record: Dict[str, Any] = {name: params.get(name) for name in RECORD_FIELDS}
    record["githubData"] = dict(params.get("githubData") or {})
    record["createdAt"] = now
    record["updatedAt"] = now
    if ip_address:
        record["ipAddress"] = ip_address
    return record  # type: ignore[return-value]


def save_analysis(
    provider: AnalysisRepositoryProvider,
    params: Dict[str, Any],
    ip_address: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Store one analysis record.

    Args:
        provider: Owner of the repository connection
        params: Payload with the RECORD_FIELDS keys
        ip_address: Optional caller IP

    Returns:
        {"success": True, "skipped": True} when no store is configured,
        {"success": True, "id": "..."} on success,
        {"success": False, "error": "..."} on any failure
    """
    username = params.get("githubUsername")
    try:
        repository = provider.get()
        if repository is None:
            logger.debug("MongoDB not configured, skipping save")
            return {"success": True, "skipped": True}

        result = repository.insert_one(_to_record(params, ip_address))
        logger.info(f"Analysis saved for {username}: {result.inserted_id}")
        return {"success": True, "id": result.inserted_id}
    except Exception as e:
        provider.invalidate(e)
        logger.error(f"Error saving analysis for {username}: {e}")
        return {"success": False, "error": str(e)}


def get_analysis_history(
    provider: AnalysisRepositoryProvider,
    github_username: str,
    limit: int = DEFAULT_HISTORY_LIMIT,
) -> Dict[str, Any]:
    """Analyses for one handle, newest first."""
    try:
        repository = provider.get()
        if repository is None:
            return {"success": False, "error": NOT_CONFIGURED_ERROR}
        return {"success": True, "data": repository.find_by_username(github_username, limit=limit)}
    except Exception as e:
        provider.invalidate(e)
        logger.error(f"Error fetching analysis history for {github_username}: {e}")
        return {"success": False, "error": str(e)}


def get_all_analyses(
    provider: AnalysisRepositoryProvider,
    limit: int = DEFAULT_RECENT_LIMIT,
) -> Dict[str, Any]:
    """Most recent analyses across all handles, newest first."""
    try:
        repository = provider.get()
        if repository is None:
            return {"success": False, "error": NOT_CONFIGURED_ERROR}
        return {"success": True, "data": repository.find_recent(limit=limit)}
    except Exception as e:
        provider.invalidate(e)
        logger.error(f"Error fetching all analyses: {e}")
        return {"success": False, "error": str(e)}


class AnalysisPersistenceQueue:
    """
    Detached persistence.

    submit() hands the save to a small thread pool and returns immediately.
    There is no future or callback for the submitter: the outcome of the
    write is only ever visible in the logs.
    """

    def __init__(self, provider: AnalysisRepositoryProvider, max_workers: int = 2):
        self._provider = provider
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="mongo_")

    @property
    def provider(self) -> AnalysisRepositoryProvider:
        return self._provider

    def _run(self, params: Dict[str, Any], ip_address: Optional[str]) -> None:
        result = safe_execute(
            save_analysis,
            self._provider,
            params,
            ip_address=ip_address,
            operation_name="background analysis save",
            logger=logger,
            fallback={"success": False, "error": "unexpected failure"},
            critical=True,
        )
        if not result.get("success"):
            logger.warning(
                f"Background save failed for {params.get('githubUsername')}: {result.get('error')}"
            )

    def submit(self, params: Dict[str, Any], ip_address: Optional[str] = None) -> None:
        """Schedule a save; returns without waiting and never raises."""
        try:
            self._executor.submit(self._run, params, ip_address)
        except RuntimeError as e:
            # Executor already shut down
            logger.warning(f"Persistence queue unavailable, analysis not saved: {e}")

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; optionally wait for queued saves."""
        self._executor.shutdown(wait=wait)
