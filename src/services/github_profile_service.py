"""
GitHub Profile Service

Fetches a user's public profile and owned repositories from the GitHub REST
API and derives the aggregate statistics the CTC estimator works from.

API: https://docs.github.com/en/rest/users/users
Two sequential calls per profile, no pagination beyond the first 100
repositories, no retries, no caching. Any failure collapses to None.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlparse

import requests
from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

from src.common.config import Config
from src.common.types import (
    AggregateStats,
    GitHubProfileData,
    ProfileSnapshot,
    RepositorySummary,
)

logger = logging.getLogger(__name__)

GITHUB_HOST = "github.com"
USER_ENDPOINT_TEMPLATE = "/users/{username}"
USER_REPOS_ENDPOINT_TEMPLATE = "/users/{username}/repos"
RECENT_ACTIVITY_MONTHS = 6


def extract_username_from_url(url: str) -> Optional[str]:
    """
    Extract the GitHub handle from a profile URL.

    Only URLs whose host is exactly github.com are accepted; the handle is
    the first non-empty path segment. No further format validation is done,
    an invalid handle surfaces when the fetch fails.

    Args:
        url: e.g. "https://github.com/octocat" or "https://github.com/octocat/hello-world"

    Returns:
        The handle, or None if the URL is unparsable, on another host, or has no path
    """
    if not url or not isinstance(url, str):
        return None
    try:
        parsed = urlparse(url.strip())
        hostname = parsed.hostname
    except ValueError:
        return None

    if hostname != GITHUB_HOST:
        return None

    segments = [segment for segment in parsed.path.split("/") if segment]
    return segments[0] if segments else None


def _parse_timestamp(value: str) -> datetime:
    """Parse a GitHub ISO-8601 timestamp into an aware datetime."""
    parsed = isoparse(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def compute_aggregate_stats(
    repos: Iterable[RepositorySummary],
    now: Optional[datetime] = None,
) -> AggregateStats:
    """
    Aggregate stars, forks, language sizes and recent activity in one pass.

    Repositories without a language contribute to no language bucket.
    "Recent" means updated after now minus six calendar months.

    Args:
        repos: Repository listing
        now: Reference time (defaults to current UTC time)

    Returns:
        AggregateStats; all zeros and no languages for an empty listing
    """
    reference = now or datetime.now(timezone.utc)
    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=timezone.utc)
    cutoff = reference - relativedelta(months=RECENT_ACTIVITY_MONTHS)

    total_stars = 0
    total_forks = 0
    languages: Dict[str, int] = {}
    recent_activity = 0

    for repo in repos:
        total_stars += repo.stargazers_count
        total_forks += repo.forks_count
        if repo.language:
            languages[repo.language] = languages.get(repo.language, 0) + repo.size
        if repo.updated_at and _parse_timestamp(repo.updated_at) > cutoff:
            recent_activity += 1

    return AggregateStats(
        total_stars=total_stars,
        total_forks=total_forks,
        languages=languages,
        recent_activity=recent_activity,
    )


def compute_account_age(created_at: str, now: Optional[datetime] = None) -> str:
    """
    Human readable account age, e.g. "3 years", "7 months".

    Args:
        created_at: ISO-8601 account creation timestamp
        now: Reference time (defaults to current UTC time)
    """
    reference = now or datetime.now(timezone.utc)
    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=timezone.utc)
    delta = relativedelta(reference, _parse_timestamp(created_at))

    if delta.years > 0:
        return f"{delta.years} year{'s' if delta.years != 1 else ''}"
    if delta.months > 0:
        return f"{delta.months} month{'s' if delta.months != 1 else ''}"
    return "less than a month"


def account_age_years(created_at: str, now: Optional[datetime] = None) -> int:
    """Whole years since the account was created."""
    reference = now or datetime.now(timezone.utc)
    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=timezone.utc)
    return max(relativedelta(reference, _parse_timestamp(created_at)).years, 0)


class GitHubProfileService:
    """Read-only client for the two GitHub endpoints the estimator needs."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self._session = session or requests.Session()
        self._base_url = (base_url or Config.GITHUB_API_BASE_URL).rstrip("/")
        self._token = token if token is not None else Config.get_github_token()
        self._timeout = timeout if timeout is not None else Config.GITHUB_TIMEOUT_SECONDS

    def headers(self) -> Dict[str, str]:
        """Request headers; auth only when a token is configured."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": Config.GITHUB_API_VERSION,
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = self._session.get(
            f"{self._base_url}{path}",
            params=params,
            headers=self.headers(),
            timeout=self._timeout,
        )
        response.raise_for_status()
        return response.json()

    def fetch_user(self, username: str) -> ProfileSnapshot:
        """Fetch and normalize the user record. Raises on any HTTP error."""
        data = self._get_json(USER_ENDPOINT_TEMPLATE.format(username=username))
        return ProfileSnapshot(
            login=data["login"],
            name=data.get("name"),
            bio=data.get("bio"),
            public_repos=data.get("public_repos") or 0,
            followers=data.get("followers") or 0,
            following=data.get("following") or 0,
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
            location=data.get("location"),
            company=data.get("company"),
        )

    def fetch_repos(self, username: str) -> List[RepositorySummary]:
        """Fetch up to 100 owned repositories, most recently updated first."""
        data = self._get_json(
            USER_REPOS_ENDPOINT_TEMPLATE.format(username=username),
            params={
                "type": "owner",
                "sort": "updated",
                "per_page": Config.GITHUB_REPOS_PER_PAGE,
            },
        )
        if not isinstance(data, list):
            raise ValueError(f"Unexpected repository listing payload: {type(data).__name__}")

        return [
            RepositorySummary(
                name=repo["name"],
                description=repo.get("description"),
                language=repo.get("language"),
                stargazers_count=repo.get("stargazers_count") or 0,
                forks_count=repo.get("forks_count") or 0,
                size=repo.get("size") or 0,
                created_at=repo.get("created_at", ""),
                updated_at=repo.get("updated_at", ""),
            )
            for repo in data
        ]

    def fetch_profile(
        self,
        username: str,
        now: Optional[datetime] = None,
    ) -> Optional[GitHubProfileData]:
        """
        Fetch profile, repositories and aggregate stats for a handle.

        Args:
            username: GitHub handle
            now: Reference time for the recent-activity window

        Returns:
            GitHubProfileData, or None on any failure (not found, rate limit,
            network error, malformed payload). No partial results.
        """
        logger.info(f"Fetching GitHub profile: {username}")
        try:
            user = self.fetch_user(username)
            repos = self.fetch_repos(username)
            stats = compute_aggregate_stats(repos, now=now)
        except requests.exceptions.Timeout:
            logger.error(f"GitHub API request timed out for {username}")
            return None
        except requests.exceptions.RequestException as e:
            logger.error(f"Error fetching GitHub profile {username}: {e}")
            return None
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Malformed GitHub response for {username}: {e}")
            return None

        logger.info(
            f"Fetched {username}: {len(repos)} repos, {stats.total_stars} stars, "
            f"{len(stats.languages)} languages, {stats.recent_activity} recently active"
        )
        return GitHubProfileData(
            user=user,
            repos=repos,
            stats=stats,
            fetched_at=now or datetime.now(timezone.utc),
        )
