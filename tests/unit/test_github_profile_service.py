"""
Unit tests for src/services/github_profile_service.py

Covers URL handle extraction, single-pass aggregation, account age and the
two-call fetch with its collapse-to-None failure behavior. The HTTP session
is a MagicMock; no network access.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
import requests

from src.services.github_profile_service import (
    GitHubProfileService,
    account_age_years,
    compute_account_age,
    compute_aggregate_stats,
    extract_username_from_url,
)
from tests.helpers.github_fixtures import make_repo

NOW = datetime(2024, 7, 1, tzinfo=timezone.utc)


# ===== FIXTURES =====

def _response(payload, status_error=None):
    response = MagicMock()
    response.json.return_value = payload
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    return response


USER_PAYLOAD = {
    "login": "octocat",
    "name": "The Octocat",
    "bio": None,
    "public_repos": 2,
    "followers": 10,
    "following": 1,
    "created_at": "2015-03-01T00:00:00Z",
    "updated_at": "2024-06-01T00:00:00Z",
    "location": "Pune",
    "company": None,
}

REPOS_PAYLOAD = [
    {
        "name": "api",
        "description": "REST API",
        "language": "Python",
        "stargazers_count": 5,
        "forks_count": 1,
        "size": 300,
        "created_at": "2020-01-01T00:00:00Z",
        "updated_at": "2024-06-15T00:00:00Z",
    },
    {
        "name": "dotfiles",
        "description": None,
        "language": None,
        "stargazers_count": 2,
        "forks_count": 0,
        "size": 10,
        "created_at": "2019-01-01T00:00:00Z",
        "updated_at": "2021-01-01T00:00:00Z",
    },
]


@pytest.fixture
def session():
    """Session whose first get returns the user and second the repos."""
    mock_session = MagicMock()
    mock_session.get.side_effect = [_response(USER_PAYLOAD), _response(REPOS_PAYLOAD)]
    return mock_session


@pytest.fixture
def service(session):
    return GitHubProfileService(session=session, base_url="https://api.github.com", token="")


# ===== TESTS: Handle Extraction =====

class TestExtractUsernameFromUrl:
    """Only github.com URLs yield a handle."""

    @pytest.mark.parametrize("url,expected", [
        ("https://github.com/octocat", "octocat"),
        ("https://github.com/octocat/", "octocat"),
        ("https://github.com/octocat/hello-world", "octocat"),
        ("http://github.com/octocat?tab=repositories", "octocat"),
        ("  https://github.com/octocat  ", "octocat"),
    ])
    def test_accepts_github_profile_urls(self, url, expected):
        """First path segment is the handle."""
        assert extract_username_from_url(url) == expected

    @pytest.mark.parametrize("url", [
        "https://gitlab.com/octocat",
        "https://www.github.com/octocat",
        "https://github.com.evil.io/octocat",
        "https://gist.github.com/octocat",
    ])
    def test_rejects_other_hosts(self, url):
        """Host must be exactly github.com."""
        assert extract_username_from_url(url) is None

    @pytest.mark.parametrize("url", ["", "not a url", "https://github.com", "https://github.com/"])
    def test_rejects_unparsable_or_empty_path(self, url):
        """No host or no path segment means no handle."""
        assert extract_username_from_url(url) is None

    def test_rejects_non_string(self):
        """None is not a URL."""
        assert extract_username_from_url(None) is None


# ===== TESTS: Aggregation =====

class TestComputeAggregateStats:
    """Single-pass totals over the repository listing."""

    def test_empty_listing_is_all_zero(self):
        """No repos -> zeros and no languages."""
        stats = compute_aggregate_stats([], now=NOW)
        assert stats.total_stars == 0
        assert stats.total_forks == 0
        assert stats.languages == {}
        assert stats.recent_activity == 0

    def test_totals_equal_sums(self):
        """Stars and forks are plain sums."""
        repos = [make_repo(stars=3, forks=1), make_repo(stars=7, forks=4), make_repo(stars=0)]
        stats = compute_aggregate_stats(repos, now=NOW)
        assert stats.total_stars == 10
        assert stats.total_forks == 5

    def test_languages_accumulate_size(self):
        """Language buckets sum repository sizes."""
        repos = [
            make_repo(language="Python", size=100),
            make_repo(language="Go", size=40),
            make_repo(language="Python", size=25),
        ]
        stats = compute_aggregate_stats(repos, now=NOW)
        assert stats.languages == {"Python": 125, "Go": 40}

    def test_null_language_contributes_no_bucket(self):
        """Repos without a language are skipped for languages only."""
        repos = [make_repo(language=None, size=500, stars=2)]
        stats = compute_aggregate_stats(repos, now=NOW)
        assert stats.languages == {}
        assert stats.total_stars == 2

    def test_recent_activity_uses_six_month_window(self):
        """Updated strictly after now minus six calendar months counts."""
        repos = [
            make_repo(updated_at="2024-06-15T00:00:00Z"),
            make_repo(updated_at="2024-01-01T00:00:01Z"),
            make_repo(updated_at="2024-01-01T00:00:00Z"),  # exactly on the cutoff
            make_repo(updated_at="2023-12-31T23:59:59Z"),
        ]
        stats = compute_aggregate_stats(repos, now=NOW)
        assert stats.recent_activity == 2

    def test_naive_reference_time_is_treated_as_utc(self):
        """A naive now does not break the comparison."""
        repos = [make_repo(updated_at="2024-06-15T00:00:00Z")]
        stats = compute_aggregate_stats(repos, now=datetime(2024, 7, 1))
        assert stats.recent_activity == 1

    def test_top_languages_ordered_by_size(self):
        """top_languages returns the largest buckets first."""
        repos = [
            make_repo(language="Go", size=10),
            make_repo(language="Rust", size=30),
            make_repo(language="Python", size=20),
            make_repo(language="C", size=5),
        ]
        stats = compute_aggregate_stats(repos, now=NOW)
        assert [name for name, _ in stats.top_languages(3)] == ["Rust", "Python", "Go"]


# ===== TESTS: Account Age =====

class TestAccountAge:
    """Human readable and whole-year account ages."""

    @pytest.mark.parametrize("created_at,expected", [
        ("2015-03-01T00:00:00Z", "9 years"),
        ("2023-07-01T00:00:00Z", "1 year"),
        ("2024-05-15T00:00:00Z", "1 month"),
        ("2024-01-01T00:00:00Z", "6 months"),
        ("2024-06-20T00:00:00Z", "less than a month"),
    ])
    def test_compute_account_age(self, created_at, expected):
        assert compute_account_age(created_at, now=NOW) == expected

    def test_account_age_years(self):
        assert account_age_years("2015-03-01T00:00:00Z", now=NOW) == 9
        assert account_age_years("2024-06-20T00:00:00Z", now=NOW) == 0


# ===== TESTS: Fetching =====

class TestGitHubProfileServiceFetch:
    """Two sequential calls, no partial results."""

    def test_fetch_profile_success(self, service):
        """Returns snapshot, repos and stats."""
        profile = service.fetch_profile("octocat", now=NOW)

        assert profile is not None
        assert profile.user.login == "octocat"
        assert profile.user.bio is None
        assert profile.user.location == "Pune"
        assert [repo.name for repo in profile.repos] == ["api", "dotfiles"]
        assert profile.stats.total_stars == 7
        assert profile.stats.languages == {"Python": 300}
        assert profile.stats.recent_activity == 1
        assert profile.fetched_at == NOW

    def test_calls_user_then_repos_with_expected_params(self, service, session):
        """User endpoint first, then owned repos sorted by update, 100 per page."""
        service.fetch_profile("octocat", now=NOW)

        assert session.get.call_count == 2
        first, second = session.get.call_args_list
        assert first.args[0] == "https://api.github.com/users/octocat"
        assert second.args[0] == "https://api.github.com/users/octocat/repos"
        assert second.kwargs["params"] == {"type": "owner", "sort": "updated", "per_page": 100}

    def test_sends_api_version_header_and_timeout(self, service, session):
        """Every call carries the API version header and a timeout."""
        service.fetch_profile("octocat", now=NOW)

        for recorded in session.get.call_args_list:
            assert recorded.kwargs["headers"]["X-GitHub-Api-Version"] == "2022-11-28"
            assert "Authorization" not in recorded.kwargs["headers"]
            assert recorded.kwargs["timeout"] > 0

    def test_token_adds_authorization_header(self, session):
        """A configured token is sent as a bearer token."""
        service = GitHubProfileService(session=session, token="ghp_test")
        assert service.headers()["Authorization"] == "Bearer ghp_test"

    def test_user_not_found_returns_none_without_repo_call(self, session, service):
        """A 404 on the user stops before the repository call."""
        session.get.side_effect = [
            _response({"message": "Not Found"}, status_error=requests.HTTPError("404 Not Found")),
        ]
        assert service.fetch_profile("ghost") is None
        assert session.get.call_count == 1

    def test_repo_failure_returns_none(self, session, service):
        """A failed second call discards the user record too."""
        session.get.side_effect = [
            _response(USER_PAYLOAD),
            _response({}, status_error=requests.HTTPError("403 rate limit exceeded")),
        ]
        assert service.fetch_profile("octocat") is None

    def test_timeout_returns_none(self, session, service):
        """Timeouts collapse to None."""
        session.get.side_effect = requests.exceptions.Timeout("read timed out")
        assert service.fetch_profile("octocat") is None

    def test_connection_error_returns_none(self, session, service):
        """Network errors collapse to None."""
        session.get.side_effect = requests.exceptions.ConnectionError("refused")
        assert service.fetch_profile("octocat") is None

    def test_non_list_repo_payload_returns_none(self, session, service):
        """An object where a list was expected is malformed."""
        session.get.side_effect = [_response(USER_PAYLOAD), _response({"message": "weird"})]
        assert service.fetch_profile("octocat") is None

    def test_missing_login_returns_none(self, session, service):
        """A user payload without login is malformed."""
        session.get.side_effect = [_response({"name": "x"}), _response(REPOS_PAYLOAD)]
        assert service.fetch_profile("octocat") is None

    def test_null_counts_default_to_zero(self, session, service):
        """Null numeric fields are treated as zero."""
        payload = dict(USER_PAYLOAD, followers=None)
        repos = [dict(REPOS_PAYLOAD[0], stargazers_count=None)]
        session.get.side_effect = [_response(payload), _response(repos)]

        profile = service.fetch_profile("octocat", now=NOW)

        assert profile.user.followers == 0
        assert profile.stats.total_stars == 0
