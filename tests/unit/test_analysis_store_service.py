"""
Unit tests for src/services/analysis_store_service.py

The repository provider is either a MagicMock or a real provider over the
patched MongoClient from conftest.
"""

from dataclasses import replace
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from src.common.repositories import AnalysisRepositoryProvider, RepositoryConfig, WriteResult
from src.common.types import CTCEstimate
from src.services.analysis_store_service import (
    NOT_CONFIGURED_ERROR,
    AnalysisPersistenceQueue,
    build_analysis_payload,
    build_github_data_snapshot,
    get_all_analyses,
    get_analysis_history,
    save_analysis,
)


# ===== FIXTURES =====

@pytest.fixture
def payload(sample_profile):
    """A complete save payload."""
    estimate = CTCEstimate(ctc="₹8,00,000 - ₹14,00,000", message="Solid.", confidence=68)
    return build_analysis_payload(
        github_url="https://github.com/octocat",
        years_of_experience="Mid-Level (3-5 yr)",
        target_role="Backend Engineer",
        profile=sample_profile,
        estimate=estimate,
    )


@pytest.fixture
def repository():
    repo = MagicMock()
    repo.insert_one.return_value = WriteResult(inserted_id="65f0c0ffee")
    repo.find_by_username.return_value = [{"_id": "1", "githubUsername": "octocat"}]
    repo.find_recent.return_value = [{"_id": "1"}, {"_id": "2"}]
    return repo


@pytest.fixture
def provider(repository):
    mock_provider = MagicMock(spec=AnalysisRepositoryProvider)
    mock_provider.get.return_value = repository
    return mock_provider


@pytest.fixture
def unconfigured_provider():
    """Real provider with no URI: persistence disabled."""
    return AnalysisRepositoryProvider(RepositoryConfig(mongodb_uri=None))


# ===== TESTS: Payload Building =====

class TestBuildAnalysisPayload:
    """Request + result are denormalized into one record."""

    def test_payload_fields(self, payload):
        """Every stored field is present, camelCase."""
        assert payload["githubUsername"] == "octocat"
        assert payload["githubUrl"] == "https://github.com/octocat"
        assert payload["yearsOfExperience"] == "Mid-Level (3-5 yr)"
        assert payload["targetRole"] == "Backend Engineer"
        assert payload["ctc"] == "₹8,00,000 - ₹14,00,000"
        assert payload["confidence"] == 68
        assert "source" not in payload

    def test_github_data_snapshot(self, sample_profile):
        """The stats snapshot mirrors the profile and stats."""
        snapshot = build_github_data_snapshot(
            sample_profile, now=datetime(2024, 7, 1, tzinfo=timezone.utc)
        )
        assert snapshot["publicRepos"] == 3
        assert snapshot["followers"] == 120
        assert snapshot["totalStars"] == 50
        assert snapshot["totalForks"] == 7
        assert snapshot["languages"] == {"Python": 1200, "TypeScript": 800}
        assert snapshot["recentActivity"] == 2
        assert snapshot["accountAge"] == "9 years"
        assert snapshot["location"] == "Bengaluru"
        assert snapshot["company"] == "@github"

    def test_account_age_measured_at_fetch_time(self, sample_profile):
        """Without an explicit now, the profile's fetch time is the reference."""
        profile = replace(sample_profile, fetched_at=datetime(2020, 3, 2, tzinfo=timezone.utc))

        snapshot = build_github_data_snapshot(profile)

        assert snapshot["accountAge"] == "5 years"


# ===== TESTS: Save =====

class TestSaveAnalysis:
    """save_analysis never raises."""

    def test_unconfigured_store_is_skipped(self, unconfigured_provider, payload):
        """No URI -> success with skipped, no connection attempt."""
        assert save_analysis(unconfigured_provider, payload) == {"success": True, "skipped": True}

    def test_successful_insert_returns_id(self, provider, repository, payload):
        """The new id is returned as a string."""
        result = save_analysis(provider, payload, ip_address="203.0.113.7")

        assert result == {"success": True, "id": "65f0c0ffee"}
        document = repository.insert_one.call_args.args[0]
        assert document["githubUsername"] == "octocat"
        assert document["ipAddress"] == "203.0.113.7"
        assert document["createdAt"].tzinfo is not None
        assert document["createdAt"] == document["updatedAt"]

    def test_ip_address_is_optional(self, provider, repository, payload):
        """No IP -> no ipAddress field."""
        save_analysis(provider, payload)
        assert "ipAddress" not in repository.insert_one.call_args.args[0]

    def test_unknown_fields_are_not_stored(self, provider, repository, payload):
        """Only the record fields are copied from the payload."""
        save_analysis(provider, dict(payload, isAdmin=True))
        assert "isAdmin" not in repository.insert_one.call_args.args[0]

    def test_missing_required_field_fails(self, provider, repository, payload):
        """A payload without a required field is rejected without an insert."""
        del payload["ctc"]

        result = save_analysis(provider, payload)

        assert result["success"] is False
        assert "ctc" in result["error"]
        repository.insert_one.assert_not_called()

    def test_insert_error_returns_failure(self, provider, repository, payload):
        """Driver errors become {"success": False, "error": ...}."""
        repository.insert_one.side_effect = OperationFailure("document failed validation")

        result = save_analysis(provider, payload)

        assert result == {"success": False, "error": "document failed validation"}
        provider.invalidate.assert_called_once()

    def test_connection_error_returns_failure(self, provider, payload):
        """A store that cannot be reached is a failure, not a skip."""
        provider.get.side_effect = ServerSelectionTimeoutError("no servers")

        result = save_analysis(provider, payload)

        assert result["success"] is False
        assert "skipped" not in result


# ===== TESTS: Reads =====

class TestReads:
    """History and recent listings."""

    def test_history(self, provider, repository):
        result = get_analysis_history(provider, "octocat", limit=5)

        assert result == {"success": True, "data": [{"_id": "1", "githubUsername": "octocat"}]}
        repository.find_by_username.assert_called_once_with("octocat", limit=5)

    def test_recent(self, provider, repository):
        result = get_all_analyses(provider, limit=2)

        assert result["success"] is True
        assert len(result["data"]) == 2
        repository.find_recent.assert_called_once_with(limit=2)

    def test_reads_when_unconfigured(self, unconfigured_provider):
        """Reads report the store as not configured."""
        assert get_analysis_history(unconfigured_provider, "octocat") == {
            "success": False, "error": NOT_CONFIGURED_ERROR,
        }
        assert get_all_analyses(unconfigured_provider) == {
            "success": False, "error": NOT_CONFIGURED_ERROR,
        }

    def test_read_error(self, provider, repository):
        repository.find_recent.side_effect = OperationFailure("boom")
        assert get_all_analyses(provider) == {"success": False, "error": "boom"}


# ===== TESTS: Persistence Queue =====

class TestAnalysisPersistenceQueue:
    """Fire-and-forget submission."""

    def test_submit_saves_in_background(self, provider, repository, payload):
        """The save runs on a worker thread."""
        queue = AnalysisPersistenceQueue(provider, max_workers=1)

        assert queue.submit(payload, ip_address="198.51.100.1") is None
        queue.shutdown(wait=True)

        repository.insert_one.assert_called_once()
        assert repository.insert_one.call_args.args[0]["ipAddress"] == "198.51.100.1"

    def test_failure_is_only_logged(self, provider, repository, payload):
        """A failing save does not propagate to the submitter."""
        repository.insert_one.side_effect = OperationFailure("write concern")
        queue = AnalysisPersistenceQueue(provider, max_workers=1)

        queue.submit(payload)
        queue.shutdown(wait=True)

        repository.insert_one.assert_called_once()

    def test_submit_after_shutdown_does_not_raise(self, provider, repository, payload):
        """Late submissions are dropped with a warning."""
        queue = AnalysisPersistenceQueue(provider, max_workers=1)
        queue.shutdown(wait=True)

        queue.submit(payload)

        repository.insert_one.assert_not_called()
