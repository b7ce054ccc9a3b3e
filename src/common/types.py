"""
Canonical Types for the CTC Estimator

Defines the immutable data structures passed between the profile fetcher,
the estimate generator and the persistence layer, plus the TypedDict shape
of the persisted analysis document.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, TypedDict
from typing_extensions import NotRequired


@dataclass(frozen=True)
class ProfileSnapshot:
    """Public GitHub user record, normalized to the fields the estimator uses."""
    login: str
    name: Optional[str]
    bio: Optional[str]
    public_repos: int
    followers: int
    following: int
    created_at: str                    # ISO-8601 as returned by GitHub
    updated_at: str
    location: Optional[str] = None
    company: Optional[str] = None


@dataclass(frozen=True)
class RepositorySummary:
    """One entry of the owner's repository listing."""
    name: str
    description: Optional[str]
    language: Optional[str]
    stargazers_count: int
    forks_count: int
    size: int                          # KB, as reported by GitHub
    created_at: str
    updated_at: str


@dataclass(frozen=True)
class AggregateStats:
    """Totals derived from a repository listing."""
    total_stars: int = 0
    total_forks: int = 0
    languages: Dict[str, int] = field(default_factory=dict)  # language -> cumulative size
    recent_activity: int = 0           # repos updated in the trailing 6 months

    def top_languages(self, n: int = 3) -> List[Tuple[str, int]]:
        """Languages ordered by cumulative size, largest first."""
        return sorted(self.languages.items(), key=lambda item: item[1], reverse=True)[:n]


@dataclass(frozen=True)
class GitHubProfileData:
    """Everything the profile fetcher returns for one handle."""
    user: ProfileSnapshot
    repos: List[RepositorySummary]
    stats: AggregateStats
    fetched_at: Optional[datetime] = None


# Where a CTCEstimate came from
ESTIMATE_SOURCE_MODEL = "model"
ESTIMATE_SOURCE_PARSE_FALLBACK = "parse_fallback"
ESTIMATE_SOURCE_UPSTREAM_FALLBACK = "upstream_fallback"


@dataclass(frozen=True)
class CTCEstimate:
    """Compensation range, critique and confidence (0-100) for one analysis."""
    ctc: str
    message: str
    confidence: float
    source: str = ESTIMATE_SOURCE_MODEL

    @property
    def is_fallback(self) -> bool:
        return self.source != ESTIMATE_SOURCE_MODEL

    def to_dict(self) -> Dict[str, Any]:
        """Public shape returned to callers (source is internal)."""
        return {"ctc": self.ctc, "message": self.message, "confidence": self.confidence}


class GitHubDataSnapshot(TypedDict):
    """Stats subset stored alongside each analysis."""
    publicRepos: int
    followers: int
    following: int
    totalStars: int
    totalForks: int
    languages: Dict[str, int]
    recentActivity: int
    accountAge: str
    location: NotRequired[Optional[str]]
    company: NotRequired[Optional[str]]


class AnalysisRecord(TypedDict):
    """
    Persisted analysis document (MongoDB `analyses` collection).

    Field names are camelCase to stay compatible with documents written
    by the web front end.
    """
    githubUsername: str
    githubUrl: str
    yearsOfExperience: str
    targetRole: str
    ctc: str
    message: str
    confidence: float
    githubData: GitHubDataSnapshot
    createdAt: datetime
    updatedAt: datetime
    ipAddress: NotRequired[Optional[str]]
