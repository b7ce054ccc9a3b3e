"""
Pydantic models for the estimator service.

Request/response field names are camelCase to match the web client.
"""

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field


class GitHubDataPayload(BaseModel):
    """Stats snapshot sent with (and stored alongside) an analysis."""

    publicRepos: int = 0
    followers: int = 0
    following: int = 0
    totalStars: int = 0
    totalForks: int = 0
    languages: Dict[str, int] = Field(default_factory=dict)
    recentActivity: int = 0
    accountAge: str = ""
    location: Optional[str] = None
    company: Optional[str] = None


class SaveAnalysisRequest(BaseModel):
    """Body of POST /api/save-analysis."""

    githubUsername: str = Field(..., min_length=1)
    githubUrl: str = Field(..., min_length=1)
    yearsOfExperience: str = Field(..., min_length=1)
    targetRole: str = Field(..., min_length=1)
    ctc: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    confidence: float = Field(..., ge=0, le=100)
    githubData: GitHubDataPayload = Field(default_factory=GitHubDataPayload)


class SaveAnalysisResponse(BaseModel):
    """Result of a save attempt."""

    success: bool
    id: Optional[str] = None
    skipped: Optional[bool] = None
    error: Optional[str] = None


class AnalyzeRequest(BaseModel):
    """Body of POST /api/analyze."""

    githubUrl: str = Field(..., description="GitHub profile URL, e.g. https://github.com/octocat")
    yearsOfExperience: str = Field(..., description="Experience bracket, e.g. 'Junior (1-3 yr)'")
    targetRole: str = Field(..., description="Target role, e.g. 'Backend Engineer'")


class AnalyzeResponse(BaseModel):
    """Estimate plus the stats it was based on."""

    success: bool = True
    githubUsername: str
    ctc: str
    message: str
    confidence: float
    isFallback: bool = False
    githubData: GitHubDataPayload


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    mongodb_configured: bool
    gemini_configured: bool
    timestamp: datetime
