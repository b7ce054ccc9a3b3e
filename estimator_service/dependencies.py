"""
FastAPI dependencies.

Long-lived collaborators (repository provider, persistence queue, pipeline)
are created once in app.py and stored on app.state; routes receive them
through these accessors instead of importing module globals.
"""

from typing import Optional

from fastapi import Request

from src.common.repositories import AnalysisRepositoryProvider
from src.services.analysis_pipeline import AnalysisPipeline


def get_repository_provider(request: Request) -> AnalysisRepositoryProvider:
    return request.app.state.repository_provider


def get_pipeline(request: Request) -> AnalysisPipeline:
    return request.app.state.pipeline


def get_client_ip(request: Request) -> Optional[str]:
    """Caller IP, preferring the first X-Forwarded-For hop when behind a proxy."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else None
