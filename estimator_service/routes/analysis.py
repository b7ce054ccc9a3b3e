"""
Analysis API Routes.

- POST /api/analyze - fetch a GitHub profile, estimate CTC, schedule a save
- POST /api/save-analysis - store an analysis produced elsewhere (web client)
- GET /api/analyses/{username} - analysis history for one handle, newest first
- GET /api/analyses - most recent analyses across all handles
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from src.common.error_handling import (
    CTCEstimatorError,
    InvalidAnalysisInputError,
    InvalidProfileUrlError,
    ProfileUnavailableError,
)
from src.common.repositories import AnalysisRepositoryProvider
from src.services.analysis_pipeline import AnalysisPipeline
from src.services.analysis_store_service import (
    NOT_CONFIGURED_ERROR,
    get_all_analyses,
    get_analysis_history,
    save_analysis,
)

from ..dependencies import get_client_ip, get_pipeline, get_repository_provider
from ..models import (
    AnalyzeRequest,
    AnalyzeResponse,
    GitHubDataPayload,
    SaveAnalysisRequest,
    SaveAnalysisResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analysis"])

SAVE_FAILED_MESSAGE = "Failed to save analysis"

_ERROR_STATUS = {
    InvalidAnalysisInputError: 400,
    InvalidProfileUrlError: 400,
    ProfileUnavailableError: 404,
}


def _status_for(error: CTCEstimatorError) -> int:
    return _ERROR_STATUS.get(type(error), 400)


def _read_result(result: Dict[str, Any]) -> JSONResponse:
    """200 on success, 503 when the store is not configured, 500 otherwise."""
    if result.get("success"):
        return JSONResponse(content=jsonable_encoder(result))
    status_code = 503 if result.get("error") == NOT_CONFIGURED_ERROR else 500
    return JSONResponse(status_code=status_code, content=jsonable_encoder(result))


@router.post("/analyze", response_model=AnalyzeResponse)
def analyze_profile(
    body: AnalyzeRequest,
    request: Request,
    pipeline: AnalysisPipeline = Depends(get_pipeline),
) -> AnalyzeResponse:
    """
    Run one analysis.

    Sync handler: FastAPI runs it in the threadpool, so the blocking GitHub
    and Gemini calls do not stall the event loop. The save is handed to the
    persistence queue and is not awaited.
    """
    try:
        outcome = pipeline.run(
            github_url=body.githubUrl,
            years_of_experience=body.yearsOfExperience,
            target_role=body.targetRole,
            ip_address=get_client_ip(request),
        )
    except CTCEstimatorError as e:
        raise HTTPException(status_code=_status_for(e), detail=e.user_message)

    return AnalyzeResponse(
        githubUsername=outcome.username,
        ctc=outcome.estimate.ctc,
        message=outcome.estimate.message,
        confidence=outcome.estimate.confidence,
        isFallback=outcome.estimate.is_fallback,
        githubData=GitHubDataPayload(**outcome.record["githubData"]),
    )


@router.post("/save-analysis", response_model=SaveAnalysisResponse, response_model_exclude_none=True)
async def save_analysis_route(
    request: Request,
    provider: AnalysisRepositoryProvider = Depends(get_repository_provider),
):
    """
    Store one analysis.

    Store-level failures come back as {"success": false, "error": ...}; a
    malformed body or any unexpected error returns HTTP 500.
    """
    try:
        body = SaveAnalysisRequest.model_validate(await request.json())
        result = await run_in_threadpool(
            save_analysis,
            provider,
            body.model_dump(),
            get_client_ip(request),
        )
        return SaveAnalysisResponse(**result)
    except Exception as e:
        logger.error(f"Error in save-analysis API: {e}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": SAVE_FAILED_MESSAGE},
        )


@router.get("/analyses/{username}")
def analysis_history(
    username: str,
    limit: int = Query(10, ge=1, le=100),
    provider: AnalysisRepositoryProvider = Depends(get_repository_provider),
) -> JSONResponse:
    """Analyses for one GitHub handle, newest first."""
    return _read_result(get_analysis_history(provider, username, limit=limit))


@router.get("/analyses")
def recent_analyses(
    limit: int = Query(100, ge=1, le=500),
    provider: AnalysisRepositoryProvider = Depends(get_repository_provider),
) -> JSONResponse:
    """Most recent analyses across all handles."""
    return _read_result(get_all_analyses(provider, limit=limit))
