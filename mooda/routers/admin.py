"""
Operator router.

POST /admin/run-daily-emotion-analysis  : run the daily summary now

Authenticated by CRON_SECRET, sent either as the `X-Cron-Secret` header or
as `token` in the body. The run is synchronous: the response carries the
final counts.
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Header, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import sessionmaker

from mooda.core.config import settings
from mooda.core.errors import UserFetchError
from mooda.core.security import verify_cron_secret
from mooda.core.timeutil import RunMode
from mooda.db.base import get_session_factory
from mooda.schemas.analysis import (
    RunAnalysisFailure,
    RunAnalysisRequest,
    RunAnalysisResponse,
)
from mooda.services.daily_summary import run_daily_summary
from mooda.services.llm_client import TextCompletionClient, get_llm_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post(
    "/run-daily-emotion-analysis",
    response_model=RunAnalysisResponse,
    responses={
        401: {"model": RunAnalysisFailure},
        500: {"model": RunAnalysisFailure},
    },
    summary="Run the daily emotion analysis for every user",
)
def run_daily_emotion_analysis(
    payload: Optional[RunAnalysisRequest] = Body(default=None),
    x_cron_secret: Optional[str] = Header(default=None),
    session_factory: sessionmaker = Depends(get_session_factory),
    llm_client: Optional[TextCompletionClient] = Depends(get_llm_client),
):
    payload = payload or RunAnalysisRequest()
    if not verify_cron_secret(settings.CRON_SECRET, x_cron_secret, payload.token):
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=RunAnalysisFailure(error="unauthorized").model_dump(),
        )

    mode = RunMode.today if payload.test_today else RunMode.yesterday
    logger.info("Manual daily emotion analysis requested (mode=%s)", mode.value)
    try:
        report = run_daily_summary(
            mode, session_factory=session_factory, llm_client=llm_client
        )
    except UserFetchError as exc:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=RunAnalysisFailure(error=exc.details.get("reason", exc.message)).model_dump(),
        )

    return RunAnalysisResponse(
        success=True,
        processed=report.processed,
        skipped=report.skipped,
        failed=report.failed,
        target_day=report.target_day,
        mode=report.mode,
    )
