"""
Manual trigger for the daily emotion analysis.

POST /admin/run-daily-emotion-analysis → RunAnalysisRequest → RunAnalysisResponse
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from mooda.core.timeutil import RunMode


class RunAnalysisRequest(BaseModel):
    test_today: bool = Field(
        default=False,
        description="Analyse today instead of yesterday (manual checks).",
    )
    token: Optional[str] = Field(
        default=None,
        description="Cron secret, when the X-Cron-Secret header is not used.",
    )


class RunAnalysisResponse(BaseModel):
    success: bool
    processed: int
    skipped: int
    failed: int
    target_day: date
    mode: RunMode


class RunAnalysisFailure(BaseModel):
    success: bool = False
    error: str
