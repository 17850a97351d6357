from __future__ import annotations
from typing import Any
from pydantic import BaseModel
from lab_interpreter.schemas.lab_report import CategoryResult
from lab_interpreter.schemas.recommendation import Recommendation


class StageResult(BaseModel):
    stage_name: str
    input_summary: str
    output: dict[str, Any]
    reasoning: str
    timing_seconds: float


class InterpretationResult(BaseModel):
    stages: list[StageResult]
    organized: dict[str, CategoryResult]
    recommendations: list[Recommendation]
    summary: dict[str, Any]
    total_time_seconds: float
    success: bool
    error: str | None = None
