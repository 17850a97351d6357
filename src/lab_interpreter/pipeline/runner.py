from __future__ import annotations

import logging
import time
from typing import Any

from lab_interpreter.pipeline.evaluate import evaluate, summarize
from lab_interpreter.pipeline.organize import organize
from lab_interpreter.schemas.config import EngineConfig
from lab_interpreter.schemas.lab_report import CategoryResult
from lab_interpreter.schemas.pipeline import InterpretationResult, StageResult
from lab_interpreter.schemas.recommendation import Recommendation

logger = logging.getLogger(__name__)


def _organize_stage(record: Any) -> tuple[dict[str, CategoryResult], StageResult]:
    start = time.time()
    organized = organize(record)
    field_count = sum(len(result.fields) for result in organized.values())

    reasoning = (
        f"Organized {field_count} present fields into {len(organized)} categories. "
        "Reserved meta-fields and keys unknown to the registry were ignored."
    )

    return organized, StageResult(
        stage_name="organize",
        input_summary=f"Raw test record ({type(record).__name__})",
        output={
            "categories": list(organized),
            "field_count": field_count,
        },
        reasoning=reasoning,
        timing_seconds=time.time() - start,
    )


def _evaluate_stage(
    organized: dict[str, CategoryResult], config: EngineConfig
) -> tuple[list[Recommendation], dict[str, Any], StageResult]:
    start = time.time()
    recommendations = evaluate(organized, config)
    summary = summarize(recommendations)

    reasoning = (
        f"Produced {summary['total']} recommendations "
        f"({summary['critical_count']} critical, {summary['warning_count']} warning, "
        f"{summary['info_count']} info)."
    )
    if summary["flagged_fields"]:
        reasoning += f" Flagged: {', '.join(summary['flagged_fields'][:5])}"

    return recommendations, summary, StageResult(
        stage_name="evaluate",
        input_summary=f"{len(organized)} organized categories",
        output={
            "flagged_fields": summary["flagged_fields"],
            "critical_count": summary["critical_count"],
            "total": summary["total"],
        },
        reasoning=reasoning,
        timing_seconds=time.time() - start,
    )


def interpret(record: Any, config: EngineConfig | None = None) -> InterpretationResult:
    run_start = time.time()
    config = config or EngineConfig()
    stages: list[StageResult] = []
    organized: dict[str, CategoryResult] = {}

    try:
        logger.info("interpret: [1/2] organize")
        organized, organize_result = _organize_stage(record)
        stages.append(organize_result)

        logger.info("interpret: [2/2] evaluate")
        recommendations, summary, evaluate_result = _evaluate_stage(organized, config)
        stages.append(evaluate_result)

        total_time = time.time() - run_start
        logger.info(
            "interpret: complete in %.3fs - %d categories, %d recommendations",
            total_time,
            len(organized),
            len(recommendations),
        )

        return InterpretationResult(
            stages=stages,
            organized=organized,
            recommendations=recommendations,
            summary=summary,
            total_time_seconds=total_time,
            success=True,
        )
    except Exception as exc:
        logger.error("interpret: failed - %s", exc)
        return InterpretationResult(
            stages=stages,
            organized=organized,
            recommendations=[],
            summary=summarize([]),
            total_time_seconds=time.time() - run_start,
            success=False,
            error=str(exc),
        )
