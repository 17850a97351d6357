from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from lab_interpreter.pipeline.flag import flag_field
from lab_interpreter.pipeline.rules import pattern_rule_for
from lab_interpreter.schemas.config import EngineConfig
from lab_interpreter.schemas.lab_report import CategoryResult
from lab_interpreter.schemas.recommendation import SEVERITY_RANK, Recommendation
from lab_interpreter.schemas.reference_ranges import CATEGORIES, fields_of

logger = logging.getLogger(__name__)

SEVERITIES = ("critical", "warning", "info")

NORMAL_ASSESSMENT = (
    "All test results are within reference ranges. No immediate concerns identified."
)

_FIELD, _PATTERN = 0, 1


def _coerce_category(category: str, data: Any) -> CategoryResult | None:
    if isinstance(data, CategoryResult):
        return data
    try:
        return CategoryResult.model_validate(data)
    except ValidationError as exc:
        logger.warning(
            "evaluate: category %r is malformed, skipped (%d errors)",
            category,
            exc.error_count(),
        )
        return None


def _ordered_categories(organized: Mapping[str, Any]) -> list[str]:
    known = [category for category in CATEGORIES if category in organized]
    return known + [category for category in organized if category not in CATEGORIES]


def _field_positions(category: str, result: CategoryResult) -> dict[str, int]:
    positions = {field.key: index for index, field in enumerate(fields_of(category))}
    offset = len(positions)
    for key in result.fields:
        if key not in positions:
            positions[key] = offset
            offset += 1
    return positions


def _pattern_recommendation(
    category: str, group: str, flagged: list[tuple[str, Recommendation]]
) -> Recommendation:
    rule = pattern_rule_for(category, group)
    severity = min(
        [rule.severity] + [rec.severity for _, rec in flagged],
        key=SEVERITY_RANK.__getitem__,
    )
    labels = ", ".join(label for label, _ in flagged)
    return Recommendation(
        severity=severity,
        category=category,
        field_keys=tuple(key for _, rec in flagged for key in rec.field_keys),
        message=rule.message.format(labels=labels, group=group),
        kind="pattern",
        group=group,
    )


def evaluate(
    organized: Mapping[str, Any], config: EngineConfig | None = None
) -> list[Recommendation]:
    """Evaluate organized results and return recommendations, most severe first.

    Within a severity tier recommendations follow category, then field
    registration order; a group pattern sorts after its first member's flag.
    """
    config = config or EngineConfig()
    if not organized:
        return []

    ranked: list[tuple[tuple[int, int, int, int], Recommendation]] = []
    judged_count = 0

    for category_index, category in enumerate(_ordered_categories(organized)):
        result = _coerce_category(category, organized[category])
        if result is None:
            continue

        positions = _field_positions(category, result)
        flagged_by_group: dict[str, list[tuple[int, str, Recommendation]]] = {}

        for key in sorted(result.fields, key=positions.__getitem__):
            field = result.fields[key]
            judged, recommendation = flag_field(category, key, field, config)
            judged_count += judged
            if recommendation is None:
                continue

            position = positions[key]
            ranked.append(
                (
                    (SEVERITY_RANK[recommendation.severity], category_index, position, _FIELD),
                    recommendation,
                )
            )
            flagged_by_group.setdefault(field.group, []).append(
                (position, field.label, recommendation)
            )

        for group, flagged in flagged_by_group.items():
            if len(flagged) < 2:
                continue
            pattern = _pattern_recommendation(
                category, group, [(label, rec) for _, label, rec in flagged]
            )
            ranked.append(
                (
                    (SEVERITY_RANK[pattern.severity], category_index, flagged[0][0], _PATTERN),
                    pattern,
                )
            )

    if not ranked and judged_count and config.include_normal_assessment:
        ranked.append(
            (
                (SEVERITY_RANK["info"], len(CATEGORIES), 0, _FIELD),
                Recommendation(
                    severity="info",
                    category="overall",
                    field_keys=(),
                    message=NORMAL_ASSESSMENT,
                    kind="overall",
                    status="normal",
                ),
            )
        )

    ranked.sort(key=lambda item: item[0])
    recommendations = [recommendation for _, recommendation in ranked]

    logger.info(
        "evaluate: %d recommendations from %d judged fields (%d critical)",
        len(recommendations),
        judged_count,
        sum(1 for rec in recommendations if rec.severity == "critical"),
    )

    return recommendations


def summarize(recommendations: Iterable[Recommendation]) -> dict[str, Any]:
    """
    Build a compact summary dict for the presentation layer.

    Example output:
    {
        "total": 3,
        "critical_count": 1,
        "warning_count": 2,
        "info_count": 0,
        "has_critical": True,
        "has_abnormal": True,
        "flagged_fields": ["hepatitis_b", "ast_sgot", "alt_sgpt"],
        "by_severity": {"critical": [...], "warning": [...], "info": []},
    }
    """
    recommendations = list(recommendations)
    by_severity: dict[str, list[str]] = {severity: [] for severity in SEVERITIES}
    flagged_fields: dict[str, None] = {}

    for rec in recommendations:
        by_severity[rec.severity].append(rec.message)
        if rec.kind == "field":
            flagged_fields.update(dict.fromkeys(rec.field_keys))

    return {
        "total": len(recommendations),
        "critical_count": len(by_severity["critical"]),
        "warning_count": len(by_severity["warning"]),
        "info_count": len(by_severity["info"]),
        "has_critical": bool(by_severity["critical"]),
        "has_abnormal": bool(flagged_fields),
        "flagged_fields": list(flagged_fields),
        "by_severity": by_severity,
    }
