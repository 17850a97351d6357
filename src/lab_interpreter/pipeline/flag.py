from __future__ import annotations

import logging
import math
import re
from decimal import Decimal
from typing import Any

from lab_interpreter.pipeline.rules import ADVICE, field_rule_for
from lab_interpreter.schemas.config import EngineConfig
from lab_interpreter.schemas.lab_report import FieldResult, ReferenceRange
from lab_interpreter.schemas.recommendation import FlagStatus, Recommendation, Severity
from lab_interpreter.schemas.reference_ranges import (
    normalize_token,
    parse_reference_range,
)

logger = logging.getLogger(__name__)

_NUMERIC_VALUE_RE = re.compile(r"^[<>]?=?\s*(-?\d+(?:\.\d+)?)(?![\d.,\-])")
_GROUPING_COMMA_RE = re.compile(r"(?<=\d),(?=\d{3}(?!\d))")

# Qualitative results that all mean "marker not present"
NEGATIVE_EQUIVALENTS = frozenset({"negative", "non-reactive", "nonreactive", "not-detected"})

# Checked in order against the words of a free-text result on a numeric field
VALUE_KEYWORDS: tuple[tuple[str, frozenset[str]], ...] = (
    ("critical", frozenset({"critical", "urgent", "severe"})),
    ("high", frozenset({"high", "elevated", "increased"})),
    ("low", frozenset({"low", "decreased", "deficient"})),
)
POSITIVE_VALUES = frozenset({"positive", "reactive"})

_STATUS_PHRASE = {
    "high": "is above the reference range",
    "low": "is below the reference range",
    "abnormal": "does not match the expected result",
}


def parse_numeric_value(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        try:
            number = float(value)
        except (ValueError, ArithmeticError):
            return None
        return number if math.isfinite(number) else None
    if isinstance(value, str):
        # "1,500" -> "1500"; a decimal comma such as "1,5" stays unjudged
        text = _GROUPING_COMMA_RE.sub("", value.strip())
        match = _NUMERIC_VALUE_RE.match(text)
        if match:
            return float(match.group(1))
    return None


def _numeric_flag(
    value: float, ref: ReferenceRange, config: EngineConfig
) -> tuple[FlagStatus, bool] | None:
    """Return (status, critical) for an out-of-range value, None when in range."""
    high_factor = config.critical_high_factor
    low_factor = config.critical_low_factor

    if ref.kind == "interval":
        if value > ref.high:
            return "high", high_factor is not None and value > ref.high * high_factor
        if value < ref.low:
            return "low", low_factor is not None and value < ref.low * low_factor
    elif ref.kind == "upper":
        if value >= ref.high:
            return "high", high_factor is not None and value >= ref.high * high_factor
    elif ref.kind == "lower":
        if value <= ref.low:
            return "low", low_factor is not None and value <= ref.low * low_factor
    return None


def _keyword_flag(text: str) -> tuple[FlagStatus, bool] | None:
    normalized = text.strip().lower()
    if normalized in POSITIVE_VALUES:
        return "abnormal", False

    words = set(re.findall(r"[a-z]+", normalized))
    for status, keywords in VALUE_KEYWORDS:
        if words & keywords:
            if status == "critical":
                return "abnormal", True
            return status, False
    return None


def _qualitative_matches(value: Any, expected: str) -> bool:
    observed = normalize_token(str(value))
    expected = normalize_token(expected)
    if observed == expected:
        return True
    return observed in NEGATIVE_EQUIVALENTS and expected in NEGATIVE_EQUIVALENTS


def flag_field(
    category: str,
    key: str,
    field: FieldResult,
    config: EngineConfig | None = None,
) -> tuple[bool, Recommendation | None]:
    """Judge one organized field against its reference range.

    Returns (judged, recommendation). judged is False when no judgment was
    possible (pending value, unparseable range, unrecognized value).
    """
    config = config or EngineConfig()

    if field.value is None or str(field.value).strip() == "":
        return False, None
    if str(field.value).strip().lower() in config.skip_values:
        logger.debug("flag: %s is %r, skipped", key, field.value)
        return False, None

    ref = parse_reference_range(field.normal_range)
    if ref is None:
        logger.debug(
            "flag: %s has unparseable range %r, skipped", key, field.normal_range
        )
        return False, None

    rule = field_rule_for(category, field.group, key)
    outcome: tuple[FlagStatus, bool] | None

    if ref.kind == "qualitative":
        if _qualitative_matches(field.value, ref.text or ""):
            return True, None
        outcome = ("abnormal", False)
    else:
        number = parse_numeric_value(field.value)
        if number is not None:
            outcome = _numeric_flag(number, ref, config)
        elif isinstance(field.value, str):
            outcome = _keyword_flag(field.value)
            if outcome is None:
                logger.debug("flag: %s value %r not recognized", key, field.value)
                return False, None
        else:
            return False, None

    if outcome is None:
        return True, None

    status, critical = outcome
    severity: Severity = "critical" if critical else rule.severity
    if critical:
        phrase = f"is critically {status}" if status != "abnormal" else "is critical"
        advice = ADVICE["critical"]
    else:
        phrase = _STATUS_PHRASE[status]
        advice = rule.advice or ADVICE[status]

    message = (
        f"{field.label} {phrase}: {field.value} "
        f"(reference {field.normal_range}). {advice}"
    )

    return True, Recommendation(
        severity=severity,
        category=category,
        field_keys=(key,),
        message=message,
        kind="field",
        status=status,
        group=field.group,
    )
