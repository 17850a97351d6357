from __future__ import annotations
from typing import Literal
from pydantic import BaseModel, ConfigDict, field_validator

Severity = Literal["info", "warning", "critical"]
FlagStatus = Literal["high", "low", "abnormal", "normal"]

# Lower rank sorts first
SEVERITY_RANK: dict[str, int] = {"critical": 0, "warning": 1, "info": 2}


class Recommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    severity: Severity
    category: str  # Registry category, or "overall" for the normal assessment
    field_keys: tuple[str, ...]
    message: str
    kind: Literal["field", "pattern", "overall"] = "field"
    status: FlagStatus | None = None  # None for pattern recommendations
    group: str | None = None

    @field_validator("field_keys")
    @classmethod
    def _dedupe_keys(cls, keys: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(keys))
