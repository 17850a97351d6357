from __future__ import annotations
from typing import Any, Literal
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

Category = Literal["chemistry", "immunology", "hematology", "urinalysis"]


class FieldDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str  # e.g., "fbs", "hepatitis_b"
    label: str  # e.g., "Glucose (FBS/RBS)"
    normal_range: str  # e.g., "3.89-5.83 mmol/L", "Non-Reactive"
    category: Category
    group: str  # Sub-panel, e.g., "liver", "dengue"


class CategoryDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    fields: tuple[FieldDefinition, ...]


class ReferenceRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["interval", "upper", "lower", "qualitative"]
    low: float | None = None
    high: float | None = None
    unit: str | None = None
    text: str | None = None  # For non-numeric ranges like "Negative"


class FieldResult(BaseModel):
    label: str
    value: Any  # Canonical scalar: "Reactive", 7.0, "1.015"
    normal_range: str = Field(
        validation_alias=AliasChoices("normal_range", "normalRange")
    )
    group: str = "other"


class CategoryResult(BaseModel):
    title: str
    fields: dict[str, FieldResult]
