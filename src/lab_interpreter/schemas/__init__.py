"""Schema definitions for lab result interpretation."""
from lab_interpreter.schemas.lab_report import (
    Category,
    CategoryDefinition,
    CategoryResult,
    FieldDefinition,
    FieldResult,
    ReferenceRange,
)
from lab_interpreter.schemas.recommendation import Recommendation, Severity
from lab_interpreter.schemas.pipeline import StageResult, InterpretationResult
from lab_interpreter.schemas.config import EngineConfig

__all__ = [
    "Category", "CategoryDefinition", "CategoryResult", "FieldDefinition",
    "FieldResult", "ReferenceRange", "Recommendation", "Severity",
    "StageResult", "InterpretationResult", "EngineConfig",
]
