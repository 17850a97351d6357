"""Lab result interpretation and decision support."""

from lab_interpreter.pipeline.evaluate import evaluate, summarize
from lab_interpreter.pipeline.extract import extract_value
from lab_interpreter.pipeline.organize import organize
from lab_interpreter.pipeline.runner import interpret
from lab_interpreter.schemas.reference_ranges import definition_of, fields_of

__all__ = [
    "definition_of",
    "evaluate",
    "extract_value",
    "fields_of",
    "interpret",
    "organize",
    "summarize",
]
