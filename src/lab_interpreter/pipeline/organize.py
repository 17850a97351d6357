from __future__ import annotations

import logging
from typing import Any

from lab_interpreter.pipeline.extract import extract_value
from lab_interpreter.schemas.lab_report import CategoryResult, FieldResult
from lab_interpreter.schemas.reference_ranges import (
    FIELD_REGISTRY,
    RESERVED_META_FIELDS,
)

logger = logging.getLogger(__name__)


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def organize(record: Any) -> dict[str, CategoryResult]:
    """Group the values present in a raw test record by registry category.

    Categories with no present values are left out, so an empty or missing
    record organizes to {}.
    """
    if record is None:
        return {}

    organized: dict[str, CategoryResult] = {}
    field_count = 0

    for category, definition in FIELD_REGISTRY.items():
        fields: dict[str, FieldResult] = {}

        for field in definition.fields:
            if field.key in RESERVED_META_FIELDS:
                continue

            value = extract_value(field.key, record)
            if not _is_present(value):
                continue

            fields[field.key] = FieldResult(
                label=field.label,
                value=value,
                normal_range=field.normal_range,
                group=field.group,
            )

        if fields:
            organized[category] = CategoryResult(title=definition.title, fields=fields)
            field_count += len(fields)

    logger.info(
        "organize: %d fields in %d categories (%s)",
        field_count,
        len(organized),
        ", ".join(organized) or "none",
    )

    return organized
