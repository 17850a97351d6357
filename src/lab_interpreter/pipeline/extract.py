from __future__ import annotations

import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Callable

logger = logging.getLogger(__name__)

_MISSING = object()

# Members that wrap the stored scalar, in priority order
WRAPPER_MEMBERS = ("value", "result")


def _from_mapping(record: Any, key: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(key, _MISSING)
    return _MISSING


def _from_attribute(record: Any, key: str) -> Any:
    if isinstance(record, Mapping):
        return _MISSING
    return getattr(record, key, _MISSING)


def _from_getter(record: Any, key: str) -> Any:
    if isinstance(record, Mapping):
        return _MISSING
    getter = getattr(record, "get", None)
    if not callable(getter):
        return _MISSING
    entry = getter(key)
    return _MISSING if entry is None else entry


LOOKUPS: tuple[tuple[str, Callable[[Any, str], Any]], ...] = (
    ("mapping", _from_mapping),
    ("attribute", _from_attribute),
    ("getter", _from_getter),
)


def _unwrap(entry: Any) -> Any:
    for member in WRAPPER_MEMBERS:
        if isinstance(entry, Mapping):
            if member in entry:
                return entry[member]
        elif not isinstance(entry, (str, bytes)) and hasattr(entry, member):
            return getattr(entry, member)
    return entry


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float, Decimal))


def extract_value(field_key: str, record: Any) -> Any:
    """Return the canonical scalar stored under field_key, or None if absent.

    Tries, in order: mapping lookup, attribute access, then get() on an
    associative container. The entry found may be a bare scalar or wrap it
    under a "value" or "result" member. Never raises.
    """
    if record is None or not field_key:
        return None

    try:
        for shape, lookup in LOOKUPS:
            entry = lookup(record, field_key)
            if entry is _MISSING:
                continue

            value = _unwrap(entry)
            if value is None:
                return None
            if not _is_scalar(value):
                logger.debug(
                    "extract: %s via %s has unsupported shape %s",
                    field_key,
                    shape,
                    type(value).__name__,
                )
                return None
            return value
    except Exception as exc:
        logger.warning("extract: failed to read field %r: %s", field_key, exc)
        return None

    return None
