"""Tests for the field registry and reference range parsing."""

import pytest
from lab_interpreter.schemas.reference_ranges import (
    CATEGORIES,
    FIELD_REGISTRY,
    category_title,
    definition_of,
    fields_of,
    parse_reference_range,
)


def test_categories_in_registration_order():
    """Registry exposes the four categories in display order."""
    assert CATEGORIES == ("chemistry", "immunology", "hematology", "urinalysis")


def test_definition_of_fbs():
    """FBS lookup returns label, range and group."""
    field = definition_of("chemistry", "fbs")
    assert field is not None
    assert field.label == "Glucose (FBS/RBS)"
    assert field.normal_range == "3.89-5.83 mmol/L"
    assert field.group == "glucose"
    assert field.category == "chemistry"


def test_definition_of_unknown_returns_none():
    """Unknown keys and categories return None (no exception)."""
    assert definition_of("chemistry", "NONEXISTENT_TEST_XYZ") is None
    assert definition_of("radiology", "fbs") is None
    assert definition_of("immunology", "fbs") is None


def test_fields_of_unknown_category_is_empty():
    """fields_of returns an empty tuple for an unknown category."""
    assert fields_of("radiology") == ()


def test_fields_of_preserves_registration_order():
    """Chemistry fields start with glucose then the lipid panel."""
    keys = [field.key for field in fields_of("chemistry")]
    assert keys[:5] == ["fbs", "cholesterol", "triglyceride", "hdl", "ldl"]


def test_keys_unique_within_category():
    """No category registers the same key twice."""
    for category in CATEGORIES:
        keys = [field.key for field in fields_of(category)]
        assert len(keys) == len(set(keys)), category


def test_registry_size():
    """Registry covers roughly sixty fields."""
    total = sum(len(fields_of(category)) for category in CATEGORIES)
    assert 55 <= total <= 75


def test_registry_is_read_only():
    """Registry mapping and definitions reject mutation."""
    with pytest.raises(TypeError):
        FIELD_REGISTRY["radiology"] = FIELD_REGISTRY["chemistry"]
    with pytest.raises(Exception):
        definition_of("chemistry", "fbs").label = "Changed"


def test_category_title():
    """Category titles follow the lab's report headings."""
    assert category_title("immunology") == "SEROLOGY/IMMUNOLOGY"
    assert category_title("urinalysis") == "CLINICAL MICROSCOPY"
    assert category_title("radiology") is None


def test_parse_interval_range():
    """'lo-hi unit' parses both bounds and unit."""
    ref = parse_reference_range("3.89-5.83 mmol/L")
    assert ref.kind == "interval"
    assert ref.low == pytest.approx(3.89)
    assert ref.high == pytest.approx(5.83)
    assert ref.unit == "mmol/L"


def test_parse_upper_range():
    """'<x unit' parses an exclusive upper bound."""
    ref = parse_reference_range("<31 U/L")
    assert ref.kind == "upper"
    assert ref.high == 31
    assert ref.low is None


def test_parse_lower_range():
    """'>x unit' parses an exclusive lower bound."""
    ref = parse_reference_range(">1.05 mmol/L")
    assert ref.kind == "lower"
    assert ref.low == pytest.approx(1.05)


@pytest.mark.parametrize(
    "text, low, high",
    [
        ("37-54%", 37.0, 54.0),
        ("1.003-1.030", 1.003, 1.030),
        ("0.8-1.2", 0.8, 1.2),
        ("3.50-5.50 x10¹²/L", 3.5, 5.5),
    ],
)
def test_parse_interval_variants(text, low, high):
    """Unitless and percent intervals parse."""
    ref = parse_reference_range(text)
    assert ref is not None
    assert ref.low == pytest.approx(low)
    assert ref.high == pytest.approx(high)


@pytest.mark.parametrize("text", ["Non-Reactive", "Negative", "Normal", "Yellow", "Clear"])
def test_parse_qualitative_range(text):
    """Qualitative expectations are recognized."""
    ref = parse_reference_range(text)
    assert ref.kind == "qualitative"
    assert ref.text == text


@pytest.mark.parametrize("text", ["See reference", "-", "A/B/AB/O", "Positive/Negative", "", None])
def test_parse_unrecognized_returns_none(text):
    """Unrecognized ranges return None gracefully."""
    assert parse_reference_range(text) is None
