"""Tests for organizing raw records by category."""

from types import SimpleNamespace

import pytest
from lab_interpreter.pipeline.organize import organize
from lab_interpreter.schemas.lab_report import CategoryResult, FieldResult


def test_organize_fbs_scenario():
    """A wrapped FBS value lands in chemistry with registry metadata."""
    organized = organize({"fbs": {"value": 7.0}})
    assert list(organized) == ["chemistry"]
    chemistry = organized["chemistry"]
    assert isinstance(chemistry, CategoryResult)
    assert chemistry.title == "CLINICAL CHEMISTRY"
    assert chemistry.fields["fbs"] == FieldResult(
        label="Glucose (FBS/RBS)",
        value=7.0,
        normal_range="3.89-5.83 mmol/L",
        group="glucose",
    )


@pytest.mark.parametrize("record", [{}, None])
def test_organize_empty_record(record):
    """Empty or missing records organize to {}."""
    assert organize(record) == {}


def test_unknown_field_ignored():
    """Keys unknown to the registry are silently ignored."""
    assert organize({"unknown_field_xyz": 5}) == {}


def test_category_omitted_when_all_absent(mixed_record):
    """Urinalysis is absent because none of its fields were supplied."""
    organized = organize(mixed_record)
    assert "urinalysis" not in organized
    assert list(organized) == ["chemistry", "immunology", "hematology"]


def test_meta_fields_excluded(mixed_record):
    """Date/time performed never appear in any field map."""
    organized = organize(mixed_record)
    for result in organized.values():
        assert "date_performed" not in result.fields
        assert "time_performed" not in result.fields


def test_meta_fields_only_record():
    """A record holding only meta-fields organizes to {}."""
    assert organize({"datePerformed": "2024-03-14", "timePerformed": "09:30"}) == {}


def test_field_order_follows_registry():
    """Field maps follow registration order, not record order."""
    organized = organize({"ldl": 3.1, "fbs": 5.0, "cholesterol": 4.0})
    assert list(organized["chemistry"].fields) == ["fbs", "cholesterol", "ldl"]


def test_empty_and_blank_values_skipped():
    """Empty strings, whitespace and None are not present values."""
    organized = organize({"fbs": "", "hdl": "   ", "ldl": None, "bun": {"value": ""}})
    assert organized == {}


def test_zero_is_a_present_value():
    """Zero is a real measurement, not an absent one."""
    organized = organize({"eosinophils": 0})
    assert organized["hematology"].fields["eosinophils"].value == 0


def test_mixed_shapes_resolve(mixed_record):
    """Every stored shape produces the same canonical value."""
    organized = organize(mixed_record)
    assert organized["chemistry"].fields["fbs"].value == 7.0
    assert organized["chemistry"].fields["hdl"].value == "1.4"
    assert organized["immunology"].fields["hiv"].value == "Non-Reactive"
    assert organized["hematology"].fields["platelets"].value == "90"


def test_attribute_record():
    """Attribute-style records organize the same as mappings."""
    record = SimpleNamespace(hepatitis_b="Reactive", wbc={"result": 12.0})
    organized = organize(record)
    assert organized["immunology"].fields["hepatitis_b"].value == "Reactive"
    assert organized["hematology"].fields["wbc"].value == 12.0


def test_organized_serializes():
    """Organized results dump to plain dicts for the presentation layer."""
    organized = organize({"hiv": "Non-Reactive"})
    data = organized["immunology"].model_dump()
    assert data["title"] == "SEROLOGY/IMMUNOLOGY"
    assert data["fields"]["hiv"]["normal_range"] == "Non-Reactive"
