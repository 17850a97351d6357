"""Shared pytest fixtures for lab_interpreter tests."""

import pytest
from lab_interpreter.schemas.config import EngineConfig


@pytest.fixture
def default_config() -> EngineConfig:
    """EngineConfig with the stock critical factors."""
    return EngineConfig()


@pytest.fixture
def mixed_record() -> dict:
    """Record mixing the stored value shapes across categories."""
    return {
        "fbs": {"value": 7.0},
        "hdl": "1.4",
        "hepatitis_b": "Reactive",
        "hiv": {"result": "Non-Reactive"},
        "hemoglobin": 135,
        "platelets": {"value": "90"},
        "date_performed": "2024-03-14",
        "time_performed": "09:30",
        "unknown_field_xyz": 5,
    }


@pytest.fixture
def liver_record() -> dict:
    """AST and ALT both above their upper limits."""
    return {"ast_sgot": {"value": 40}, "alt_sgpt": {"value": 50}}


@pytest.fixture
def normal_record() -> dict:
    """Record with every value inside its reference range."""
    return {
        "fbs": 4.8,
        "cholesterol": {"value": "4.1"},
        "hepatitis_b": "Non-Reactive",
        "color": "Yellow",
    }
