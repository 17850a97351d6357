from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping

from lab_interpreter.schemas.lab_report import (
    Category,
    CategoryDefinition,
    FieldDefinition,
    ReferenceRange,
)


def _category(
    category: Category, title: str, rows: list[tuple[str, str, str, str]]
) -> CategoryDefinition:
    return CategoryDefinition(
        title=title,
        fields=tuple(
            FieldDefinition(
                key=key,
                label=label,
                normal_range=normal_range,
                category=category,
                group=group,
            )
            for key, label, normal_range, group in rows
        ),
    )


FIELD_REGISTRY: Mapping[str, CategoryDefinition] = MappingProxyType(
    {
        "chemistry": _category(
            "chemistry",
            "CLINICAL CHEMISTRY",
            [
                ("fbs", "Glucose (FBS/RBS)", "3.89-5.83 mmol/L", "glucose"),
                ("cholesterol", "Total Cholesterol", "3.5-5.2 mmol/L", "lipids"),
                ("triglyceride", "Triglycerides", "<2.26 mmol/L", "lipids"),
                ("hdl", "HDL Cholesterol", ">1.05 mmol/L", "lipids"),
                ("ldl", "LDL Cholesterol", "<2.9 mmol/L", "lipids"),
                ("bua", "Uric Acid", "156-360 umol/L", "kidney"),
                ("bun", "BUN (Blood Urea Nitrogen)", "1.7-8.3 mmol/L", "kidney"),
                ("creatinine", "Creatinine", "53-97 umol/L", "kidney"),
                ("ast_sgot", "AST/SGOT", "<31 U/L", "liver"),
                ("alt_sgpt", "ALT/SGPT", "<34 U/L", "liver"),
                ("sodium", "Sodium (Na)", "136-150 mmol/L", "electrolytes"),
                ("potassium", "Potassium (K)", "3.5-5.0 mmol/L", "electrolytes"),
                ("chloride", "Chloride (Cl)", "94-110 mmol/L", "electrolytes"),
                ("magnesium", "Magnesium (Mg)", "0.70-1.05 mmol/L", "electrolytes"),
                ("phosphorus", "Phosphorus (P)", "0.85-1.50 mmol/L", "electrolytes"),
                # OGTT curve
                ("ogtt_fasting", "OGTT Fasting", "70-100 mg/dL", "ogtt"),
                ("ogtt_30min", "OGTT 30 min", "<180 mg/dL", "ogtt"),
                ("ogtt_60min", "OGTT 60 min", "<180 mg/dL", "ogtt"),
                ("ogtt_90min", "OGTT 90 min", "<155 mg/dL", "ogtt"),
                ("ogtt_120min", "OGTT 120 min", "<140 mg/dL", "ogtt"),
                ("fecalysis", "Fecalysis", "See reference", "other"),
            ],
        ),
        "immunology": _category(
            "immunology",
            "SEROLOGY/IMMUNOLOGY",
            [
                ("hepatitis_b", "Hepatitis B Antigen (HbsAg)", "Non-Reactive", "serology"),
                ("hepatitis_c", "Hepatitis C", "Non-Reactive", "serology"),
                ("hiv", "HIV Screening", "Non-Reactive", "serology"),
                ("vdrl", "VDRL (Syphilis)", "Non-Reactive", "serology"),
                # Dengue Duo
                ("dengue_ns1", "Dengue NS1 Antigen", "Negative", "dengue"),
                ("dengue_igg", "Dengue IgG Antibody", "Negative", "dengue"),
                ("dengue_igm", "Dengue IgM Antibody", "Negative", "dengue"),
                ("salmonella_igg", "Salmonella IgG", "Non-Reactive", "salmonella"),
                ("salmonella_igm", "Salmonella IgM", "Non-Reactive", "salmonella"),
                ("hpylori_antigen", "H. Pylori Antigen", "Negative", "hpylori"),
                ("hpylori_antibody", "H. Pylori Antibody", "Negative", "hpylori"),
                ("psa", "PSA (Prostate Specific Antigen)", "<4.0 ng/mL", "tumor_markers"),
                ("crp", "CRP (C-Reactive Protein)", "<3.0 mg/L", "inflammation"),
            ],
        ),
        "hematology": _category(
            "hematology",
            "HEMATOLOGY",
            [
                ("hemoglobin", "Hemoglobin", "110-160 g/L", "basic"),
                ("hematocrit", "Hematocrit", "37-54%", "basic"),
                ("rbc", "RBC Count", "3.50-5.50 x10¹²/L", "basic"),
                ("platelets", "Platelet Count", "150-450 x10⁹/L", "basic"),
                ("wbc", "WBC Count", "4.0-10.0 x10⁹/L", "basic"),
                ("mcv", "MCV", "80-100 fL", "indices"),
                ("mch", "MCH", "27.0-34.0 pg", "indices"),
                ("mchc", "MCHC", "320-360 g/L", "indices"),
                ("neutrophils", "Segmenters (Neutrophils)", "2.0-7.0 x10⁹/L", "differential"),
                ("lymphocytes", "Lymphocytes", "0.8-4.0 x10⁹/L", "differential"),
                ("monocytes", "Monocytes", "0.1-1.5 x10⁹/L", "differential"),
                ("eosinophils", "Eosinophils", "0.0-0.4 x10⁹/L", "differential"),
                ("basophils", "Basophils", "0.0-0.1 x10⁹/L", "differential"),
                ("esr", "ESR (Erythrocyte Sedimentation Rate)", "<20 mm/hr", "other"),
                ("aptt", "APTT (Activated Partial Thromboplastin Time)", "25-35 seconds", "coagulation"),
                ("pt", "PT (Prothrombin Time)", "11-15 seconds", "coagulation"),
                ("inr", "INR (International Normalized Ratio)", "0.8-1.2", "coagulation"),
                ("bleeding_time", "Bleeding Time", "1-6 minutes", "coagulation"),
                ("clotting_time", "Clotting Time", "5-15 minutes", "coagulation"),
            ],
        ),
        "urinalysis": _category(
            "urinalysis",
            "CLINICAL MICROSCOPY",
            [
                ("color", "Color", "Yellow", "urine_physical"),
                ("transparency", "Transparency", "Clear", "urine_physical"),
                ("specificGravity", "Specific Gravity", "1.003-1.030", "urine_physical"),
                ("ph", "pH", "4.6-8.0", "urine_chemical"),
                ("protein", "Protein", "Negative", "urine_chemical"),
                ("glucose", "Glucose", "Negative", "urine_chemical"),
                ("ketones", "Ketones", "Negative", "urine_chemical"),
                ("bilirubin", "Bilirubin", "Negative", "urine_chemical"),
                ("urobilinogen", "Urobilinogen", "Normal", "urine_chemical"),
                ("blood", "Blood", "Negative", "urine_chemical"),
                ("leukocytes", "Leukocytes", "Negative", "urine_chemical"),
                ("nitrites", "Nitrites", "Negative", "urine_chemical"),
                ("pregnancy_test_urine", "Pregnancy Test (Urine)", "Negative", "pregnancy"),
                ("pregnancy_test_serum", "Pregnancy Test (Serum/β-HCG)", "Negative", "pregnancy"),
            ],
        ),
    }
)

CATEGORIES: tuple[str, ...] = tuple(FIELD_REGISTRY)

# Shown in the report header rather than as results
RESERVED_META_FIELDS = frozenset(
    {"date_performed", "datePerformed", "time_performed", "timePerformed"}
)

QUALITATIVE_NORMALS = frozenset(
    {"negative", "non-reactive", "normal", "yellow", "clear", "few", "none", "none-seen"}
)

_NUMBER = r"(\d+(?:\.\d+)?)"
_INTERVAL_RE = re.compile(rf"^{_NUMBER}\s*-\s*{_NUMBER}\s*(.*)$")
_UPPER_RE = re.compile(rf"^<\s*{_NUMBER}\s*(.*)$")
_LOWER_RE = re.compile(rf"^>\s*{_NUMBER}\s*(.*)$")


def fields_of(category: str) -> tuple[FieldDefinition, ...]:
    definition = FIELD_REGISTRY.get(category)
    if definition is None:
        return ()
    return definition.fields


def definition_of(category: str, key: str) -> FieldDefinition | None:
    for field in fields_of(category):
        if field.key == key:
            return field
    return None


def category_title(category: str) -> str | None:
    definition = FIELD_REGISTRY.get(category)
    return definition.title if definition is not None else None


def normalize_token(text: str) -> str:
    """Lowercase and collapse separators: "Non Reactive" -> "non-reactive"."""
    return re.sub(r"[\s_\-]+", "-", text.strip().lower())


def parse_reference_range(text: str | None) -> ReferenceRange | None:
    """
    Parse a reference range string.

    Recognized forms:
    1. "lo-hi unit"  e.g. "3.89-5.83 mmol/L", "37-54%"
    2. "<x unit"     e.g. "<31 U/L"
    3. ">x unit"     e.g. ">1.05 mmol/L"
    4. a qualitative expectation, e.g. "Negative", "Non-Reactive"

    Returns None for anything else ("See reference", "A/B/AB/O").
    """
    if not text or not isinstance(text, str):
        return None

    stripped = text.strip()

    match = _INTERVAL_RE.match(stripped)
    if match:
        low, high = float(match.group(1)), float(match.group(2))
        if low > high:
            return None
        return ReferenceRange(
            kind="interval", low=low, high=high, unit=match.group(3).strip() or None
        )

    match = _UPPER_RE.match(stripped)
    if match:
        return ReferenceRange(
            kind="upper", high=float(match.group(1)), unit=match.group(2).strip() or None
        )

    match = _LOWER_RE.match(stripped)
    if match:
        return ReferenceRange(
            kind="lower", low=float(match.group(1)), unit=match.group(2).strip() or None
        )

    if normalize_token(stripped) in QUALITATIVE_NORMALS:
        return ReferenceRange(kind="qualitative", text=stripped)

    return None
