"""Declarative clinical rule tables.

Thresholds and wording live here so they can be reviewed apart from the
evaluator. A FieldRule decides the severity of a single out-of-range field;
a PatternRule describes what two or more flagged fields in one group mean.
The first matching rule in each table wins, so specific selectors go first.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from lab_interpreter.schemas.recommendation import Severity

ADVICE = {
    "high": "Recommend follow-up test & doctor consultation.",
    "low": "Possible deficiency; further evaluation suggested.",
    "abnormal": "Recommend clinical correlation and repeat testing.",
    "critical": "URGENT: escalate to physician immediately.",
}


class FieldRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str | None = None
    group: str | None = None
    key: str | None = None
    severity: Severity = "warning"
    advice: str | None = None  # Overrides ADVICE for the flag status

    def matches(self, category: str, group: str, key: str) -> bool:
        return (
            (self.category is None or self.category == category)
            and (self.group is None or self.group == group)
            and (self.key is None or self.key == key)
        )


class PatternRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str | None = None
    group: str | None = None
    severity: Severity = "warning"
    message: str  # Formatted with {labels} and {group}

    def matches(self, category: str, group: str) -> bool:
        return (self.category is None or self.category == category) and (
            self.group is None or self.group == group
        )


_TRANSMISSIBLE_ADVICE = (
    "Immediate clinical review required; confirm with a supplementary assay "
    "and notify the attending physician."
)

FIELD_RULES: tuple[FieldRule, ...] = (
    # Transmissible-disease markers: any deviation is urgent
    FieldRule(category="immunology", group="serology", severity="critical", advice=_TRANSMISSIBLE_ADVICE),
    FieldRule(category="immunology", group="dengue", severity="critical", advice=_TRANSMISSIBLE_ADVICE),
    FieldRule(category="immunology", group="salmonella", severity="critical", advice=_TRANSMISSIBLE_ADVICE),
    FieldRule(category="immunology", group="hpylori", severity="critical", advice=_TRANSMISSIBLE_ADVICE),
    # Informational only
    FieldRule(
        category="urinalysis",
        group="pregnancy",
        severity="info",
        advice="Positive pregnancy result; refer for obstetric confirmation.",
    ),
    FieldRule(
        category="urinalysis",
        group="urine_physical",
        severity="info",
        advice="Note urine appearance; correlate with hydration and chemistry findings.",
    ),
    FieldRule(category="urinalysis", group="urine_chemical", severity="warning"),
    # Everything else
    FieldRule(severity="warning"),
)

PATTERN_RULES: tuple[PatternRule, ...] = (
    PatternRule(
        category="chemistry",
        group="liver",
        message=(
            "Concurrently abnormal liver enzymes ({labels}) suggest hepatocellular "
            "injury; consider a full hepatic panel and hepatology referral."
        ),
    ),
    PatternRule(
        category="chemistry",
        group="lipids",
        message=(
            "Dyslipidaemia pattern ({labels}); assess cardiovascular risk and "
            "review diet and lipid-lowering therapy."
        ),
    ),
    PatternRule(
        category="chemistry",
        group="kidney",
        message=(
            "Multiple renal function markers abnormal ({labels}); evaluate kidney "
            "function (eGFR, urinalysis) and hydration status."
        ),
    ),
    PatternRule(
        category="chemistry",
        group="electrolytes",
        message=(
            "Multiple electrolyte disturbances ({labels}); check hydration, renal "
            "function and current medications."
        ),
    ),
    PatternRule(
        category="chemistry",
        group="ogtt",
        message=(
            "Abnormal glucose tolerance curve ({labels}); evaluate for impaired "
            "glucose tolerance or diabetes mellitus."
        ),
    ),
    PatternRule(
        category="immunology",
        group="serology",
        severity="critical",
        message=(
            "Multiple reactive transmissible-disease markers ({labels}); urgent "
            "infectious disease referral and confirmatory testing required."
        ),
    ),
    PatternRule(
        category="immunology",
        group="dengue",
        severity="critical",
        message=(
            "Dengue serology pattern ({labels}) consistent with dengue infection; "
            "monitor platelet count and hematocrit closely."
        ),
    ),
    PatternRule(
        category="immunology",
        group="salmonella",
        severity="critical",
        message=(
            "Reactive Salmonella antibodies ({labels}); evaluate for enteric fever."
        ),
    ),
    PatternRule(
        category="immunology",
        group="hpylori",
        severity="critical",
        message=(
            "H. pylori antigen and antibody both positive ({labels}); consider "
            "eradication therapy and gastroenterology referral."
        ),
    ),
    PatternRule(
        category="hematology",
        group="basic",
        message=(
            "Multiple blood count abnormalities ({labels}); review peripheral "
            "smear and consider hematology referral."
        ),
    ),
    PatternRule(
        category="hematology",
        group="indices",
        message=(
            "Abnormal red cell indices ({labels}); evaluate for iron deficiency "
            "or other causes of anaemia."
        ),
    ),
    PatternRule(
        category="hematology",
        group="differential",
        message=(
            "Abnormal white cell differential ({labels}); correlate with signs "
            "of infection, inflammation or allergy."
        ),
    ),
    PatternRule(
        category="hematology",
        group="coagulation",
        message=(
            "Multiple coagulation parameters abnormal ({labels}); assess bleeding "
            "risk and anticoagulant use."
        ),
    ),
    PatternRule(
        category="urinalysis",
        group="urine_chemical",
        message=(
            "Multiple abnormal urine chemistry findings ({labels}); consider urine "
            "culture and renal evaluation."
        ),
    ),
    PatternRule(
        severity="info",
        message="Multiple abnormal results in the {group} group ({labels}); review them together.",
    ),
)


def field_rule_for(category: str, group: str, key: str) -> FieldRule:
    for rule in FIELD_RULES:
        if rule.matches(category, group, key):
            return rule
    return FIELD_RULES[-1]


def pattern_rule_for(category: str, group: str) -> PatternRule:
    for rule in PATTERN_RULES:
        if rule.matches(category, group):
            return rule
    return PATTERN_RULES[-1]
