"""
Display labels for education levels, as shown in the questionnaire.

The scoring engine only knows EducationLevel; the long-form wording lives
here and is translated at the request boundary.
"""

from __future__ import annotations

from app.scoring.crs_profile import EducationLevel

EDUCATION_LABELS: dict[EducationLevel, str] = {
    EducationLevel.NONE: "Less than secondary school (high school)",
    EducationLevel.SECONDARY: "Secondary diploma (high school graduation)",
    EducationLevel.ONE_YEAR: "One-year degree, diploma or certificate",
    EducationLevel.TWO_YEAR: "Two-year program",
    EducationLevel.THREE_YEAR: "Bachelor's degree OR three or more year program",
    EducationLevel.TWO_OR_MORE: "Two or more certificates/degrees (One must be for 3+ years)",
    EducationLevel.MASTERS: "Master's degree, or professional degree",
    EducationLevel.PHD: "Doctoral level university degree (Ph.D.)",
}

_LABEL_TO_LEVEL = {label.lower(): level for level, label in EDUCATION_LABELS.items()}
_VALUES = frozenset(level.value for level in EducationLevel)


def parse_education(value: str | EducationLevel) -> EducationLevel:
    """
    Accept an EducationLevel, its value ("masters") or its display label.

    Raises ValueError for anything else.
    """
    if isinstance(value, EducationLevel):
        return value
    key = str(value).strip()
    normalized = key.lower().replace(" ", "_").replace("-", "_")
    if normalized in _VALUES:
        return EducationLevel(normalized)
    level = _LABEL_TO_LEVEL.get(key.lower())
    if level is None:
        raise ValueError(f"Unknown education level: {value!r}")
    return level


def education_options() -> list[dict[str, str]]:
    """Questionnaire options, lowest credential first."""
    return [{"value": level.value, "label": label} for level, label in EDUCATION_LABELS.items()]
