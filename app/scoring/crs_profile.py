"""
Applicant profile and score breakdown types for CRS scoring.

Everything here is immutable. The questionnaire layer builds an
ApplicantProfile once per scoring call; the engine returns a fresh
ScoreBreakdown and never mutates either object.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class MaritalStatus(str, Enum):
    SINGLE = "single"
    MARRIED = "married"
    COMMON_LAW = "common_law"


class EducationLevel(str, Enum):
    """Highest completed credential, lowest to highest."""

    NONE = "none"
    SECONDARY = "secondary"
    ONE_YEAR = "one_year"
    TWO_YEAR = "two_year"
    THREE_YEAR = "three_year"
    TWO_OR_MORE = "two_or_more"
    MASTERS = "masters"
    PHD = "phd"


class DomesticEducationTier(str, Enum):
    NONE = "none"
    ONE_OR_TWO_YEAR = "one_or_two_year"
    THREE_YEAR_OR_MORE = "three_year_or_more"


class OccupationCategory(str, Enum):
    GENERAL = "general"
    HEALTHCARE = "healthcare"
    STEM = "stem"
    TRADES = "trades"
    TRANSPORT = "transport"
    AGRICULTURE = "agriculture"
    FRENCH = "french"
    NONE = "none"


def normalize_choice(value: Any) -> Any:
    """Lower-case a questionnaire answer and turn spaces and hyphens into underscores."""
    if isinstance(value, str):
        return value.strip().lower().replace("-", "_").replace(" ", "_")
    return value


@dataclass(frozen=True)
class LanguageScore:
    """Benchmark level (CLB / NCLC) for each of the four abilities."""

    speak: int = 0
    listen: int = 0
    read: int = 0
    write: int = 0

    def skills(self) -> tuple[int, int, int, int]:
        return (self.speak, self.listen, self.read, self.write)

    def all_at_least(self, level: int) -> bool:
        return all(skill >= level for skill in self.skills())


@dataclass(frozen=True)
class SpouseProfile:
    accompanying: bool = False
    is_domestic_citizen_or_resident: bool = False
    education: EducationLevel = EducationLevel.NONE
    work_years_domestic: int = 0
    english: LanguageScore = field(default_factory=LanguageScore)


@dataclass(frozen=True)
class ApplicantProfile:
    """Normalized input for CRS computation."""

    age: int
    education: EducationLevel
    english: LanguageScore
    marital_status: MaritalStatus = MaritalStatus.SINGLE
    spouse: SpouseProfile | None = None
    domestic_education: DomesticEducationTier = DomesticEducationTier.NONE
    french: LanguageScore = field(default_factory=LanguageScore)
    work_years_domestic: int = 0
    work_years_foreign: int = 0
    has_trade_certificate: bool = False
    has_provincial_nomination: bool = False
    has_sibling_domestic: bool = False
    occupation_category: OccupationCategory = OccupationCategory.NONE

    @property
    def with_spouse(self) -> bool:
        """Whether the married column of the core tables applies."""
        if self.marital_status not in (MaritalStatus.MARRIED, MaritalStatus.COMMON_LAW):
            return False
        if self.spouse is None:
            return False
        return self.spouse.accompanying and not self.spouse.is_domestic_citizen_or_resident


@dataclass(frozen=True)
class CoreFactors:
    age: int = 0
    education: int = 0
    language: int = 0
    domestic_work: int = 0
    subtotal: int = 0


@dataclass(frozen=True)
class SpouseFactors:
    education: int = 0
    language: int = 0
    work: int = 0
    subtotal: int = 0


@dataclass(frozen=True)
class TransferabilityFactors:
    education_combo: int = 0
    foreign_work_combo: int = 0
    certificate_combo: int = 0
    subtotal: int = 0


@dataclass(frozen=True)
class AdditionalFactors:
    sibling: int = 0
    french_bonus: int = 0
    domestic_education_bonus: int = 0
    provincial_nomination: int = 0
    subtotal: int = 0


@dataclass(frozen=True)
class ScoreBreakdown:
    """CRS computation result, itemized by section."""

    core: CoreFactors
    spouse_factors: SpouseFactors
    transferability: TransferabilityFactors
    additional: AdditionalFactors
    total: int
    with_spouse: bool = False
    policy_epoch: str = ""
