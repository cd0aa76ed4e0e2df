"""Schemas for eligibility, CRS compute and draw comparison API."""

from __future__ import annotations

import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.draws.draw_history import DrawCategory
from app.scoring.crs_profile import (
    ApplicantProfile,
    DomesticEducationTier,
    EducationLevel,
    LanguageScore,
    MaritalStatus,
    OccupationCategory,
    SpouseProfile,
    normalize_choice,
)
from app.utils.education_labels import parse_education

DISCLAIMER = (
    "This tool is for general guidance only. Official IRCC system results govern. "
    "See Canada.ca Express Entry CRS calculator. Not legal advice."
)


class LanguageScoreIn(BaseModel):
    """Benchmark level (CLB / NCLC) per ability."""

    model_config = ConfigDict(extra="forbid")

    speak: int = Field(0, ge=0, le=12)
    listen: int = Field(0, ge=0, le=12)
    read: int = Field(0, ge=0, le=12)
    write: int = Field(0, ge=0, le=12)

    def to_domain(self) -> LanguageScore:
        return LanguageScore(speak=self.speak, listen=self.listen, read=self.read, write=self.write)


class SpouseIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    accompanying: bool = False
    is_domestic_citizen_or_resident: bool = False
    education: EducationLevel = EducationLevel.NONE
    work_years_domestic: int = Field(0, ge=0, le=60)
    english: LanguageScoreIn = Field(default_factory=LanguageScoreIn)

    @field_validator("education", mode="before")
    @classmethod
    def _education(cls, v: Any) -> EducationLevel:
        return parse_education(v)

    def to_domain(self) -> SpouseProfile:
        return SpouseProfile(
            accompanying=self.accompanying,
            is_domestic_citizen_or_resident=self.is_domestic_citizen_or_resident,
            education=self.education,
            work_years_domestic=self.work_years_domestic,
            english=self.english.to_domain(),
        )


class CRSComputeRequest(BaseModel):
    """
    Applicant profile for POST /eligibility/crs/compute.

    Every optional answer has an explicit default so the engine always
    receives a fully populated profile.
    """

    model_config = ConfigDict(extra="forbid")

    age: int = Field(..., ge=0, le=120, description="Age in years")
    education: EducationLevel = Field(..., description="Enum value or questionnaire label")
    english: LanguageScoreIn = Field(..., description="First official language (CLB)")
    marital_status: MaritalStatus = MaritalStatus.SINGLE
    spouse: SpouseIn | None = None
    domestic_education: DomesticEducationTier = DomesticEducationTier.NONE
    french: LanguageScoreIn = Field(default_factory=LanguageScoreIn, description="Second official language (NCLC)")
    work_years_domestic: int = Field(0, ge=0, le=60)
    work_years_foreign: int = Field(0, ge=0, le=60)
    has_trade_certificate: bool = False
    has_provincial_nomination: bool = False
    has_sibling_domestic: bool = False
    occupation_category: OccupationCategory = OccupationCategory.NONE

    @field_validator("education", mode="before")
    @classmethod
    def _education(cls, v: Any) -> EducationLevel:
        return parse_education(v)

    @field_validator("marital_status", "domestic_education", "occupation_category", mode="before")
    @classmethod
    def _choice(cls, v: Any) -> Any:
        return normalize_choice(v)

    def to_profile(self) -> ApplicantProfile:
        return ApplicantProfile(
            age=self.age,
            education=self.education,
            english=self.english.to_domain(),
            marital_status=self.marital_status,
            spouse=self.spouse.to_domain() if self.spouse else None,
            domestic_education=self.domestic_education,
            french=self.french.to_domain(),
            work_years_domestic=self.work_years_domestic,
            work_years_foreign=self.work_years_foreign,
            has_trade_certificate=self.has_trade_certificate,
            has_provincial_nomination=self.has_provincial_nomination,
            has_sibling_domestic=self.has_sibling_domestic,
            occupation_category=self.occupation_category,
        )


class CoreFactorsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    age: int
    education: int
    language: int = Field(..., description="First and second official language combined")
    domestic_work: int
    subtotal: int


class SpouseFactorsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    education: int
    language: int
    work: int
    subtotal: int = Field(..., description="Max 40")


class TransferabilityFactorsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    education_combo: int
    foreign_work_combo: int
    certificate_combo: int
    subtotal: int = Field(..., description="Max 100")


class AdditionalFactorsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sibling: int
    french_bonus: int
    domestic_education_bonus: int
    provincial_nomination: int
    subtotal: int = Field(..., description="Max 600")


class CRSComputeResponse(BaseModel):
    """Response for POST /eligibility/crs/compute."""

    model_config = ConfigDict(from_attributes=True)

    total: int = Field(..., description="Total CRS score (sum of section subtotals)")
    core: CoreFactorsOut = Field(..., description="Points from age, education, language, Canadian work")
    spouse_factors: SpouseFactorsOut = Field(..., description="Points from spouse education, work, language")
    transferability: TransferabilityFactorsOut = Field(..., description="Education and work experience combinations")
    additional: AdditionalFactorsOut = Field(..., description="Sibling, French, Canadian study, provincial nomination")
    with_spouse: bool = Field(False, description="Whether spouse-adjusted tables were applied")
    policy_epoch: str = Field(..., description="Version of the point tables used")
    disclaimer: str = Field(default=DISCLAIMER, description="Legal disclaimer")


class HistoryVerdictOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    score: int
    date: datetime.date
    qualified: bool


class StreamResultOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    stream: str
    category: DrawCategory
    latest_cutoff: int
    relevant: bool
    qualified: bool = Field(..., description="Score meets the latest cut-off")
    recent_history: list[HistoryVerdictOut]


class DrawCompareResponse(BaseModel):
    """Response for POST /eligibility/draws/compare."""

    breakdown: CRSComputeResponse
    streams: list[StreamResultOut]


class DrawPointOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    score: int
    date: datetime.date


class StreamHistoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    stream: str
    category: DrawCategory
    latest_cutoff: int
    latest_date: datetime.date
    history: list[DrawPointOut]


class PolicyStatusResponse(BaseModel):
    epoch: str
    description: str
    signature: str = Field(..., description="Hash of the policy's headline values")
    available_epochs: list[str]
    rules: dict[str, Any] = Field(default_factory=dict)


class EducationOptionOut(BaseModel):
    value: EducationLevel
    label: str


class CRSRequirementsResponse(BaseModel):
    """Response for POST /eligibility/crs/requirements."""

    can_calculate: bool
    is_complete: bool
    available_fields: list[str] = Field(default_factory=list)
    missing_required: list[str] = Field(default_factory=list)
    missing_optional: list[str] = Field(default_factory=list)
    missing_conditional: list[str] = Field(default_factory=list)
    requirements: list[dict[str, Any]] = Field(default_factory=list)
