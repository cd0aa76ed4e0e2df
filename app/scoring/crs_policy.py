"""
CRS point tables, versioned by policy epoch.

The engine never hard-codes a point value: it reads every table from a
CRSPolicy. When IRCC publishes new values, register a new epoch here and
point CRS_POLICY_EPOCH at it; crs_engine.py does not change.

Tables follow the official criteria:
https://www.canada.ca/en/immigration-refugees-citizenship/services/immigrate-canada/express-entry/check-score/crs-criteria.html
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from app.scoring.crs_profile import DomesticEducationTier, EducationLevel

logger = logging.getLogger(__name__)

# (single, with_spouse)
PointPair = tuple[int, int]


class UnknownPolicyError(KeyError):
    """Raised when a policy epoch is not registered."""


@dataclass(frozen=True)
class CRSPolicy:
    """One version of every table the scoring engine reads."""

    epoch: str
    description: str
    age_points: Mapping[int, PointPair]
    education_points: Mapping[EducationLevel, PointPair]
    # Threshold tables: (minimum benchmark, points), highest threshold first.
    first_language_points: tuple[tuple[int, PointPair], ...]
    second_language_points: tuple[tuple[int, int], ...]
    domestic_work_points: tuple[PointPair, ...]
    spouse_education_points: Mapping[EducationLevel, int]
    spouse_work_points: tuple[int, ...]
    spouse_language_points: tuple[tuple[int, int], ...]
    domestic_education_points: Mapping[DomesticEducationTier, int]
    # Points for the four ordered tiers of every transferability pair.
    combo_tier_points: tuple[int, int, int, int] = (50, 25, 25, 13)
    combo_cap: int = 50
    # (all abilities >= 7, all abilities >= 5)
    certificate_points: tuple[int, int] = (50, 25)
    transferability_cap: int = 100
    sibling_points: int = 15
    # (English >= 5 in all abilities, otherwise)
    french_bonus_points: tuple[int, int] = (50, 25)
    provincial_nomination_points: int = 600
    additional_cap: int = 600
    max_work_years: int = 5
    metadata: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def rules_summary(self) -> dict[str, Any]:
        """Headline maxima of this policy, derived from its tables."""
        first_lang_max = max(points for _, points in self.first_language_points)
        second_lang_max = max(points for _, points in self.second_language_points)
        age_single = max(single for single, _ in self.age_points.values())
        age_spouse = max(spouse for _, spouse in self.age_points.values())
        edu_single = max(single for single, _ in self.education_points.values())
        edu_spouse = max(spouse for _, spouse in self.education_points.values())
        work_single, work_spouse = self.domestic_work_points[-1]
        lang_single = first_lang_max[0] * 4 + second_lang_max * 4
        lang_spouse = first_lang_max[1] * 4 + second_lang_max * 4
        return {
            "epoch": self.epoch,
            "core_max_single": age_single + edu_single + lang_single + work_single,
            "core_max_spouse": age_spouse + edu_spouse + lang_spouse + work_spouse,
            "age_max_single": age_single,
            "age_max_spouse": age_spouse,
            "education_max_single": edu_single,
            "education_max_spouse": edu_spouse,
            "language_max_single": lang_single,
            "language_max_spouse": lang_spouse,
            "canadian_work_max_single": work_single,
            "canadian_work_max_spouse": work_spouse,
            "spouse_factors_max": (
                max(self.spouse_education_points.values())
                + self.spouse_work_points[-1]
                + max(points for _, points in self.spouse_language_points) * 4
            ),
            "transferability_max": self.transferability_cap,
            "additional_max": self.additional_cap,
            "provincial_nomination": self.provincial_nomination_points,
            "canadian_study_1_2yr": self.domestic_education_points[DomesticEducationTier.ONE_OR_TWO_YEAR],
            "canadian_study_3plus": self.domestic_education_points[DomesticEducationTier.THREE_YEAR_OR_MORE],
            "sibling": self.sibling_points,
            "certificate_qualification": self.certificate_points[0],
            "french_bonus_max": self.french_bonus_points[0],
            "second_language_per_skill": second_lang_max,
        }

    def signature(self) -> str:
        """Short stable hash of the rules summary, for change detection."""
        rules_str = json.dumps(self.rules_summary(), sort_keys=True)
        return hashlib.sha256(rules_str.encode()).hexdigest()[:16]


def _age_table() -> dict[int, PointPair]:
    table = {18: (99, 90), 19: (105, 95)}
    for age in range(20, 30):
        table[age] = (110, 100)
    table.update({
        30: (105, 95), 31: (99, 90), 32: (94, 85), 33: (88, 80),
        34: (83, 75), 35: (77, 70), 36: (72, 65), 37: (66, 60),
        38: (61, 55), 39: (55, 50), 40: (50, 45), 41: (39, 35),
        42: (28, 25), 43: (17, 15), 44: (6, 5),
    })
    return table


# Job offer points were removed on March 25, 2025.
CRS_POLICY_2025_03 = CRSPolicy(
    epoch="2025-03-25",
    description="Express Entry CRS, job offer points removed",
    age_points=MappingProxyType(_age_table()),
    education_points=MappingProxyType({
        EducationLevel.NONE: (0, 0),
        EducationLevel.SECONDARY: (30, 28),
        EducationLevel.ONE_YEAR: (90, 84),
        EducationLevel.TWO_YEAR: (98, 91),
        EducationLevel.THREE_YEAR: (120, 112),
        EducationLevel.TWO_OR_MORE: (128, 119),
        EducationLevel.MASTERS: (135, 126),
        EducationLevel.PHD: (150, 140),
    }),
    first_language_points=(
        (10, (34, 32)),
        (9, (31, 29)),
        (8, (23, 22)),
        (7, (17, 16)),
        (6, (9, 8)),
        (4, (6, 6)),
    ),
    second_language_points=((9, 6), (7, 3), (5, 1)),
    domestic_work_points=((0, 0), (40, 35), (53, 46), (64, 56), (72, 63), (80, 70)),
    spouse_education_points=MappingProxyType({
        EducationLevel.NONE: 0,
        EducationLevel.SECONDARY: 2,
        EducationLevel.ONE_YEAR: 6,
        EducationLevel.TWO_YEAR: 7,
        EducationLevel.THREE_YEAR: 8,
        EducationLevel.TWO_OR_MORE: 9,
        EducationLevel.MASTERS: 10,
        EducationLevel.PHD: 10,
    }),
    spouse_work_points=(0, 5, 7, 8, 9, 10),
    spouse_language_points=((9, 5), (7, 3), (5, 1)),
    domestic_education_points=MappingProxyType({
        DomesticEducationTier.NONE: 0,
        DomesticEducationTier.ONE_OR_TWO_YEAR: 15,
        DomesticEducationTier.THREE_YEAR_OR_MORE: 30,
    }),
    metadata=MappingProxyType({"job_offer_points": "removed_2025_03_25"}),
)

POLICIES: Mapping[str, CRSPolicy] = MappingProxyType({
    CRS_POLICY_2025_03.epoch: CRS_POLICY_2025_03,
})

LATEST_EPOCH = CRS_POLICY_2025_03.epoch


def get_policy(epoch: str | None = None) -> CRSPolicy:
    """
    Return the policy for `epoch`.

    Falls back to CRS_POLICY_EPOCH from the environment, then to the latest
    registered epoch.
    """
    key = epoch or os.getenv("CRS_POLICY_EPOCH") or LATEST_EPOCH
    try:
        return POLICIES[key]
    except KeyError:
        logger.warning("Unknown CRS policy epoch requested: %s", key)
        raise UnknownPolicyError(f"Unknown CRS policy epoch: {key}") from None


def list_epochs() -> list[str]:
    return sorted(POLICIES)
