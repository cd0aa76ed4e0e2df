"""
CRS (Comprehensive Ranking System) scoring engine for Express Entry.

Maps an ApplicantProfile to an itemized ScoreBreakdown. The computation is
pure and total: every well-typed profile has a defined score, out-of-range
ages and benchmarks score 0, and nothing here raises or mutates its input.

Point values come from the CRSPolicy passed in (the latest epoch by default),
so a rule change is a data change in crs_policy.py.

Legal disclaimer: This tool is for general guidance only. Official IRCC
system results govern. See Canada.ca CRS calculator disclaimer.
"""

from __future__ import annotations

import logging
from typing import Iterable

from app.scoring.crs_policy import CRSPolicy, PointPair, get_policy
from app.scoring.crs_profile import (
    AdditionalFactors,
    ApplicantProfile,
    CoreFactors,
    EducationLevel,
    LanguageScore,
    ScoreBreakdown,
    SpouseFactors,
    TransferabilityFactors,
)

logger = logging.getLogger(__name__)

MULTI_CREDENTIAL = frozenset({EducationLevel.TWO_OR_MORE, EducationLevel.MASTERS, EducationLevel.PHD})
NO_POST_SECONDARY = frozenset({EducationLevel.NONE, EducationLevel.SECONDARY})


def _pick(pair: PointPair, with_spouse: bool) -> int:
    single_pts, spouse_pts = pair
    return spouse_pts if with_spouse else single_pts


def _threshold_points(table: Iterable[tuple[int, object]], level: int, default: object = 0):
    """First row whose minimum benchmark is met; tables are highest first."""
    for minimum, points in table:
        if level >= minimum:
            return points
    return default


def _first_match(tiers: Iterable[tuple[bool, int]]) -> int:
    """Evaluate ordered (condition, points) pairs; first true condition wins."""
    for matched, points in tiers:
        if matched:
            return points
    return 0


def _capped_years(years: int, policy: CRSPolicy) -> int:
    return min(max(0, years), policy.max_work_years)


# --- A. Core / human capital ---

def _age_points(age: int, with_spouse: bool, policy: CRSPolicy) -> int:
    pair = policy.age_points.get(age)
    if pair is None:
        return 0
    return _pick(pair, with_spouse)


def _education_points(level: EducationLevel, with_spouse: bool, policy: CRSPolicy) -> int:
    return _pick(policy.education_points[level], with_spouse)


def _first_language_points(score: LanguageScore, with_spouse: bool, policy: CRSPolicy) -> int:
    return sum(
        _pick(_threshold_points(policy.first_language_points, clb, (0, 0)), with_spouse)
        for clb in score.skills()
    )


def _second_language_points(score: LanguageScore, policy: CRSPolicy) -> int:
    # Not adjusted for spouse.
    return sum(_threshold_points(policy.second_language_points, clb) for clb in score.skills())


def _domestic_work_points(years: int, with_spouse: bool, policy: CRSPolicy) -> int:
    return _pick(policy.domestic_work_points[_capped_years(years, policy)], with_spouse)


def _core_factors(p: ApplicantProfile, with_spouse: bool, policy: CRSPolicy) -> CoreFactors:
    age_pts = _age_points(p.age, with_spouse, policy)
    edu_pts = _education_points(p.education, with_spouse, policy)
    lang_pts = _first_language_points(p.english, with_spouse, policy) + _second_language_points(p.french, policy)
    work_pts = _domestic_work_points(p.work_years_domestic, with_spouse, policy)
    return CoreFactors(
        age=age_pts,
        education=edu_pts,
        language=lang_pts,
        domestic_work=work_pts,
        subtotal=age_pts + edu_pts + lang_pts + work_pts,
    )


# --- B. Spouse factors ---

def _spouse_factors(p: ApplicantProfile, with_spouse: bool, policy: CRSPolicy) -> SpouseFactors:
    if not with_spouse or p.spouse is None:
        return SpouseFactors()
    spouse = p.spouse
    edu_pts = policy.spouse_education_points[spouse.education]
    work_pts = policy.spouse_work_points[_capped_years(spouse.work_years_domestic, policy)]
    lang_pts = sum(_threshold_points(policy.spouse_language_points, clb) for clb in spouse.english.skills())
    return SpouseFactors(
        education=edu_pts,
        language=lang_pts,
        work=work_pts,
        subtotal=edu_pts + lang_pts + work_pts,
    )


# --- C. Skill transferability ---

def _education_combo(p: ApplicantProfile, clb7: bool, clb9: bool, policy: CRSPolicy) -> int:
    high, mid_a, mid_b, low = policy.combo_tier_points
    multi = p.education in MULTI_CREDENTIAL
    post_secondary = p.education not in NO_POST_SECONDARY
    years = p.work_years_domestic

    with_language = _first_match([
        (clb9 and multi, high),
        (clb9 and post_secondary, mid_a),
        (clb7 and multi, mid_b),
        (clb7 and post_secondary, low),
    ])
    with_domestic_work = _first_match([
        (years >= 2 and multi, high),
        (years >= 2 and post_secondary, mid_a),
        (years == 1 and multi, mid_b),
        (years == 1 and post_secondary, low),
    ])
    return min(policy.combo_cap, with_language + with_domestic_work)


def _foreign_work_combo(p: ApplicantProfile, clb7: bool, clb9: bool, policy: CRSPolicy) -> int:
    high, mid_a, mid_b, low = policy.combo_tier_points
    foreign = p.work_years_foreign
    domestic = p.work_years_domestic

    with_language = _first_match([
        (clb9 and foreign >= 3, high),
        (clb9 and foreign >= 1, mid_a),
        (clb7 and foreign >= 3, mid_b),
        (clb7 and foreign >= 1, low),
    ])
    with_domestic_work = _first_match([
        (domestic >= 2 and foreign >= 3, high),
        (domestic >= 2 and foreign >= 1, mid_a),
        (domestic == 1 and foreign >= 3, mid_b),
        (domestic == 1 and foreign >= 1, low),
    ])
    return min(policy.combo_cap, with_language + with_domestic_work)


def _certificate_combo(p: ApplicantProfile, clb7: bool, policy: CRSPolicy) -> int:
    if not p.has_trade_certificate:
        return 0
    with_clb7, with_clb5 = policy.certificate_points
    return _first_match([
        (clb7, with_clb7),
        (p.english.all_at_least(5), with_clb5),
    ])


def _transferability_factors(p: ApplicantProfile, policy: CRSPolicy) -> TransferabilityFactors:
    clb7 = p.english.all_at_least(7)
    clb9 = p.english.all_at_least(9)
    edu = _education_combo(p, clb7, clb9, policy)
    foreign = _foreign_work_combo(p, clb7, clb9, policy)
    cert = _certificate_combo(p, clb7, policy)
    return TransferabilityFactors(
        education_combo=edu,
        foreign_work_combo=foreign,
        certificate_combo=cert,
        subtotal=min(policy.transferability_cap, edu + foreign + cert),
    )


# --- D. Additional points ---

def _french_bonus(p: ApplicantProfile, policy: CRSPolicy) -> int:
    if not p.french.all_at_least(7):
        return 0
    with_english, without_english = policy.french_bonus_points
    return with_english if p.english.all_at_least(5) else without_english


def _additional_factors(p: ApplicantProfile, policy: CRSPolicy) -> AdditionalFactors:
    sibling = policy.sibling_points if p.has_sibling_domestic else 0
    french = _french_bonus(p, policy)
    study = policy.domestic_education_points[p.domestic_education]
    pnp = policy.provincial_nomination_points if p.has_provincial_nomination else 0
    return AdditionalFactors(
        sibling=sibling,
        french_bonus=french,
        domestic_education_bonus=study,
        provincial_nomination=pnp,
        subtotal=min(policy.additional_cap, sibling + french + study + pnp),
    )


def compute_breakdown(profile: ApplicantProfile, policy: CRSPolicy | None = None) -> ScoreBreakdown:
    """
    Compute the itemized CRS score for `profile`.

    The total is the plain sum of the four section subtotals; only the
    transferability and additional sections carry caps.
    """
    policy = policy or get_policy()
    with_spouse = profile.with_spouse

    core = _core_factors(profile, with_spouse, policy)
    spouse = _spouse_factors(profile, with_spouse, policy)
    transferability = _transferability_factors(profile, policy)
    additional = _additional_factors(profile, policy)
    total = core.subtotal + spouse.subtotal + transferability.subtotal + additional.subtotal

    logger.debug("CRS computed: total=%s, with_spouse=%s, epoch=%s", total, with_spouse, policy.epoch)
    return ScoreBreakdown(
        core=core,
        spouse_factors=spouse,
        transferability=transferability,
        additional=additional,
        total=total,
        with_spouse=with_spouse,
        policy_epoch=policy.epoch,
    )
