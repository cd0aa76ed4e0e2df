"""
Eligibility & CRS scoring API.

Implements POST /api/v1/eligibility/crs/compute and the draw comparison
endpoints. Each request carries the full applicant profile; nothing is
stored between calls.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException, Query

from app.draws.draw_comparator import compare_draws, history_limit_from_env
from app.draws.draw_history import GROUPED_DRAWS
from app.scoring.crs_engine import compute_breakdown
from app.scoring.crs_policy import CRSPolicy, UnknownPolicyError, get_policy, list_epochs
from app.utils.crs_requirements import analyze_crs_requirements
from app.utils.education_labels import education_options
from models.eligibility import (
    CRSComputeRequest,
    CRSComputeResponse,
    CRSRequirementsResponse,
    DrawCompareResponse,
    EducationOptionOut,
    PolicyStatusResponse,
    StreamHistoryOut,
    StreamResultOut,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/eligibility", tags=["eligibility"])


def _history_limit() -> int:
    try:
        return history_limit_from_env()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e))


def _policy_or_404(epoch: str | None) -> CRSPolicy:
    try:
        return get_policy(epoch)
    except UnknownPolicyError as exc:
        raise HTTPException(status_code=404, detail=exc.args[0])


@router.post("/crs/compute", response_model=CRSComputeResponse)
async def crs_compute(
    profile: CRSComputeRequest,
    epoch: str | None = Query(default=None, description="Policy epoch; defaults to the active one"),
) -> CRSComputeResponse:
    """
    Compute the Express Entry CRS score for the submitted profile.

    CRS criteria follow the official [Canada.ca calculator](https://www.canada.ca/en/immigration-refugees-citizenship/services/immigrate-canada/express-entry/check-score.html).
    Job offer points are not awarded (removed March 2025).
    """
    policy = _policy_or_404(epoch)
    breakdown = compute_breakdown(profile.to_profile(), policy)
    logger.info(f"CRS computed: total={breakdown.total}, epoch={breakdown.policy_epoch}")
    return CRSComputeResponse.model_validate(breakdown)


@router.post("/draws/compare", response_model=DrawCompareResponse)
async def draws_compare(
    profile: CRSComputeRequest,
    epoch: str | None = Query(default=None, description="Policy epoch; defaults to the active one"),
) -> DrawCompareResponse:
    """
    Score the profile and compare the total against recent draw cut-offs.

    Streams relevant to the applicant come first, then general draws, then
    the remaining streams by highest cut-off.
    """
    policy = _policy_or_404(epoch)
    applicant = profile.to_profile()
    breakdown = compute_breakdown(applicant, policy)
    streams = compare_draws(applicant, breakdown.total, history_limit=_history_limit())
    qualified = [s.stream for s in streams if s.qualified]
    logger.info(f"Draw comparison: total={breakdown.total}, qualified_streams={len(qualified)}/{len(streams)}")
    return DrawCompareResponse(
        breakdown=CRSComputeResponse.model_validate(breakdown),
        streams=[StreamResultOut.model_validate(s) for s in streams],
    )


@router.get("/draws", response_model=list[StreamHistoryOut])
async def list_draws() -> list[StreamHistoryOut]:
    """Historical cut-offs grouped by stream, newest draw first."""
    return [StreamHistoryOut.model_validate(group) for group in GROUPED_DRAWS.values()]


@router.get("/crs/policy", response_model=PolicyStatusResponse)
async def get_crs_policy(
    epoch: str | None = Query(default=None, description="Policy epoch; defaults to the active one"),
) -> PolicyStatusResponse:
    """
    Show which CRS point tables are in use.

    The signature changes whenever any headline value of the tables does, so
    clients can detect a policy update.
    """
    policy = _policy_or_404(epoch)
    return PolicyStatusResponse(
        epoch=policy.epoch,
        description=policy.description,
        signature=policy.signature(),
        available_epochs=list_epochs(),
        rules=policy.rules_summary(),
    )


@router.get("/education-levels", response_model=list[EducationOptionOut])
async def get_education_levels() -> list[dict[str, str]]:
    """Education options for the questionnaire, lowest credential first."""
    return education_options()


@router.post("/crs/requirements", response_model=CRSRequirementsResponse)
async def crs_requirements(data: dict[str, Any] | None = Body(default=None)) -> dict[str, Any]:
    """
    Report which questionnaire answers are still missing.

    Accepts a partial profile (same field names as /crs/compute). Spouse
    questions are only listed as missing when they apply.
    """
    return analyze_crs_requirements(data or {})
