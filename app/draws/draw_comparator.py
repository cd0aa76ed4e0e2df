"""
Compare a CRS total against historical draw cut-offs.

Given the grouped draw history, an applicant profile and the applicant's
total, decide which streams are relevant to the applicant, order them for
display and mark each stream (and each past draw) as cleared or missed.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping

from app.draws.draw_history import GROUPED_DRAWS, DrawCategory, StreamHistory
from app.scoring.crs_profile import ApplicantProfile

ALWAYS_RELEVANT = frozenset({DrawCategory.GENERAL, DrawCategory.PROVINCIAL_NOMINEE})
DEFAULT_HISTORY_LIMIT = 5

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryVerdict:
    score: int
    date: date
    qualified: bool


@dataclass(frozen=True)
class StreamResult:
    stream: str
    category: DrawCategory
    latest_cutoff: int
    relevant: bool
    qualified: bool
    recent_history: tuple[HistoryVerdict, ...]


def is_relevant(stream: StreamHistory, profile: ApplicantProfile) -> bool:
    if stream.category in ALWAYS_RELEVANT:
        return True
    if stream.category.value == profile.occupation_category.value:
        return True
    if stream.category is DrawCategory.CANADIAN_EXPERIENCE and profile.work_years_domestic >= 1:
        return True
    if stream.category is DrawCategory.FRENCH and profile.french.speak >= 7:
        return True
    return False


def _sort_key(result: StreamResult) -> tuple[bool, bool, int]:
    # Relevant first, then general streams, then highest cut-off first.
    return (
        not result.relevant,
        result.category is not DrawCategory.GENERAL,
        -result.latest_cutoff,
    )


def _evaluate(stream: StreamHistory, profile: ApplicantProfile, total: int, history_limit: int | None) -> StreamResult:
    history = stream.history if history_limit is None else stream.history[:history_limit]
    return StreamResult(
        stream=stream.stream,
        category=stream.category,
        latest_cutoff=stream.latest_cutoff,
        relevant=is_relevant(stream, profile),
        qualified=total >= stream.latest_cutoff,
        recent_history=tuple(
            HistoryVerdict(score=draw.score, date=draw.date, qualified=total >= draw.score)
            for draw in history
        ),
    )


def rank_streams(
    grouped_history: Mapping[str, StreamHistory] | Iterable[StreamHistory],
    profile: ApplicantProfile,
    total: int,
    history_limit: int | None = DEFAULT_HISTORY_LIMIT,
) -> list[StreamResult]:
    """
    Rank streams for `profile` and give a verdict for `total` against each.

    `history_limit` caps the number of recent draws attached to each result;
    pass None to keep the full history.
    """
    if history_limit is not None and history_limit < 0:
        raise ValueError(f"history_limit must be >= 0, got {history_limit}")
    streams = grouped_history.values() if isinstance(grouped_history, Mapping) else grouped_history
    results = [_evaluate(stream, profile, total, history_limit) for stream in streams]
    return sorted(results, key=_sort_key)


def history_limit_from_env() -> int:
    """
    Read DRAW_HISTORY_LIMIT, defaulting to DEFAULT_HISTORY_LIMIT.

    Raises ValueError if the value is not a non-negative integer.
    """
    raw = os.getenv("DRAW_HISTORY_LIMIT")
    if raw is None or not raw.strip():
        return DEFAULT_HISTORY_LIMIT
    try:
        limit = int(raw)
    except ValueError:
        logger.error(f"Invalid DRAW_HISTORY_LIMIT: {raw!r}")
        raise ValueError(f"DRAW_HISTORY_LIMIT must be an integer, got {raw!r}") from None
    if limit < 0:
        logger.error(f"Invalid DRAW_HISTORY_LIMIT: {raw!r}")
        raise ValueError(f"DRAW_HISTORY_LIMIT must be >= 0, got {limit}")
    return limit


def compare_draws(profile: ApplicantProfile, total: int, history_limit: int | None = DEFAULT_HISTORY_LIMIT) -> list[StreamResult]:
    """rank_streams against the built-in draw history."""
    return rank_streams(GROUPED_DRAWS, profile, total, history_limit=history_limit)
