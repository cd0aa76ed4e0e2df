"""
Historical Express Entry draw cut-offs.

Static reference data, compiled in and grouped once at import. Nothing in the
process mutates it; callers receive tuples and read-only mappings.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping


class DrawCategory(str, Enum):
    GENERAL = "general"
    CANADIAN_EXPERIENCE = "canadian_experience"
    PROVINCIAL_NOMINEE = "provincial_nominee"
    FRENCH = "french"
    HEALTHCARE = "healthcare"
    STEM = "stem"
    TRADES = "trades"
    TRANSPORT = "transport"
    AGRICULTURE = "agriculture"


@dataclass(frozen=True)
class DrawRecord:
    stream: str
    score: int
    date: date
    category: DrawCategory = DrawCategory.GENERAL


@dataclass(frozen=True)
class DrawPoint:
    score: int
    date: date


@dataclass(frozen=True)
class StreamHistory:
    """All draws of one stream, newest first."""

    stream: str
    category: DrawCategory
    history: tuple[DrawPoint, ...]

    def __post_init__(self) -> None:
        if not self.history:
            raise ValueError(f"Stream {self.stream!r} has no draws")

    @property
    def latest_cutoff(self) -> int:
        return self.history[0].score

    @property
    def latest_date(self) -> date:
        return self.history[0].date


GENERAL = "General / All Programs"
CEC = "Canadian Experience Class (CEC)"
PNP = "Provincial Nominee Program (PNP)"
FRENCH = "French Proficiency"
HEALTHCARE = "Healthcare Occupations"
TRADES = "Trades Occupations"
STEM = "STEM Occupations"
TRANSPORT = "Transport Occupations"

ALL_DRAW_HISTORY: tuple[DrawRecord, ...] = (
    # General draws (no specific category)
    DrawRecord(GENERAL, 529, date(2024, 4, 23)),
    DrawRecord(GENERAL, 535, date(2024, 4, 2)),
    DrawRecord(GENERAL, 531, date(2024, 3, 17)),
    DrawRecord(GENERAL, 542, date(2024, 2, 26)),
    DrawRecord(GENERAL, 557, date(2024, 2, 12)),

    DrawRecord(CEC, 533, date(2025, 11, 12), DrawCategory.CANADIAN_EXPERIENCE),
    DrawRecord(CEC, 541, date(2025, 9, 5), DrawCategory.CANADIAN_EXPERIENCE),
    DrawRecord(CEC, 550, date(2025, 7, 21), DrawCategory.CANADIAN_EXPERIENCE),
    DrawRecord(CEC, 560, date(2025, 5, 10), DrawCategory.CANADIAN_EXPERIENCE),
    DrawRecord(CEC, 575, date(2025, 3, 1), DrawCategory.CANADIAN_EXPERIENCE),

    DrawRecord(PNP, 738, date(2025, 11, 10), DrawCategory.PROVINCIAL_NOMINEE),
    DrawRecord(PNP, 752, date(2025, 8, 19), DrawCategory.PROVINCIAL_NOMINEE),
    DrawRecord(PNP, 765, date(2025, 6, 30), DrawCategory.PROVINCIAL_NOMINEE),
    DrawRecord(PNP, 780, date(2025, 5, 5), DrawCategory.PROVINCIAL_NOMINEE),
    DrawRecord(PNP, 791, date(2025, 3, 11), DrawCategory.PROVINCIAL_NOMINEE),

    # Category-based draws
    DrawRecord(FRENCH, 416, date(2025, 10, 29), DrawCategory.FRENCH),
    DrawRecord(FRENCH, 425, date(2025, 8, 10), DrawCategory.FRENCH),
    DrawRecord(FRENCH, 430, date(2025, 6, 15), DrawCategory.FRENCH),
    DrawRecord(FRENCH, 451, date(2025, 4, 8), DrawCategory.FRENCH),
    DrawRecord(FRENCH, 460, date(2025, 2, 14), DrawCategory.FRENCH),

    DrawRecord(HEALTHCARE, 462, date(2025, 11, 14), DrawCategory.HEALTHCARE),
    DrawRecord(HEALTHCARE, 470, date(2025, 9, 29), DrawCategory.HEALTHCARE),
    DrawRecord(HEALTHCARE, 485, date(2025, 7, 11), DrawCategory.HEALTHCARE),
    DrawRecord(HEALTHCARE, 490, date(2025, 5, 20), DrawCategory.HEALTHCARE),
    DrawRecord(HEALTHCARE, 501, date(2025, 3, 10), DrawCategory.HEALTHCARE),

    DrawRecord(TRADES, 505, date(2025, 9, 18), DrawCategory.TRADES),
    DrawRecord(TRADES, 512, date(2025, 7, 1), DrawCategory.TRADES),
    DrawRecord(TRADES, 520, date(2025, 5, 1), DrawCategory.TRADES),
    DrawRecord(TRADES, 528, date(2025, 2, 15), DrawCategory.TRADES),

    DrawRecord(STEM, 491, date(2024, 4, 11), DrawCategory.STEM),
    DrawRecord(STEM, 499, date(2024, 3, 1), DrawCategory.STEM),
    DrawRecord(STEM, 505, date(2024, 1, 10), DrawCategory.STEM),

    DrawRecord(TRANSPORT, 430, date(2024, 3, 13), DrawCategory.TRANSPORT),
    DrawRecord(TRANSPORT, 445, date(2024, 2, 1), DrawCategory.TRANSPORT),
    DrawRecord(TRANSPORT, 450, date(2023, 12, 15), DrawCategory.TRANSPORT),
)


def group_draws(records: Iterable[DrawRecord]) -> Mapping[str, StreamHistory]:
    """
    Group draw records by stream, newest draw first within each stream.

    Streams keep the order in which they first appear in `records`. A stream's
    category is taken from its first record.
    """
    buckets: dict[str, list[DrawRecord]] = {}
    for record in records:
        buckets.setdefault(record.stream, []).append(record)

    grouped: dict[str, StreamHistory] = {}
    for stream, draws in buckets.items():
        ordered = sorted(draws, key=lambda d: d.date, reverse=True)
        grouped[stream] = StreamHistory(
            stream=stream,
            category=draws[0].category,
            history=tuple(DrawPoint(score=d.score, date=d.date) for d in ordered),
        )
    return MappingProxyType(grouped)


GROUPED_DRAWS: Mapping[str, StreamHistory] = group_draws(ALL_DRAW_HISTORY)
