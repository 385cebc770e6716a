from __future__ import annotations

import math
from dataclasses import dataclass, field

from .models import SortDirection, SortField


@dataclass(frozen=True)
class RankingWeights:
    rating: float = 0.5
    likes: float = 0.3
    recency: float = 0.2

    def __post_init__(self) -> None:
        total = self.rating + self.likes + self.recency
        if not math.isclose(total, 1.0, rel_tol=0.0, abs_tol=1e-9):
            raise ValueError(f"Ranking weights must sum to 1.0, got {total}")


@dataclass(frozen=True)
class ScoringConfig:
    """
    Constants behind the ranking score.

    ``recency_steps`` is a sequence of ``(max_days, value)`` pairs checked in
    order; past the last step the recency signal decays linearly to zero over
    ``decay_days``.
    """

    weights: RankingWeights = field(default_factory=RankingWeights)
    rating_min: float = 1.0
    rating_max: float = 5.0
    neutral_like_ratio: float = 0.5
    recency_steps: tuple[tuple[float, float], ...] = ((7, 1.0), (30, 0.8), (90, 0.5))
    decay_days: float = 365.0


@dataclass(frozen=True)
class PlannerConfig:
    default_limit: int = 50
    default_offset: int = 0
    max_limit: int = 100
    default_sort_field: SortField = SortField.score
    default_direction: SortDirection = SortDirection.desc
    sortable_fields: frozenset[SortField] = frozenset(SortField)


DEFAULT_SCORING_CONFIG = ScoringConfig()
DEFAULT_PLANNER_CONFIG = PlannerConfig()
