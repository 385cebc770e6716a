"""
Restaurant ranking score.

The score blends three signals, each normalized to [0, 1]:

* **rating**  - average review rating mapped linearly from [1, 5] onto [0, 1];
  a restaurant without reviews sits at the floor (0).
* **likes**   - share of likes among all like/dislike reactions; 0.5 when
  nobody has reacted yet.
* **recency** - freshness of the latest review: a step function for the
  first 90 days, then a linear decay that reaches 0 after a year.

``score = 0.5 * rating + 0.3 * likes + 0.2 * recency``
"""
from __future__ import annotations

from datetime import datetime, timezone

from .config import DEFAULT_SCORING_CONFIG, ScoringConfig
from .models import EngagementFacts

_SECONDS_PER_DAY = 86400.0


def as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def elapsed_days(since: datetime, now: datetime) -> float:
    """Return fractional days between *since* and *now* (naive values are UTC)."""
    return (as_utc(now) - as_utc(since)).total_seconds() / _SECONDS_PER_DAY


def rating_component(
    average_rating: float | None,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> float:
    if average_rating is None:
        return 0.0
    span = config.rating_max - config.rating_min
    return (average_rating - config.rating_min) / span


def like_component(
    likes: int,
    dislikes: int,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> float:
    total = likes + dislikes
    if total == 0:
        return config.neutral_like_ratio
    return likes / total


def recency_component(
    days: float | None,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> float:
    """Map elapsed days since the last review onto [0, 1]. ``None`` means never reviewed."""
    if days is None:
        return 0.0
    for max_days, value in config.recency_steps:
        if days <= max_days:
            return value
    return max(0.0, 1.0 - days / config.decay_days)


def compute_score(
    facts: EngagementFacts,
    now: datetime | None = None,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> float:
    """
    Compute the ranking score for one restaurant.

    *now* is the reference instant for the recency signal; it defaults to the
    current UTC time. Passing it explicitly makes the result reproducible.
    """
    if facts.last_review_at is None:
        days = None
    else:
        days = elapsed_days(facts.last_review_at, now or datetime.now(timezone.utc))

    w = config.weights
    return (
        w.rating * rating_component(facts.average_rating, config)
        + w.likes * like_component(facts.like_count, facts.dislike_count, config)
        + w.recency * recency_component(days, config)
    )
