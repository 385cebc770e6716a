from __future__ import annotations

import logging
import re
import secrets
import threading
from collections.abc import Callable, Iterator
from datetime import datetime, timezone

import pandas as pd

from ..errors import Conflict, InvalidFilter, InvalidInput, NotFound
from ..ranking.config import DEFAULT_SCORING_CONFIG, ScoringConfig
from ..ranking.models import EngagementFacts, RetrievalPlan, SortDirection, SortField
from ..ranking.scoring import as_utc, compute_score
from .models import Category, Restaurant

logger = logging.getLogger(__name__)

_ID_PATTERN = re.compile(r"[0-9a-f]{24}")

SORT_COLUMNS: dict[SortField, str] = {
    SortField.score: "score",
    SortField.avg_rating: "avg_rating",
    SortField.name: "name",
    SortField.created_at: "created_at",
}

# Secondary key applied after the requested sort so equal scores keep a stable order.
TIE_BREAK_COLUMN = "id"


def new_id() -> str:
    return secrets.token_hex(12)


def is_valid_id(value: str | None) -> bool:
    return isinstance(value, str) and bool(_ID_PATTERN.fullmatch(value))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RestaurantStore:
    """
    In-memory restaurants and categories.

    Every write that changes a restaurant's engagement facts (a review or a
    like/dislike) recomputes its ranking score, so ``score`` is always a
    sortable column when a plan is executed.
    """

    def __init__(
        self,
        scoring_config: ScoringConfig = DEFAULT_SCORING_CONFIG,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._scoring_config = scoring_config
        self._clock = clock or _utcnow
        self._lock = threading.Lock()
        self._categories: dict[str, Category] = {}
        self._restaurants: dict[str, Restaurant] = {}
        self._rating_totals: dict[str, float] = {}

    def now(self) -> datetime:
        """Current time from the injected clock, always timezone-aware (naive means UTC)."""
        return as_utc(self._clock())

    # ── Categories ───────────────────────────────────────────────────────

    def add_category(self, name: str, description: str = "") -> Category:
        with self._lock:
            if any(c.name == name for c in self._categories.values()):
                raise Conflict(f"Category {name!r} already exists", field="nombre")
            category = Category(id=new_id(), name=name, description=description)
            self._categories[category.id] = category
        return category

    def get_category(self, category_id: str) -> Category:
        category = self._categories.get(category_id)
        if category is None:
            raise NotFound(f"Category {category_id!r} not found")
        return category

    # ── Restaurants ──────────────────────────────────────────────────────

    def add_restaurant(
        self,
        name: str,
        category_id: str | None = None,
        description: str = "",
        location: str = "",
    ) -> Restaurant:
        if category_id is not None and not is_valid_id(category_id):
            raise InvalidInput(f"Invalid category id {category_id!r}", field="categoriaId")

        with self._lock:
            if any(r.name == name for r in self._restaurants.values()):
                raise Conflict(f"Restaurant {name!r} already exists", field="nombre")
            if category_id is not None and category_id not in self._categories:
                raise NotFound(f"Category {category_id!r} not found", field="categoriaId")

            now = self.now()
            restaurant = Restaurant(
                id=new_id(),
                name=name,
                description=description,
                category_id=category_id,
                location=location,
                created_at=now,
                updated_at=now,
            )
            restaurant = self._rescore(restaurant, now)
            self._restaurants[restaurant.id] = restaurant
            self._rating_totals[restaurant.id] = 0.0

        logger.info("Created restaurant %s (%s), pending approval", restaurant.id, name)
        return restaurant

    def get_restaurant(self, restaurant_id: str) -> Restaurant:
        restaurant = self._restaurants.get(restaurant_id)
        if restaurant is None:
            raise NotFound(f"Restaurant {restaurant_id!r} not found")
        return restaurant

    def approve_restaurant(self, restaurant_id: str) -> Restaurant:
        with self._lock:
            restaurant = self.get_restaurant(restaurant_id)
            restaurant = restaurant.model_copy(
                update={"approved": True, "updated_at": self.now()},
            )
            self._restaurants[restaurant_id] = restaurant
        logger.info("Approved restaurant %s", restaurant_id)
        return restaurant

    # ── Engagement ───────────────────────────────────────────────────────

    def add_review(
        self,
        restaurant_id: str,
        rating: float,
        reviewed_at: datetime | None = None,
    ) -> Restaurant:
        cfg = self._scoring_config
        if not cfg.rating_min <= rating <= cfg.rating_max:
            raise InvalidInput(
                f"Rating must be between {cfg.rating_min:g} and {cfg.rating_max:g}",
                field="calificacion",
            )

        with self._lock:
            restaurant = self.get_restaurant(restaurant_id)
            reviewed_at = as_utc(reviewed_at) if reviewed_at else self.now()
            total = self._rating_totals[restaurant_id] + rating
            count = restaurant.review_count + 1
            last = restaurant.last_review_at
            if last is None or reviewed_at > last:
                last = reviewed_at

            self._rating_totals[restaurant_id] = total
            restaurant = restaurant.model_copy(update={
                "avg_rating": total / count,
                "review_count": count,
                "last_review_at": last,
            })
            restaurant = self._rescore(restaurant, self.now())
            self._restaurants[restaurant_id] = restaurant
        return restaurant

    def add_reaction(self, restaurant_id: str, positive: bool) -> Restaurant:
        with self._lock:
            restaurant = self.get_restaurant(restaurant_id)
            key = "like_count" if positive else "dislike_count"
            restaurant = restaurant.model_copy(update={key: getattr(restaurant, key) + 1})
            restaurant = self._rescore(restaurant, self.now())
            self._restaurants[restaurant_id] = restaurant
        return restaurant

    def engagement_facts(self, restaurant_id: str) -> EngagementFacts:
        return self._facts(self.get_restaurant(restaurant_id))

    # ── Scores ───────────────────────────────────────────────────────────

    def recompute_score(self, restaurant_id: str) -> float:
        with self._lock:
            restaurant = self._rescore(self.get_restaurant(restaurant_id), self.now())
            self._restaurants[restaurant_id] = restaurant
        return restaurant.score

    def recompute_all_scores(self) -> int:
        """Refresh the score of every approved restaurant. Returns how many were updated."""
        with self._lock:
            now = self.now()
            approved = [r for r in self._restaurants.values() if r.approved]
            for restaurant in approved:
                self._restaurants[restaurant.id] = self._rescore(restaurant, now)
        logger.info("Recomputed ranking scores for %d approved restaurants", len(approved))
        return len(approved)

    def _facts(self, restaurant: Restaurant) -> EngagementFacts:
        return EngagementFacts(
            average_rating=restaurant.avg_rating,
            like_count=restaurant.like_count,
            dislike_count=restaurant.dislike_count,
            last_review_at=restaurant.last_review_at,
        )

    def _rescore(self, restaurant: Restaurant, now: datetime) -> Restaurant:
        score = compute_score(self._facts(restaurant), now=now, config=self._scoring_config)
        logger.debug("Score for restaurant %s: %.4f", restaurant.id, score)
        return restaurant.model_copy(update={"score": score, "updated_at": now})

    # ── Retrieval ────────────────────────────────────────────────────────

    def list_restaurants(self, plan: RetrievalPlan) -> Iterator[Restaurant]:
        """
        Execute *plan* and return the matching restaurants in order.

        The result is a one-shot iterator. Restaurants with equal sort values
        are ordered by id; missing values (e.g. no average rating) go last.
        """
        category_id = plan.filter.category_id
        if category_id is not None and not is_valid_id(category_id):
            raise InvalidFilter(f"Invalid category id {category_id!r}", field="categoriaId")

        with self._lock:
            snapshot = {r.id: r for r in self._restaurants.values()}
        if not snapshot:
            return iter(())

        df = pd.DataFrame([r.model_dump() for r in snapshot.values()])

        mask = pd.Series(True, index=df.index)
        if plan.filter.approved_only:
            mask = mask & df["approved"].astype(bool)
        if category_id is not None:
            mask = mask & (df["category_id"] == category_id)

        candidates = df.loc[mask].copy()
        column = SORT_COLUMNS[plan.sort.field]
        if column == "avg_rating":
            candidates[column] = pd.to_numeric(candidates[column], errors="coerce")

        ordered = candidates.sort_values(
            [column, TIE_BREAK_COLUMN],
            ascending=[plan.sort.direction is SortDirection.asc, True],
            na_position="last",
        )
        start = plan.page.offset
        page = ordered.iloc[start:start + plan.page.limit]
        return (snapshot[rid] for rid in page["id"].tolist())
