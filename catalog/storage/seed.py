from __future__ import annotations

import logging
from datetime import timedelta

from .store import RestaurantStore

logger = logging.getLogger(__name__)

DEMO_CATEGORIES: list[dict[str, str]] = [
    {"name": "Italiana", "description": "Pasta, pizza y cocina mediterránea"},
    {"name": "Mexicana", "description": "Tacos, moles y antojitos"},
    {"name": "Japonesa", "description": "Sushi, ramen y cocina nipona"},
]

# (name, category, location, approved, [(rating, days_ago)], likes, dislikes)
DEMO_RESTAURANTS: list[tuple] = [
    ("La Trattoria", "Italiana", "Centro", True, [(5, 2), (4, 10)], 12, 1),
    ("Pizzeria Napoli", "Italiana", "Norte", True, [(4, 40), (3, 60)], 4, 4),
    ("El Mexicano", "Mexicana", "Sur", True, [(5, 120), (5, 200)], 20, 2),
    ("Taqueria Don Pepe", "Mexicana", "Centro", True, [], 0, 0),
    ("Sakura Sushi", "Japonesa", "Norte", True, [(4, 5)], 3, 0),
    ("Ramen Ya", "Japonesa", "Sur", False, [(2, 1)], 0, 5),
]


def seed_demo_data(store: RestaurantStore) -> None:
    """Populate *store* with demo categories, restaurants, reviews and reactions."""
    categories = {
        c["name"]: store.add_category(c["name"], c["description"]) for c in DEMO_CATEGORIES
    }
    now = store.now()

    for name, category, location, approved, reviews, likes, dislikes in DEMO_RESTAURANTS:
        restaurant = store.add_restaurant(
            name, category_id=categories[category].id, location=location,
        )
        if approved:
            store.approve_restaurant(restaurant.id)
        for rating, days_ago in reviews:
            store.add_review(restaurant.id, rating, reviewed_at=now - timedelta(days=days_ago))
        for _ in range(likes):
            store.add_reaction(restaurant.id, positive=True)
        for _ in range(dislikes):
            store.add_reaction(restaurant.id, positive=False)

    logger.info(
        "Seeded %d categories and %d restaurants", len(categories), len(DEMO_RESTAURANTS),
    )
