from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Category(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""


class Restaurant(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    category_id: str | None = None
    location: str = ""
    approved: bool = False
    avg_rating: float | None = None
    review_count: int = Field(default=0, ge=0)
    like_count: int = Field(default=0, ge=0)
    dislike_count: int = Field(default=0, ge=0)
    last_review_at: datetime | None = None
    score: float = 0.0
    created_at: datetime
    updated_at: datetime
