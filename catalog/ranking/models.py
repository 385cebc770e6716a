from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SortField(str, Enum):
    # Values are the wire names accepted in ``ordenarPor``.
    score = "ranking"
    avg_rating = "calificacionPromedio"
    name = "nombre"
    created_at = "fechaCreacion"


class SortDirection(str, Enum):
    asc = "asc"
    desc = "desc"


class EngagementFacts(BaseModel):
    model_config = ConfigDict(frozen=True)

    average_rating: float | None = None
    like_count: int = Field(default=0, ge=0)
    dislike_count: int = Field(default=0, ge=0)
    last_review_at: datetime | None = None


class FilterSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    category_id: str | None = None
    approved_only: bool = True


class SortSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: SortField = SortField.score
    direction: SortDirection = SortDirection.desc


class PageSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    limit: int = Field(default=50, ge=0)
    offset: int = Field(default=0, ge=0)


class RetrievalPlan(BaseModel):
    """Normalized query handed to the storage layer."""

    model_config = ConfigDict(frozen=True)

    filter: FilterSpec = Field(default_factory=FilterSpec)
    sort: SortSpec = Field(default_factory=SortSpec)
    page: PageSpec = Field(default_factory=PageSpec)
