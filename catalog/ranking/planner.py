"""
Retrieval planning for the restaurant listing and ranking endpoints.

Both endpoints accept the same raw query parameters; the planner turns them
into a validated, immutable ``RetrievalPlan`` for the storage layer. The
ranking endpoint is the general listing with ``approved_only`` forced on.

Empty or blank values count as omitted. Anything else must match exactly:
sort fields and directions are case-sensitive and numbers are not trimmed.
Malformed values are never defaulted or clamped: any invalid field raises
``InvalidFilter``, ``InvalidSort`` or ``InvalidPagination``.
"""
from __future__ import annotations

import re
from typing import Any

from ..errors import InvalidFilter, InvalidPagination, InvalidSort
from .config import DEFAULT_PLANNER_CONFIG, PlannerConfig
from .models import (
    FilterSpec,
    PageSpec,
    RetrievalPlan,
    SortDirection,
    SortField,
    SortSpec,
)

_TRUE_VALUES = {"true", "1"}
_FALSE_VALUES = {"false", "0"}
_NON_NEGATIVE_INT = re.compile(r"[0-9]+")


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_approved_only(raw: Any, default: bool = True) -> bool:
    if _is_missing(raw):
        return default
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise InvalidFilter(
        f"soloAprobados must be 'true' or 'false', got {raw!r}", field="soloAprobados",
    )


def normalize_filter(
    category_id: Any = None,
    approved_only: Any = None,
    force_approved: bool = False,
) -> FilterSpec:
    # The category id is opaque here; the storage layer validates its format.
    category = None if _is_missing(category_id) else str(category_id).strip()
    if force_approved:
        return FilterSpec(category_id=category, approved_only=True)
    return FilterSpec(category_id=category, approved_only=parse_approved_only(approved_only))


def normalize_sort(
    sort_by: Any = None,
    order: Any = None,
    config: PlannerConfig = DEFAULT_PLANNER_CONFIG,
) -> SortSpec:
    if _is_missing(sort_by):
        field = config.default_sort_field
    else:
        try:
            field = SortField(str(sort_by))
        except ValueError:
            raise InvalidSort(f"Unknown sort field {sort_by!r}", field="ordenarPor") from None
        if field not in config.sortable_fields:
            raise InvalidSort(f"Field {sort_by!r} is not sortable", field="ordenarPor")

    if _is_missing(order):
        direction = config.default_direction
    else:
        try:
            direction = SortDirection(str(order))
        except ValueError:
            raise InvalidSort(
                f"orden must be 'asc' or 'desc', got {order!r}", field="orden",
            ) from None

    return SortSpec(field=field, direction=direction)


def _parse_non_negative_int(raw: Any, default: int, name: str) -> int:
    if _is_missing(raw):
        return default
    if isinstance(raw, bool):
        raise InvalidPagination(f"{name} must be a non-negative integer", field=name)
    if isinstance(raw, int):
        value = raw
    elif _NON_NEGATIVE_INT.fullmatch(str(raw)):
        value = int(str(raw))
    else:
        raise InvalidPagination(
            f"{name} must be a non-negative integer, got {raw!r}", field=name,
        )
    if value < 0:
        raise InvalidPagination(f"{name} must be a non-negative integer, got {raw!r}", field=name)
    return value


def normalize_page(
    limit: Any = None,
    offset: Any = None,
    config: PlannerConfig = DEFAULT_PLANNER_CONFIG,
) -> PageSpec:
    parsed_limit = _parse_non_negative_int(limit, config.default_limit, "limite")
    if parsed_limit > config.max_limit:
        raise InvalidPagination(
            f"limite must not exceed {config.max_limit}, got {parsed_limit}", field="limite",
        )
    parsed_offset = _parse_non_negative_int(offset, config.default_offset, "saltar")
    return PageSpec(limit=parsed_limit, offset=parsed_offset)


def plan_listing(
    category_id: Any = None,
    sort_by: Any = None,
    order: Any = None,
    approved_only: Any = None,
    limit: Any = None,
    offset: Any = None,
    config: PlannerConfig = DEFAULT_PLANNER_CONFIG,
) -> RetrievalPlan:
    """Build the plan for the general restaurant listing."""
    return RetrievalPlan(
        filter=normalize_filter(category_id, approved_only),
        sort=normalize_sort(sort_by, order, config),
        page=normalize_page(limit, offset, config),
    )


def plan_ranking(
    category_id: Any = None,
    sort_by: Any = None,
    order: Any = None,
    limit: Any = None,
    offset: Any = None,
    config: PlannerConfig = DEFAULT_PLANNER_CONFIG,
) -> RetrievalPlan:
    """Build the plan for the ranking view; only approved restaurants qualify."""
    return RetrievalPlan(
        filter=normalize_filter(category_id, force_approved=True),
        sort=normalize_sort(sort_by, order, config),
        page=normalize_page(limit, offset, config),
    )
