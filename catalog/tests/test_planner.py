from __future__ import annotations

import pytest
from pydantic import ValidationError

from catalog.errors import ErrorKind, InvalidFilter, InvalidPagination, InvalidSort
from catalog.ranking.config import PlannerConfig
from catalog.ranking.models import SortDirection, SortField
from catalog.ranking.planner import (
    normalize_page,
    normalize_sort,
    parse_approved_only,
    plan_listing,
    plan_ranking,
)

CATEGORY_ID = "65a1f0c2e4b0a1b2c3d4e5f6"


# ── Defaults ─────────────────────────────────────────────────────────────


def test_listing_defaults():
    plan = plan_listing()
    assert plan.filter.category_id is None
    assert plan.filter.approved_only is True
    assert plan.sort.field is SortField.score
    assert plan.sort.direction is SortDirection.desc
    assert (plan.page.limit, plan.page.offset) == (50, 0)


def test_empty_strings_count_as_omitted():
    plan = plan_listing(category_id="", sort_by="", order=" ", limit="", offset="")
    assert plan == plan_listing()


def test_identical_inputs_give_identical_plans():
    a = plan_listing(category_id=CATEGORY_ID, sort_by="nombre", order="asc", limit="5")
    b = plan_listing(category_id=CATEGORY_ID, sort_by="nombre", order="asc", limit="5")
    assert a == b
    assert a.model_dump_json() == b.model_dump_json()


def test_plan_is_immutable():
    plan = plan_listing()
    with pytest.raises(ValidationError):
        plan.page.limit = 10


# ── Filter ───────────────────────────────────────────────────────────────


class TestFilter:
    def test_category_passes_through(self):
        assert plan_listing(category_id=CATEGORY_ID).filter.category_id == CATEGORY_ID

    def test_listing_can_include_unapproved(self):
        assert plan_listing(approved_only="false").filter.approved_only is False

    @pytest.mark.parametrize("raw, expected", [("true", True), ("TRUE", True), ("1", True), ("0", False)])
    def test_boolean_parsing(self, raw, expected):
        assert parse_approved_only(raw) is expected

    def test_malformed_flag_is_rejected(self):
        with pytest.raises(InvalidFilter) as exc_info:
            plan_listing(approved_only="maybe")
        assert exc_info.value.field == "soloAprobados"
        assert exc_info.value.kind is ErrorKind.invalid_input

    def test_ranking_forces_approved_only(self):
        assert plan_ranking().filter.approved_only is True
        assert plan_ranking(category_id=CATEGORY_ID).filter.approved_only is True

    def test_ranking_matches_listing_otherwise(self):
        kwargs = {"category_id": CATEGORY_ID, "sort_by": "fechaCreacion", "order": "asc",
                  "limit": "10", "offset": "20"}
        assert plan_ranking(**kwargs) == plan_listing(**kwargs)


# ── Sort ─────────────────────────────────────────────────────────────────


class TestSort:
    @pytest.mark.parametrize(
        "raw, field",
        [
            ("ranking", SortField.score),
            ("calificacionPromedio", SortField.avg_rating),
            ("nombre", SortField.name),
            ("fechaCreacion", SortField.created_at),
        ],
    )
    def test_known_fields(self, raw, field):
        assert normalize_sort(raw).field is field

    @pytest.mark.parametrize("raw", ["DESC", "Asc", " asc ", " desc "])
    def test_direction_must_match_exactly(self, raw):
        with pytest.raises(InvalidSort) as exc_info:
            plan_listing(order=raw)
        assert exc_info.value.field == "orden"

    @pytest.mark.parametrize("raw", ["Nombre", " nombre"])
    def test_field_must_match_exactly(self, raw):
        with pytest.raises(InvalidSort):
            plan_ranking(sort_by=raw)

    def test_unknown_direction(self):
        with pytest.raises(InvalidSort) as exc_info:
            plan_listing(order="sideways")
        assert exc_info.value.field == "orden"

    def test_unknown_field(self):
        with pytest.raises(InvalidSort):
            plan_listing(sort_by="precio")

    def test_field_outside_configured_sortable_set(self):
        config = PlannerConfig(sortable_fields=frozenset({SortField.score}))
        with pytest.raises(InvalidSort):
            normalize_sort("nombre", config=config)


# ── Pagination ───────────────────────────────────────────────────────────


class TestPagination:
    def test_parses_strings(self):
        page = normalize_page("10", "30")
        assert (page.limit, page.offset) == (10, 30)

    def test_accepts_ints(self):
        page = normalize_page(5, 0)
        assert (page.limit, page.offset) == (5, 0)

    def test_zero_limit_is_valid(self):
        assert normalize_page("0").limit == 0

    @pytest.mark.parametrize("raw", [" 5 ", "5 ", "+5"])
    def test_padded_numbers_are_rejected(self, raw):
        with pytest.raises(InvalidPagination):
            plan_listing(limit=raw)
        with pytest.raises(InvalidPagination):
            plan_ranking(offset=raw)

    def test_blank_numbers_count_as_omitted(self):
        assert plan_listing(limit="  ", offset="").page == plan_listing().page

    @pytest.mark.parametrize("raw", ["abc", "-1", "1.5", "10abc", -1, True])
    def test_invalid_limit(self, raw):
        with pytest.raises(InvalidPagination) as exc_info:
            plan_listing(limit=raw)
        assert exc_info.value.field == "limite"

    @pytest.mark.parametrize("raw", ["abc", "-5"])
    def test_invalid_offset(self, raw):
        with pytest.raises(InvalidPagination) as exc_info:
            plan_listing(offset=raw)
        assert exc_info.value.field == "saltar"

    def test_limit_above_maximum(self):
        with pytest.raises(InvalidPagination):
            plan_listing(limit="101")
        assert plan_listing(limit="100").page.limit == 100

    def test_custom_defaults(self):
        config = PlannerConfig(default_limit=20, max_limit=20)
        assert normalize_page(config=config).limit == 20

    def test_one_bad_field_fails_whole_plan(self):
        with pytest.raises(InvalidPagination):
            plan_ranking(category_id=CATEGORY_ID, sort_by="nombre", limit="abc")
