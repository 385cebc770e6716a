from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse

from .config import DEFAULT_APP_CONFIG
from .errors import CatalogError, ErrorKind
from .ranking.config import PlannerConfig
from .ranking.planner import plan_listing, plan_ranking
from .storage.models import Restaurant
from .storage.seed import seed_demo_data
from .storage.store import RestaurantStore

logger = logging.getLogger(__name__)

app = FastAPI(title="Restaurant Catalog API", version="1.0.0")

PLANNER_CONFIG = PlannerConfig(max_limit=DEFAULT_APP_CONFIG.max_page_size)

_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.invalid_input: 400,
    ErrorKind.not_found: 404,
    ErrorKind.conflict: 409,
}

_store: RestaurantStore | None = None


def get_store() -> RestaurantStore:
    """Return the process-wide store, creating (and optionally seeding) it on first call."""
    global _store
    if _store is None:
        _store = RestaurantStore()
        if DEFAULT_APP_CONFIG.seed_demo_data:
            seed_demo_data(_store)
    return _store


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    status = _STATUS_BY_KIND.get(exc.kind, 400)
    logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.kind.value, exc)
    return JSONResponse(
        status_code=status,
        content={"detail": exc.message, "kind": exc.kind.value, "field": exc.field},
    )


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# Query values arrive as raw strings; the planner owns their validation.


@app.get("/api/v1/restaurantes", response_model=list[Restaurant])
def list_restaurants(
    categoria_id: str | None = Query(default=None, alias="categoriaId"),
    ordenar_por: str | None = Query(default=None, alias="ordenarPor"),
    orden: str | None = Query(default=None),
    solo_aprobados: str | None = Query(default=None, alias="soloAprobados"),
    limite: str | None = Query(default=None),
    saltar: str | None = Query(default=None),
    store: RestaurantStore = Depends(get_store),
) -> list[Restaurant]:
    plan = plan_listing(
        category_id=categoria_id,
        sort_by=ordenar_por,
        order=orden,
        approved_only=solo_aprobados,
        limit=limite,
        offset=saltar,
        config=PLANNER_CONFIG,
    )
    return list(store.list_restaurants(plan))


@app.get("/api/v1/ranking/restaurantes", response_model=list[Restaurant])
def ranking(
    categoria_id: str | None = Query(default=None, alias="categoriaId"),
    ordenar_por: str | None = Query(default=None, alias="ordenarPor"),
    orden: str | None = Query(default=None),
    limite: str | None = Query(default=None),
    saltar: str | None = Query(default=None),
    store: RestaurantStore = Depends(get_store),
) -> list[Restaurant]:
    plan = plan_ranking(
        category_id=categoria_id,
        sort_by=ordenar_por,
        order=orden,
        limit=limite,
        offset=saltar,
        config=PLANNER_CONFIG,
    )
    return list(store.list_restaurants(plan))
