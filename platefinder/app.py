from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Query

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events, record_event
from .catalog.config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .catalog.store import (
    catalog_fingerprint,
    clear_catalog,
    delete_store,
    find_store,
    init_catalog,
    load_catalog,
    save_store,
)
from .logging_config import configure_logging
from .recommendations.cache import get_cache_stats
from .recommendations.models import (
    Algorithm,
    PriceStats,
    RecommendationRequest,
    RecommendationResponse,
    StoreUpsertRequest,
)
from .recommendations.price_stats import compute_price_stats
from .recommendations.pricing import parse_price
from .recommendations.retrieval import get_recommendations


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    init_catalog(DEFAULT_CATALOG_CONFIG)
    yield


app = FastAPI(title="Plate Finder API", version="1.0.0", lifespan=lifespan)


def get_catalog_config() -> CatalogConfig:
    return DEFAULT_CATALOG_CONFIG


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Recommendation endpoints ─────────────────────────────────────────────


def _recommend(body: RecommendationRequest, config: CatalogConfig) -> RecommendationResponse:
    if parse_price(body.budget) <= 0:
        raise HTTPException(status_code=400, detail="Invalid budget amount")

    stores = load_catalog(config)
    if not stores:
        raise HTTPException(
            status_code=404,
            detail="No stores data found. Please scrape some stores first.",
        )

    return get_recommendations(body, stores, catalog_fingerprint(config))


@app.post("/recommendations", response_model=RecommendationResponse)
def recommendations(
    body: RecommendationRequest,
    config: CatalogConfig = Depends(get_catalog_config),
) -> RecommendationResponse:
    return _recommend(body, config)


@app.get("/recommendations", response_model=RecommendationResponse)
def recommendations_query(
    budget: str = Query(..., min_length=1),
    plates: int = Query(..., ge=1, le=20),
    algorithm: Algorithm = Algorithm.optimized,
    max_results: int = Query(default=10, ge=1, le=50, alias="max"),
    seed: int | None = None,
    config: CatalogConfig = Depends(get_catalog_config),
) -> RecommendationResponse:
    body = RecommendationRequest(
        budget=budget,
        num_plates=plates,
        algorithm=algorithm,
        max_results=max_results,
        seed=seed,
    )
    return _recommend(body, config)


@app.get("/price-stats", response_model=PriceStats)
def price_stats(config: CatalogConfig = Depends(get_catalog_config)) -> PriceStats:
    stats = compute_price_stats(load_catalog(config))
    record_event("price_stats", {"has_data": stats.has_data, "total_dishes": stats.total_dishes})
    return stats


# ── Catalog endpoints ────────────────────────────────────────────────────


@app.get("/stores")
def list_stores(config: CatalogConfig = Depends(get_catalog_config)) -> dict:
    stores = load_catalog(config)
    return {
        "total_stores": len(stores),
        "stores": [s.model_dump(by_alias=True, exclude_none=True) for s in stores],
    }


@app.get("/stores/{store_name}")
def get_store(store_name: str, config: CatalogConfig = Depends(get_catalog_config)) -> dict:
    store = find_store(load_catalog(config), store_name)
    if store is None:
        raise HTTPException(status_code=404, detail="Store not found")
    return store.model_dump(by_alias=True, exclude_none=True)


@app.post("/stores")
def upsert_store(
    body: StoreUpsertRequest,
    config: CatalogConfig = Depends(get_catalog_config),
) -> dict:
    store = save_store(body.store_name, body.categories, body.url, config)
    return {
        "status": "saved",
        "store_name": store.name,
        "categories": len(store.categories),
        "dishes": store.dish_count(),
    }


@app.delete("/stores/{store_name}")
def remove_store(store_name: str, config: CatalogConfig = Depends(get_catalog_config)) -> dict:
    if not delete_store(store_name, config):
        raise HTTPException(status_code=404, detail="Store not found")
    return {"status": "deleted", "total_stores": len(load_catalog(config))}


@app.delete("/stores")
def remove_all_stores(config: CatalogConfig = Depends(get_catalog_config)) -> dict:
    clear_catalog(config)
    return {"status": "cleared"}


# ── Usage endpoints ──────────────────────────────────────────────────────


@app.get("/analytics")
def analytics() -> dict:
    return compute_analytics(
        get_events("search"),
        price_stats_requests=len(get_events("price_stats")),
    )


@app.get("/cache/stats")
def cache_stats() -> dict:
    return get_cache_stats()
