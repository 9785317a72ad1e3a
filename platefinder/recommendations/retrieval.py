from __future__ import annotations

import logging
import random
import time
from typing import Sequence

from ..analytics.store import record_event
from ..catalog.models import Store
from .cache import cache_get, cache_set, is_cacheable
from .engine import NO_RESULT_SUGGESTIONS, NO_RESULTS_MESSAGE, find_combinations, summarize
from .models import RecommendationRequest, RecommendationResponse

logger = logging.getLogger(__name__)


def _record_search(
    request: RecommendationRequest,
    response: RecommendationResponse,
    elapsed_ms: float,
    cache_hit: bool,
) -> None:
    record_event("search", {
        "budget": request.budget,
        "num_plates": request.num_plates,
        "algorithm": request.algorithm.value,
        "max_results": request.max_results,
        "results_returned": len(response.recommendations),
        "response_time_ms": elapsed_ms,
        "cache_hit": cache_hit,
    })


def get_recommendations(
    request: RecommendationRequest,
    stores: Sequence[Store],
    catalog_version: tuple[int, int] | None = None,
) -> RecommendationResponse:
    """
    Run a recommendation request against a catalog snapshot.

    Deterministic requests are cached per catalog version; every call is
    recorded as a ``search`` analytics event.
    """
    start_time = time.time()

    request_dict = request.model_dump(mode="json")
    request_dict["_catalog"] = catalog_version
    cacheable = is_cacheable(request_dict)

    if cacheable:
        cached = cache_get(request_dict)
        if cached is not None:
            elapsed_ms = round((time.time() - start_time) * 1000, 1)
            _record_search(request, cached, elapsed_ms, cache_hit=True)
            return cached

    logger.info(
        "Finding recommendations: %d plates for %s using %s",
        request.num_plates, request.budget, request.algorithm.value,
    )

    rng = random.Random(request.seed) if request.seed is not None else None
    recommendations = find_combinations(
        stores,
        request.budget,
        request.num_plates,
        strategy=request.algorithm.value,
        max_results=request.max_results,
        rng=rng,
    )
    elapsed_ms = round((time.time() - start_time) * 1000, 1)

    if recommendations:
        response = RecommendationResponse(
            budget=request.budget,
            num_plates=request.num_plates,
            algorithm=request.algorithm,
            processing_time_ms=elapsed_ms,
            statistics=summarize(stores, recommendations, request.num_plates),
            recommendations=recommendations,
        )
    else:
        response = RecommendationResponse(
            budget=request.budget,
            num_plates=request.num_plates,
            algorithm=request.algorithm,
            processing_time_ms=elapsed_ms,
            recommendations=[],
            message=NO_RESULTS_MESSAGE,
            suggestions=list(NO_RESULT_SUGGESTIONS),
        )

    if cacheable:
        cache_set(request_dict, response)

    _record_search(request, response, elapsed_ms, cache_hit=False)
    return response
