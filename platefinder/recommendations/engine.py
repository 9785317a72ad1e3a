from __future__ import annotations

import logging
import random
from typing import Sequence

from ..catalog.models import Store
from .aggregate import build_recommendation
from .config import DEFAULT_RECOMMENDER_CONFIG, RecommenderConfig
from .flatten import flatten_catalog, sort_by_price
from .models import Recommendation, RecommendationStatistics
from .pricing import format_price, parse_price, to_cents
from .search import get_strategy

logger = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = "No valid combinations found for the given budget and number of plates"

NO_RESULT_SUGGESTIONS = [
    "Try increasing your budget",
    "Try reducing the number of plates",
    "Some stores might not have dishes in your price range",
]


def find_combinations(
    stores: Sequence[Store],
    budget: str | float,
    num_plates: int,
    strategy: str = "optimized",
    max_results: int = DEFAULT_RECOMMENDER_CONFIG.default_max_results,
    rng: random.Random | None = None,
    config: RecommenderConfig = DEFAULT_RECOMMENDER_CONFIG,
) -> list[Recommendation]:
    """
    Recommend up to ``max_results`` sets of ``num_plates`` dishes within ``budget``.

    ``budget`` may be free text (``"120 MAD"``) or a number. Invalid input
    (non-positive budget or plate count, empty catalog) gives an empty list.
    """
    budget_value = parse_price(budget)
    if budget_value <= 0 or num_plates <= 0 or max_results <= 0:
        return []

    dishes = sort_by_price(flatten_catalog(stores, budget_value))
    if not dishes:
        return []

    search = get_strategy(strategy)
    combinations = search(
        dishes, to_cents(budget_value), num_plates, max_results, rng=rng, config=config,
    )
    logger.debug(
        "%s search over %d dishes found %d combinations",
        strategy, len(dishes), len(combinations),
    )

    recommendations: list[Recommendation] = []
    for combination in combinations:
        rec = build_recommendation(combination, budget_value, config)
        if rec is not None:
            recommendations.append(rec)
    return recommendations


def count_dishes(stores: Sequence[Store]) -> int:
    return sum(store.dish_count() for store in stores)


def summarize(
    stores: Sequence[Store],
    recommendations: Sequence[Recommendation],
    num_plates: int,
    config: RecommenderConfig = DEFAULT_RECOMMENDER_CONFIG,
) -> RecommendationStatistics | None:
    """Describe a non-empty result set; ``None`` when nothing was found."""
    if not recommendations or num_plates <= 0:
        return None

    residuals = [r.residual_num for r in recommendations]
    return RecommendationStatistics(
        total_combinations_found=len(recommendations),
        average_price_per_plate=format_price(
            recommendations[0].total_price_num / num_plates, config.currency
        ),
        min_residual=format_price(min(residuals), config.currency),
        max_residual=format_price(max(residuals), config.currency),
        stores_count=len(stores),
        total_dishes_considered=count_dishes(stores),
    )
