from __future__ import annotations

import math
from typing import Sequence

import numpy as np
import pandas as pd

from ..catalog.models import Store
from .config import DEFAULT_RECOMMENDER_CONFIG, RecommenderConfig
from .models import PriceRange, PriceStats, StorePriceSummary
from .pricing import format_price, parse_price

PERCENTILES: dict[str, float] = {
    "p10": 0.10,
    "p25": 0.25,
    "p50": 0.50,
    "p75": 0.75,
    "p90": 0.90,
}


def percentile(sorted_prices: Sequence[float] | np.ndarray, p: float) -> float:
    """Nearest-rank percentile: ``sorted_prices[floor(n * p)]``, no interpolation. Empty input gives 0.0."""
    n = len(sorted_prices)
    if n == 0:
        return 0.0
    index = min(n - 1, math.floor(n * p))
    return float(sorted_prices[index])


def _price_frame(stores: Sequence[Store]) -> pd.DataFrame:
    rows = []
    for position, store in enumerate(stores):
        for category in store.categories:
            for dish in category.dishes:
                price = parse_price(dish.price)
                if price > 0:
                    rows.append({"store_pos": position, "store_name": store.name, "price": price})
    return pd.DataFrame(rows, columns=["store_pos", "store_name", "price"])


def compute_price_stats(
    stores: Sequence[Store],
    config: RecommenderConfig = DEFAULT_RECOMMENDER_CONFIG,
) -> PriceStats:
    """
    Describe the catalog's dish prices.

    Only dishes with a positive price count. Per-store summaries follow
    catalog order and are capped at ``config.max_store_summaries``.
    """
    df = _price_frame(stores)
    if df.empty:
        return PriceStats(
            has_data=False,
            message="No price data available",
            total_stores=len(stores),
        )

    def fmt(value: float) -> str:
        return format_price(float(value), config.currency)

    prices = np.sort(df["price"].to_numpy())
    percentiles = {name: fmt(percentile(prices, p)) for name, p in PERCENTILES.items()}

    per_store = (
        df.groupby("store_pos", sort=True)
        .agg(
            store_name=("store_name", "first"),
            dish_count=("price", "size"),
            min_price=("price", "min"),
            max_price=("price", "max"),
            avg_price=("price", "mean"),
        )
        .head(config.max_store_summaries)
    )
    store_statistics = [
        StorePriceSummary(
            store_name=row.store_name,
            dish_count=int(row.dish_count),
            min_price=fmt(row.min_price),
            max_price=fmt(row.max_price),
            avg_price=fmt(row.avg_price),
        )
        for row in per_store.itertuples()
    ]

    # How many of the cheapest dishes (p10) each budget level affords
    cheap = percentile(prices, PERCENTILES["p10"])
    suggestions = {}
    for label, name in (("low_budget", "p25"), ("medium_budget", "p50"), ("high_budget", "p75")):
        level = percentile(prices, PERCENTILES[name])
        plates = max(1, math.floor(level / cheap))
        suggestions[label] = f"For a budget around {percentiles[name]}, try up to {plates} plates"

    return PriceStats(
        has_data=True,
        total_stores=len(stores),
        total_dishes=int(len(prices)),
        price_range=PriceRange(
            min=fmt(prices.min()),
            max=fmt(prices.max()),
            avg=fmt(prices.mean()),
        ),
        percentiles=percentiles,
        store_statistics=store_statistics,
        suggestions=suggestions,
    )
