from __future__ import annotations

import logging
from typing import Any

from .config import DEFAULT_RECOMMENDER_CONFIG, RecommenderConfig
from .flatten import FlatDishEntry
from .models import Plate, ProductGroup, Recommendation
from .pricing import format_price, from_cents, to_cents
from .search import Combination, total_cents

logger = logging.getLogger(__name__)


def _dish_payload(entry: FlatDishEntry) -> dict[str, Any]:
    payload = entry.dish.model_dump(exclude_none=True)
    payload["priceNum"] = entry.price
    payload["priceFormatted"] = entry.dish.price
    return payload


def build_recommendation(
    combination: Combination,
    budget: float,
    config: RecommenderConfig = DEFAULT_RECOMMENDER_CONFIG,
) -> Recommendation | None:
    """
    Regroup a combination by store, then by category, preserving first-seen order.

    Returns ``None`` for an empty combination or one that overshoots the budget.
    """
    budget_cents = to_cents(budget)
    total = total_cents(combination)
    if not combination or total <= 0 or total > budget_cents:
        logger.warning(
            "Dropping combination of %d dishes totalling %s against budget %s",
            len(combination), from_cents(total), budget,
        )
        return None

    plates: dict[str, Plate] = {}
    groups: dict[tuple[str, str], ProductGroup] = {}
    for entry in combination:
        plate = plates.get(entry.store.name)
        if plate is None:
            plate = Plate(
                store_name=entry.store.name,
                url=entry.store.url,
                restaurant=dict(entry.store.metadata),
                products=[],
            )
            plates[entry.store.name] = plate

        group_key = (entry.store.name, entry.category)
        group = groups.get(group_key)
        if group is None:
            group = ProductGroup(category=entry.category, dishes=[])
            plate.products.append(group)
            groups[group_key] = group
        group.dishes.append(_dish_payload(entry))

    total_price = from_cents(total)
    residual = from_cents(budget_cents - total)
    return Recommendation(
        plates=list(plates.values()),
        total_price=format_price(total_price, config.currency),
        residual=format_price(residual, config.currency),
        total_price_num=total_price,
        residual_num=residual,
    )
