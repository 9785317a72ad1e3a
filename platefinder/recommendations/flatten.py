from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from ..catalog.models import Dish, Store
from .pricing import parse_price, to_cents


@dataclass(frozen=True)
class StoreRef:
    name: str
    url: str | None
    metadata: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class FlatDishEntry:
    """One priced dish, addressable back to its store and category."""

    position: int
    store: StoreRef
    category: str
    dish: Dish = field(compare=False, hash=False)
    price: float
    cents: int


def flatten_catalog(stores: Sequence[Store], budget: float) -> list[FlatDishEntry]:
    """
    Project the nested catalog into a flat list of dishes priced within budget.

    Order follows the catalog: stores, then categories, then dishes. Dishes
    priced at zero (unparseable) or above ``budget`` are left out.
    """
    if budget <= 0:
        return []

    budget_cents = to_cents(budget)
    entries: list[FlatDishEntry] = []
    position = 0
    for store in stores:
        ref = StoreRef(name=store.name, url=store.url, metadata=store.restaurant)
        for category in store.categories:
            for dish in category.dishes:
                price = parse_price(dish.price)
                cents = to_cents(price)
                if 0 < cents <= budget_cents:
                    entries.append(FlatDishEntry(
                        position=position,
                        store=ref,
                        category=category.name,
                        dish=dish,
                        price=price,
                        cents=cents,
                    ))
                position += 1
    return entries


def sort_by_price(entries: Sequence[FlatDishEntry]) -> list[FlatDishEntry]:
    """Stable ascending sort by price; ties keep catalog order."""
    return sorted(entries, key=lambda e: e.cents)


def group_by_store(entries: Sequence[FlatDishEntry]) -> dict[str, list[FlatDishEntry]]:
    """Bucket entries per store name in first-seen order, each bucket cheapest first."""
    groups: dict[str, list[FlatDishEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.store.name, []).append(entry)
    return {name: sort_by_price(items) for name, items in groups.items()}
