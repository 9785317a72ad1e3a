import random
from itertools import combinations

import pytest

from platefinder.recommendations.flatten import flatten_catalog, sort_by_price
from platefinder.recommendations.search import (
    STRATEGIES,
    get_strategy,
    rank_combinations,
    search_approximate,
    search_exact,
    search_greedy,
    search_optimized,
    store_count,
    total_cents,
)

from .factories import build_store


def _dishes(stores, budget):
    return sort_by_price(flatten_catalog(stores, budget))


def _one_dish_per_store(prices):
    return [
        build_store(f"Store {i}", {"Menu": [(f"Dish {i}", f"{p},00 MAD")]})
        for i, p in enumerate(prices)
    ]


MIXED = [
    build_store("Atlas Grill", {
        "Grill": [("Brochettes", "45,00 MAD"), ("Kefta", "38,50 MAD")],
        "Drinks": [("Mint Tea", "12,00 MAD")],
    }),
    build_store("Sushi Bar", {"Rolls": [("California", "55,00 MAD"), ("Maki", "29,90 MAD")]}),
    build_store("Tacos House", {"Tacos": [("Tacos Poulet", "33,00 MAD"), ("Tacos Mixte", "41,00 MAD")]}),
    build_store("Crêperie", {"Crêpes": [("Nutella", "22,00 MAD"), ("Complète", "36,00 MAD")]}),
]


# ── Shared contract ──────────────────────────────────────────────────────


@pytest.mark.parametrize("name", sorted(STRATEGIES))
def test_results_have_exact_size_and_fit_budget(name):
    dishes = _dishes(MIXED, 100)
    results = STRATEGIES[name](dishes, 10000, 3, 5, rng=random.Random(7))
    assert len(results) <= 5
    for combo in results:
        assert len(combo) == 3
        assert total_cents(combo) <= 10000


@pytest.mark.parametrize("name", sorted(STRATEGIES))
@pytest.mark.parametrize("budget_cents,plates", [(0, 2), (-100, 2), (10000, 0), (10000, -1)])
def test_invalid_input_returns_empty(name, budget_cents, plates):
    dishes = _dishes(MIXED, 100)
    assert STRATEGIES[name](dishes, budget_cents, plates, 5, rng=random.Random(1)) == []


@pytest.mark.parametrize("name", sorted(STRATEGIES))
def test_no_dishes_returns_empty(name):
    assert STRATEGIES[name]([], 10000, 2, 5, rng=random.Random(1)) == []


# ── Exact ────────────────────────────────────────────────────────────────


def test_exact_prefers_closest_to_budget():
    dishes = _dishes(_one_dish_per_store([10, 20, 30, 40]), 70)
    results = search_exact(dishes, 7000, 2, 3)
    assert [total_cents(c) for c in results] == [7000, 6000, 5000]


def test_exact_matches_brute_force():
    dishes = _dishes(MIXED, 100)
    budget = 10000
    expected = sorted(
        (sum(d.cents for d in combo) for combo in combinations(dishes, 3)
         if sum(d.cents for d in combo) <= budget),
        reverse=True,
    )[:8]
    results = search_exact(dishes, budget, 3, 8)
    assert [total_cents(c) for c in results] == expected


def test_exact_may_pick_several_dishes_from_one_store():
    stores = [build_store("Solo", {"Menu": [("A", "10,00 MAD"), ("B", "20,00 MAD")]})]
    results = search_exact(_dishes(stores, 50), 5000, 2, 5)
    assert len(results) == 1
    assert store_count(results[0]) == 1


# ── Approximate ──────────────────────────────────────────────────────────


def test_approximate_skips_equivalent_shapes():
    # {A, C} and {B, C} reach the same (index, remaining, plates, length)
    # shape, so only the first one explored is kept.
    stores = [build_store("S", {"Menu": [("A", "10,00 MAD"), ("B", "10,00 MAD"), ("C", "20,00 MAD")]})]
    dishes = _dishes(stores, 40)
    exact = search_exact(dishes, 4000, 2, 10)
    approximate = search_approximate(dishes, 4000, 2, 10)
    assert len(exact) == 3
    assert len(approximate) == 2
    assert {tuple(d.dish.title for d in c) for c in approximate} == {("A", "C"), ("A", "B")}


def test_approximate_ranks_closest_first():
    dishes = _dishes(_one_dish_per_store([10, 20, 30, 40]), 70)
    results = search_approximate(dishes, 7000, 2, 10)
    totals = [total_cents(c) for c in results]
    assert totals == sorted(totals, reverse=True)
    assert totals[0] == 7000


# ── Optimized ────────────────────────────────────────────────────────────


def test_optimized_never_repeats_a_store():
    stores = [
        build_store("A", {"Menu": [("A1", "10,00 MAD"), ("A2", "20,00 MAD")]}),
        build_store("B", {"Menu": [("B1", "30,00 MAD")]}),
    ]
    dishes = _dishes(stores, 100)
    results = search_optimized(dishes, 10000, 2, 10)
    assert len(results) == 2
    for combo in results:
        assert store_count(combo) == len(combo)

    # The exhaustive search does allow the same-store pair
    assert any(store_count(c) == 1 for c in search_exact(dishes, 10000, 2, 10))


def test_optimized_respects_max_results():
    stores = _one_dish_per_store(range(10, 40))
    results = search_optimized(_dishes(stores, 200), 20000, 3, 4)
    assert len(results) == 4
    for combo in results:
        assert store_count(combo) == 3


def test_optimized_orders_by_residual_among_equal_store_counts():
    dishes = _dishes(_one_dish_per_store([10, 20, 30, 40]), 70)
    results = search_optimized(dishes, 7000, 2, 10)
    residuals = [7000 - total_cents(c) for c in results]
    assert residuals == sorted(residuals)


def test_optimized_insufficient_stores_returns_empty():
    stores = [build_store("Solo", {"Menu": [("A", "10,00 MAD"), ("B", "20,00 MAD")]})]
    assert search_optimized(_dishes(stores, 50), 5000, 2, 5) == []


# ── Greedy ───────────────────────────────────────────────────────────────


def test_greedy_is_reproducible_with_seed():
    dishes = _dishes(MIXED, 100)

    def titles(results):
        return [[d.dish.title for d in c] for c in results]

    first = search_greedy(dishes, 10000, 2, 5, rng=random.Random(42))
    second = search_greedy(dishes, 10000, 2, 5, rng=random.Random(42))
    assert titles(first) == titles(second)


def test_greedy_can_reuse_a_store_once_all_are_used():
    stores = [build_store("Solo", {"Menu": [("A", "10,00 MAD"), ("B", "20,00 MAD")]})]
    results = search_greedy(_dishes(stores, 100), 10000, 2, 3, rng=random.Random(3))
    assert results
    for combo in results:
        assert len(combo) == 2
        assert store_count(combo) == 1


def test_greedy_returns_distinct_combinations():
    dishes = _dishes(MIXED, 100)
    results = search_greedy(dishes, 10000, 2, 10, rng=random.Random(5))
    identities = [tuple(sorted(d.position for d in c)) for c in results]
    assert len(identities) == len(set(identities))


def test_greedy_without_rng_still_valid():
    dishes = _dishes(MIXED, 100)
    for combo in search_greedy(dishes, 10000, 2, 5):
        assert len(combo) == 2
        assert total_cents(combo) <= 10000


# ── Ranking / registry ───────────────────────────────────────────────────


def test_rank_combinations_drops_invalid_and_truncates():
    dishes = _dishes(_one_dish_per_store([10, 20, 30, 40]), 100)
    by_price = {d.cents: d for d in dishes}
    combos = [
        (by_price[1000], by_price[2000]),
        (by_price[3000], by_price[4000]),
        (by_price[2000], by_price[4000]),
        (),
    ]
    ranked = rank_combinations(combos, 6500, 5)
    assert [total_cents(c) for c in ranked] == [6000, 3000]
    assert len(rank_combinations(combos, 6500, 1)) == 1


def test_get_strategy_falls_back_to_optimized():
    assert get_strategy("exact") is search_exact
    assert get_strategy("GREEDY") is search_greedy
    assert get_strategy(None) is search_optimized
    assert get_strategy("bogus") is search_optimized
