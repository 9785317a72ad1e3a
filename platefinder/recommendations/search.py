"""
Combination search strategies.

Every strategy takes the flattened dishes sorted ascending by price, a budget
in cents, the number of plates wanted and the number of results to keep. It
returns ranked combinations of exactly ``num_plates`` dishes whose total never
exceeds the budget.

* ``exact`` enumerates include/exclude choices depth-first, pruned with
  prefix-sum bounds, and keeps the best ``max_results`` seen.
* ``approximate`` walks the same choices but never revisits a subproblem with
  an already explored ``(index, remaining budget, remaining plates, length)``
  shape, so combinations reached through an equivalent shape are skipped.
* ``optimized`` expands partial combinations breadth-first, allows at most
  one dish per store and stops after a bounded number of completions.
* ``greedy`` builds random combinations store by store.
"""
from __future__ import annotations

import heapq
import logging
import random
from bisect import bisect_right
from collections import deque
from itertools import accumulate
from typing import Callable, Iterable, Sequence

from .config import DEFAULT_RECOMMENDER_CONFIG, RecommenderConfig
from .flatten import FlatDishEntry, group_by_store

logger = logging.getLogger(__name__)

Combination = tuple[FlatDishEntry, ...]
RankKey = Callable[[Combination, int], tuple]


def total_cents(combination: Combination) -> int:
    return sum(e.cents for e in combination)


def store_count(combination: Combination) -> int:
    return len({e.store.name for e in combination})


# ── Ranking ──────────────────────────────────────────────────────────────


def closest_to_budget(combination: Combination, budget_cents: int) -> tuple:
    total = total_cents(combination)
    return (budget_cents - total, -total)


def most_stores_first(combination: Combination, budget_cents: int) -> tuple:
    return (-store_count(combination), *closest_to_budget(combination, budget_cents))


def closest_then_most_stores(combination: Combination, budget_cents: int) -> tuple:
    return (*closest_to_budget(combination, budget_cents), -store_count(combination))


def rank_combinations(
    combinations: Iterable[Combination],
    budget_cents: int,
    max_results: int,
    key: RankKey = closest_to_budget,
) -> list[Combination]:
    """Drop empty or over-budget combinations, sort by ``key`` and truncate."""
    valid = [c for c in combinations if 0 < total_cents(c) <= budget_cents]
    valid.sort(key=lambda c: key(c, budget_cents))
    return valid[:max_results]


def _invalid(dishes: Sequence[FlatDishEntry], budget_cents: int, num_plates: int, max_results: int) -> bool:
    return budget_cents <= 0 or num_plates <= 0 or max_results <= 0 or len(dishes) < num_plates


# ── Strategy A: exact ────────────────────────────────────────────────────


def search_exact(
    dishes: Sequence[FlatDishEntry],
    budget_cents: int,
    num_plates: int,
    max_results: int,
    *,
    rng: random.Random | None = None,
    config: RecommenderConfig = DEFAULT_RECOMMENDER_CONFIG,
) -> list[Combination]:
    if _invalid(dishes, budget_cents, num_plates, max_results):
        return []

    n = len(dishes)
    prices = [d.cents for d in dishes]
    prefix = list(accumulate(prices, initial=0))

    def cheapest_completion(index: int, plates: int) -> int | None:
        end = index + plates
        return prefix[end] - prefix[index] if end <= n else None

    def priciest_completion(index: int, plates: int, remaining: int) -> int:
        # The ``plates`` most expensive dishes after ``index`` that fit individually
        last = bisect_right(prices, remaining, lo=index)
        start = max(index, last - plates)
        return prefix[last] - prefix[start]

    # Worst kept result sits at the top: keys are (-residual, -sequence)
    kept: list[tuple[int, int, Combination]] = []
    sequence = 0
    expanded = 0

    stack: list[tuple[int, int, int, Combination]] = [(0, budget_cents, num_plates, ())]
    while stack:
        index, remaining, plates, chosen = stack.pop()

        if plates == 0:
            residual = remaining
            sequence += 1
            if len(kept) < max_results:
                heapq.heappush(kept, (-residual, -sequence, chosen))
            elif residual < -kept[0][0]:
                heapq.heapreplace(kept, (-residual, -sequence, chosen))
            continue

        cheapest = cheapest_completion(index, plates)
        if cheapest is None or cheapest > remaining:
            continue

        if len(kept) == max_results:
            best_residual = remaining - min(remaining, priciest_completion(index, plates, remaining))
            if best_residual >= -kept[0][0]:
                continue

        expanded += 1
        if expanded > config.exact_max_states:
            logger.warning(
                "Exact search stopped after %d states; results are best-effort",
                config.exact_max_states,
            )
            break

        dish = dishes[index]
        stack.append((index + 1, remaining, plates, chosen))
        stack.append((index + 1, remaining - dish.cents, plates - 1, chosen + (dish,)))

    return rank_combinations((c for _, _, c in kept), budget_cents, max_results)


# ── Strategy A': approximate ─────────────────────────────────────────────


def search_approximate(
    dishes: Sequence[FlatDishEntry],
    budget_cents: int,
    num_plates: int,
    max_results: int,
    *,
    rng: random.Random | None = None,
    config: RecommenderConfig = DEFAULT_RECOMMENDER_CONFIG,
) -> list[Combination]:
    if _invalid(dishes, budget_cents, num_plates, max_results):
        return []

    n = len(dishes)
    explored: set[tuple[int, int, int, int]] = set()
    found: list[Combination] = []

    stack: list[tuple[int, int, int, Combination]] = [(0, budget_cents, num_plates, ())]
    while stack:
        index, remaining, plates, chosen = stack.pop()

        shape = (index, remaining, plates, len(chosen))
        if shape in explored:
            continue
        explored.add(shape)
        if len(explored) > config.exact_max_states:
            logger.warning(
                "Approximate search stopped after %d states", config.exact_max_states,
            )
            break

        if plates == 0:
            found.append(chosen)
            continue
        if index >= n or remaining <= 0:
            continue

        dish = dishes[index]
        stack.append((index + 1, remaining, plates, chosen))
        if dish.cents <= remaining:
            stack.append((index + 1, remaining - dish.cents, plates - 1, chosen + (dish,)))

    return rank_combinations(found, budget_cents, max_results)


# ── Strategy B: optimized ────────────────────────────────────────────────


def search_optimized(
    dishes: Sequence[FlatDishEntry],
    budget_cents: int,
    num_plates: int,
    max_results: int,
    *,
    rng: random.Random | None = None,
    config: RecommenderConfig = DEFAULT_RECOMMENDER_CONFIG,
) -> list[Combination]:
    if _invalid(dishes, budget_cents, num_plates, max_results):
        return []

    n = len(dishes)
    target = max_results * config.optimized_result_factor
    found: list[Combination] = []
    expanded = 0

    queue: deque[tuple[int, int, int, Combination, frozenset[str]]] = deque(
        [(0, budget_cents, num_plates, (), frozenset())]
    )
    while queue and len(found) < target:
        index, remaining, plates, chosen, visited = queue.popleft()

        if plates == 0:
            found.append(chosen)
            continue
        if index >= n or remaining <= 0 or n - index < plates:
            continue

        dish = dishes[index]
        # Sorted ascending, so nothing from here on fits either
        if dish.cents > remaining:
            continue

        expanded += 1
        if expanded > config.optimized_max_states:
            logger.warning(
                "Optimized search stopped after %d states with %d combinations",
                config.optimized_max_states, len(found),
            )
            break

        if dish.store.name not in visited:
            queue.append((
                index + 1,
                remaining - dish.cents,
                plates - 1,
                chosen + (dish,),
                visited | {dish.store.name},
            ))
        queue.append((index + 1, remaining, plates, chosen, visited))

    return rank_combinations(found, budget_cents, max_results, key=most_stores_first)


# ── Strategy C: greedy ───────────────────────────────────────────────────


def search_greedy(
    dishes: Sequence[FlatDishEntry],
    budget_cents: int,
    num_plates: int,
    max_results: int,
    *,
    rng: random.Random | None = None,
    config: RecommenderConfig = DEFAULT_RECOMMENDER_CONFIG,
) -> list[Combination]:
    """
    Randomly assemble combinations, preferring a different store per pick.

    Results depend on ``rng``; pass a seeded ``random.Random`` for
    reproducible output. Fewer than ``max_results`` combinations, or none,
    may come back even when valid ones exist.
    """
    if budget_cents <= 0 or num_plates <= 0 or max_results <= 0:
        return []

    by_store = group_by_store(dishes)
    names = list(by_store)
    if not names:
        return []

    rng = rng or random.Random()
    found: list[Combination] = []
    seen: set[tuple[int, ...]] = set()

    for _ in range(max_results * config.greedy_trial_factor):
        if len(found) >= max_results:
            break

        used: set[str] = set()
        chosen: list[FlatDishEntry] = []
        total = 0
        picks = 0
        while len(chosen) < num_plates and picks < config.greedy_max_picks:
            picks += 1
            name = rng.choice(names)
            if name in used and len(used) < len(names):
                continue
            dish = rng.choice(by_store[name])
            if total + dish.cents <= budget_cents:
                chosen.append(dish)
                total += dish.cents
                used.add(name)

        if len(chosen) != num_plates:
            continue
        identity = tuple(sorted(e.position for e in chosen))
        if identity not in seen:
            seen.add(identity)
            found.append(tuple(chosen))

    return rank_combinations(found, budget_cents, max_results, key=closest_then_most_stores)


Strategy = Callable[..., list[Combination]]

STRATEGIES: dict[str, Strategy] = {
    "exact": search_exact,
    "approximate": search_approximate,
    "optimized": search_optimized,
    "greedy": search_greedy,
}

DEFAULT_STRATEGY = "optimized"


def get_strategy(name: str | None) -> Strategy:
    """Look up a strategy by name, falling back to ``optimized``."""
    strategy = STRATEGIES.get((name or DEFAULT_STRATEGY).lower())
    if strategy is None:
        logger.warning("Unknown search strategy %r, using %s", name, DEFAULT_STRATEGY)
        return STRATEGIES[DEFAULT_STRATEGY]
    return strategy
