from __future__ import annotations

from collections import Counter
from typing import Any


def compute_analytics(searches: list[dict[str, Any]], price_stats_requests: int = 0) -> dict[str, Any]:
    total = len(searches)

    # Average response time
    times = [s["response_time_ms"] for s in searches if "response_time_ms" in s]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Algorithm usage
    algorithm_usage = dict(Counter(s.get("algorithm", "unknown") for s in searches))

    # Top budgets
    budget_counter: Counter[str] = Counter()
    for s in searches:
        budget_counter[s.get("budget", "unknown")] += 1
    top_budgets = [{"budget": b, "count": c} for b, c in budget_counter.most_common(10)]

    plates = [s["num_plates"] for s in searches if "num_plates" in s]
    avg_plates = round(sum(plates) / len(plates), 1) if plates else 0.0

    empty = sum(1 for s in searches if not s.get("results_returned"))

    # Cache stats
    cache_hits = sum(1 for s in searches if s.get("cache_hit"))
    cache_misses = total - cache_hits

    return {
        "total_searches": total,
        "price_stats_requests": price_stats_requests,
        "avg_response_time_ms": avg_time,
        "algorithm_usage": algorithm_usage,
        "top_budgets": top_budgets,
        "avg_plates_requested": avg_plates,
        "empty_result_rate": round(empty / total * 100, 1) if total else 0.0,
        "cache_stats": {
            "hits": cache_hits,
            "misses": cache_misses,
            "hit_rate": round(cache_hits / total * 100, 1) if total else 0.0,
        },
    }
