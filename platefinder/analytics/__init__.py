"""
Usage analytics.

Responsibilities:
- Record one event per recommendation search and price-stats lookup.
- Summarise searches: volume, latency, algorithms, budgets, empty results.
"""
