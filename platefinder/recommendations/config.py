from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class RecommenderConfig:
    currency: str = os.getenv("PLATEFINDER_CURRENCY", "MAD")
    default_max_results: int = 10
    # Completed combinations collected by the optimized search, per requested result
    optimized_result_factor: int = 10
    optimized_max_states: int = 500_000
    exact_max_states: int = 1_000_000
    greedy_trial_factor: int = 5
    greedy_max_picks: int = 100
    max_store_summaries: int = 20


DEFAULT_RECOMMENDER_CONFIG = RecommenderConfig()
