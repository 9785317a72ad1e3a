from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from ..catalog.models import Category


class Algorithm(str, Enum):
    exact = "exact"
    approximate = "approximate"
    optimized = "optimized"
    greedy = "greedy"


class RecommendationRequest(BaseModel):
    budget: str = Field(..., min_length=1, description='Budget for the meal, e.g. "300 MAD"')
    num_plates: int = Field(..., ge=1, le=20)
    algorithm: Algorithm = Algorithm.optimized
    max_results: int = Field(default=10, ge=1, le=50)
    seed: int | None = Field(
        default=None, description="Seed for the greedy algorithm's random draws"
    )


class ProductGroup(BaseModel):
    category: str
    dishes: list[dict[str, Any]]


class Plate(BaseModel):
    store_name: str
    url: str | None = None
    restaurant: dict[str, Any] = Field(default_factory=dict)
    products: list[ProductGroup]


class Recommendation(BaseModel):
    plates: list[Plate]
    total_price: str
    residual: str
    total_price_num: float
    residual_num: float


class RecommendationStatistics(BaseModel):
    total_combinations_found: int
    average_price_per_plate: str
    min_residual: str
    max_residual: str
    stores_count: int
    total_dishes_considered: int


class RecommendationResponse(BaseModel):
    success: bool = True
    budget: str
    num_plates: int
    algorithm: Algorithm
    processing_time_ms: float
    statistics: RecommendationStatistics | None = None
    recommendations: list[Recommendation]
    message: str | None = None
    suggestions: list[str] = Field(default_factory=list)


class StorePriceSummary(BaseModel):
    store_name: str
    dish_count: int
    min_price: str
    max_price: str
    avg_price: str


class PriceRange(BaseModel):
    min: str
    max: str
    avg: str


class PriceStats(BaseModel):
    success: bool = True
    has_data: bool
    message: str | None = None
    total_stores: int = 0
    total_dishes: int = 0
    price_range: PriceRange | None = None
    percentiles: dict[str, str] = Field(default_factory=dict)
    store_statistics: list[StorePriceSummary] = Field(default_factory=list)
    suggestions: dict[str, str] = Field(default_factory=dict)


class StoreUpsertRequest(BaseModel):
    store_name: str = Field(..., min_length=1)
    url: str | None = None
    categories: list[Category] = Field(default_factory=list)
