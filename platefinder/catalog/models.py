from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Dish(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str = ""
    price: str | float | None = Field(default=None, description='Raw price text, e.g. "119,40 MAD"')
    description: str | None = None
    image: Any = None
    discount: Any = None


class Category(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = Field(default="", alias="category")
    dishes: list[Dish] = Field(default_factory=list)

    @field_validator("dishes", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return value or []


class Store(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = Field(..., alias="nameStore")
    url: str | None = None
    restaurant: dict[str, Any] = Field(default_factory=dict)
    last_scraped: str | None = Field(default=None, alias="lastScraped")
    categories: list[Category] = Field(default_factory=list)

    @field_validator("restaurant", "categories", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any, info) -> Any:
        if value is None:
            return {} if info.field_name == "restaurant" else []
        return value

    def dish_count(self) -> int:
        return sum(len(c.dishes) for c in self.categories)
