from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .models import DEFAULT_PIZZA_IMAGE

Category = Literal["Classic", "Premium", "Vegetarian", "Vegan", "Spicy"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PizzaCreate(_CamelModel):
    name: str = Field(min_length=1, max_length=120)
    description: str = Field(min_length=1)
    price: float = Field(ge=0)
    image: str = DEFAULT_PIZZA_IMAGE
    category: Category = "Classic"
    ingredients: list[str] = Field(min_length=1)
    available: bool = True

    @field_validator("name", "description")
    @classmethod
    def strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class PizzaUpdate(_CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    description: str | None = Field(default=None, min_length=1)
    price: float | None = Field(default=None, ge=0)
    image: str | None = None
    category: Category | None = None
    ingredients: list[str] | None = Field(default=None, min_length=1)
    available: bool | None = None

    @field_validator("name", "description")
    @classmethod
    def strip_text(cls, value: str | None) -> str | None:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class PizzaResponse(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    name: str
    description: str
    price: float
    image: str
    category: str
    ingredients: list[str]
    available: bool
    created_at: datetime
