# pizzeria/domain/entities.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Set

from pizzeria.core.config import MARGIN_RATE, PRICE_STEP, RATING_MAX, RATING_MIN

if TYPE_CHECKING:
    from pizzeria.domain.orders import Order


class PizzaType(str, Enum):
    VEGETARIAN = "VEGETARIAN"
    MEAT = "MEAT"
    REGIONAL = "REGIONAL"


def minimum_price(total_cost: float) -> float:
    """Cost-plus-margin floor price, rounded up to the next PRICE_STEP."""
    if total_cost <= 0:
        return 0.0
    steps = round(total_cost * MARGIN_RATE / PRICE_STEP, 6)
    return round(math.ceil(steps) * PRICE_STEP, 2)


# ----------------------------
# Catalog
# ----------------------------
@dataclass(eq=False)
class Ingredient:
    name: str
    unit_cost: float
    forbidden_for: Set[PizzaType] = field(default_factory=set)

    def forbids(self, pizza_type: PizzaType) -> bool:
        return pizza_type in self.forbidden_for


@dataclass(frozen=True)
class Evaluation:
    rating: int
    comment: Optional[str]
    author_id: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "rating", max(RATING_MIN, min(RATING_MAX, int(self.rating))))

    def __str__(self) -> str:
        suffix = f" - {self.comment}" if self.comment else ""
        return f"{self.rating}/{RATING_MAX}{suffix}"


@dataclass(eq=False)
class Pizza:
    """
    A catalog pizza. Hashed by identity so it can key order lines.
    Restrictions are checked when an ingredient is added, never afterwards.
    """
    name: str
    type: PizzaType
    ingredients: List[Ingredient] = field(default_factory=list)
    evaluations: List[Evaluation] = field(default_factory=list)
    manual_price: Optional[float] = None
    photo_ref: str = ""

    def ingredient_cost(self) -> float:
        return sum(i.unit_cost for i in self.ingredients)

    def minimum_price(self) -> float:
        return minimum_price(self.ingredient_cost())

    @property
    def price(self) -> float:
        floor = self.minimum_price()
        # a manual price left below a raised minimum is ignored, not dropped
        if self.manual_price is not None and self.manual_price >= floor:
            return self.manual_price
        return floor

    def set_manual_price(self, price: float) -> bool:
        if price < self.minimum_price():
            return False
        self.manual_price = float(price)
        return True

    def clear_manual_price(self) -> None:
        self.manual_price = None

    def has_ingredient(self, ingredient: Ingredient) -> bool:
        return any(i is ingredient for i in self.ingredients)

    def add_ingredient(self, ingredient: Ingredient) -> bool:
        if self.has_ingredient(ingredient) or ingredient.forbids(self.type):
            return False
        self.ingredients.append(ingredient)
        return True

    def remove_ingredient(self, ingredient: Ingredient) -> bool:
        if not self.has_ingredient(ingredient):
            return False
        self.ingredients = [i for i in self.ingredients if i is not ingredient]
        return True

    def conflicting_ingredients(self) -> Set[str]:
        return {i.name for i in self.ingredients if i.forbids(self.type)}

    def ingredient_names(self) -> List[str]:
        return [i.name for i in self.ingredients]

    def add_evaluation(self, evaluation: Evaluation) -> None:
        self.evaluations.append(evaluation)

    def average_rating(self) -> float:
        if not self.evaluations:
            return 0.0
        return sum(e.rating for e in self.evaluations) / len(self.evaluations)


# ----------------------------
# Accounts
# ----------------------------
@dataclass(frozen=True)
class PersonalInfo:
    last_name: str
    first_name: str
    address: str = ""
    age: int = 0

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(eq=False)
class ClientAccount:
    email: str
    password: str
    info: PersonalInfo
    history: List["Order"] = field(default_factory=list)

    @property
    def is_operator(self) -> bool:
        return False

    def record_order(self, order: "Order") -> None:
        self.history.append(order)


@dataclass(eq=False)
class OperatorAccount:
    email: str
    password: str
    info: PersonalInfo

    @property
    def is_operator(self) -> bool:
        return True


Account = ClientAccount | OperatorAccount
