# pizzeria/domain/filters.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set

from pizzeria.domain.entities import Pizza, PizzaType


@dataclass
class FilterCriteria:
    """
    Cumulative pizza filter. Criteria combine with AND; each one defaults to match-all.

    The ingredient criterion is inclusive: a pizza passes when it contains at least
    one of the listed ingredient names (case-insensitive).
    """
    max_price: float = math.inf
    pizza_type: Optional[PizzaType] = None
    ingredient_names: Set[str] = field(default_factory=set)

    def set_ingredients(self, names: Iterable[str]) -> None:
        self.ingredient_names = {n.strip().lower() for n in names if n and n.strip()}

    def clear(self) -> None:
        self.max_price = math.inf
        self.pizza_type = None
        self.ingredient_names = set()

    def matches(self, pizza: Pizza) -> bool:
        if pizza.price > self.max_price:
            return False
        if self.pizza_type is not None and pizza.type != self.pizza_type:
            return False
        if not self.ingredient_names:
            return True
        return any(i.name.lower() in self.ingredient_names for i in pizza.ingredients)

    def select(self, pizzas: Iterable[Pizza]) -> List[Pizza]:
        return [p for p in pizzas if self.matches(p)]
