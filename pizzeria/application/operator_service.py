# pizzeria/application/operator_service.py
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Set

from pizzeria.application.results import Outcome, locked, service_call
from pizzeria.domain.entities import Ingredient, OperatorAccount, PersonalInfo, Pizza, PizzaType
from pizzeria.domain.errors import ErrorKind
from pizzeria.domain.menu import Menu
from pizzeria.domain.orders import Order, OrderState
from pizzeria.infrastructure.session_store import SessionState

log = logging.getLogger("app.operator")


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def _unit_benefit(pizza: Pizza) -> float:
    return pizza.price - pizza.minimum_price()


class OperatorService:
    """Catalog curation, order fulfillment and sales reporting for the pizzaiolo."""

    def __init__(self, menu: Menu) -> None:
        self.menu = menu

    @locked
    def login(self, email: str, password: str, session: SessionState) -> bool:
        """Attach an operator account to the session; client credentials are refused."""
        account = self.menu.authenticate(email, password)
        if not isinstance(account, OperatorAccount):
            log.info("rejected operator login for %s", email)
            return False
        session.account = account
        session.active_order = None
        log.info("operator %s logged in (session=%s)", account.email, session.session_id)
        return True

    # ----------------------------
    # Catalog curation
    # ----------------------------
    @service_call
    def create_pizza(self, name: str, pizza_type: PizzaType) -> Outcome[Pizza]:
        if _blank(name):
            return Outcome.failure(ErrorKind.BLANK_NAME, "pizza name is required")
        if self.menu.find_pizza(name) is not None:
            return Outcome.failure(ErrorKind.DUPLICATE_NAME, f"pizza already exists: {name}")
        pizza = Pizza(name=name.strip(), type=pizza_type)
        self.menu.pizzas.append(pizza)
        log.info("created pizza %s (%s)", pizza.name, pizza_type.value)
        return Outcome.success(pizza)

    @service_call
    def create_ingredient(self, name: str, unit_cost: float) -> Outcome[Ingredient]:
        if _blank(name):
            return Outcome.failure(ErrorKind.BLANK_NAME, "ingredient name is required")
        if unit_cost <= 0:
            return Outcome.failure(ErrorKind.NON_POSITIVE_COST, "ingredient cost must be positive")
        if self.menu.find_ingredient(name) is not None:
            return Outcome.failure(ErrorKind.DUPLICATE_NAME, f"ingredient already exists: {name}")
        ingredient = Ingredient(name=name.strip(), unit_cost=float(unit_cost))
        self.menu.ingredients.append(ingredient)
        log.info("created ingredient %s cost=%.2f", ingredient.name, ingredient.unit_cost)
        return Outcome.success(ingredient)

    @service_call
    def change_ingredient_price(self, name: str, unit_cost: float) -> Outcome[Ingredient]:
        if _blank(name):
            return Outcome.failure(ErrorKind.BLANK_NAME, "ingredient name is required")
        if unit_cost <= 0:
            return Outcome.failure(ErrorKind.NON_POSITIVE_COST, "ingredient cost must be positive")
        ingredient = self.menu.find_ingredient(name)
        if ingredient is None:
            return Outcome.failure(ErrorKind.UNKNOWN_INGREDIENT, f"unknown ingredient: {name}")
        ingredient.unit_cost = float(unit_cost)
        return Outcome.success(ingredient)

    @locked
    def forbid(self, ingredient_name: str, pizza_type: PizzaType) -> bool:
        ingredient = self.menu.find_ingredient(ingredient_name)
        if ingredient is None or pizza_type is None:
            return False
        ingredient.forbidden_for.add(pizza_type)
        return True

    @locked
    def permit(self, ingredient_name: str, pizza_type: PizzaType) -> bool:
        ingredient = self.menu.find_ingredient(ingredient_name)
        if ingredient is None or pizza_type not in ingredient.forbidden_for:
            return False
        ingredient.forbidden_for.discard(pizza_type)
        return True

    @locked
    def reset_restrictions(self, ingredient_name: str) -> bool:
        ingredient = self.menu.find_ingredient(ingredient_name)
        if ingredient is None:
            return False
        ingredient.forbidden_for.clear()
        return True

    @service_call
    def add_ingredient_to_pizza(self, pizza_name: str, ingredient_name: str) -> Outcome[Pizza]:
        pizza = self.menu.find_pizza(pizza_name)
        if pizza is None:
            return Outcome.failure(ErrorKind.UNKNOWN_PIZZA, f"unknown pizza: {pizza_name}")
        ingredient = self.menu.find_ingredient(ingredient_name)
        if ingredient is None:
            return Outcome.failure(ErrorKind.UNKNOWN_INGREDIENT, f"unknown ingredient: {ingredient_name}")
        if pizza.has_ingredient(ingredient):
            return Outcome.failure(ErrorKind.ALREADY_PRESENT, f"{ingredient.name} is already on {pizza.name}")
        if not pizza.add_ingredient(ingredient):
            return Outcome.failure(
                ErrorKind.FORBIDDEN_INGREDIENT,
                f"{ingredient.name} is forbidden on {pizza.type.value} pizzas",
            )
        return Outcome.success(pizza)

    @service_call
    def remove_ingredient_from_pizza(self, pizza_name: str, ingredient_name: str) -> Outcome[Pizza]:
        pizza = self.menu.find_pizza(pizza_name)
        if pizza is None:
            return Outcome.failure(ErrorKind.UNKNOWN_PIZZA, f"unknown pizza: {pizza_name}")
        ingredient = self.menu.find_ingredient(ingredient_name)
        if ingredient is None:
            return Outcome.failure(ErrorKind.UNKNOWN_INGREDIENT, f"unknown ingredient: {ingredient_name}")
        if not pizza.remove_ingredient(ingredient):
            return Outcome.failure(ErrorKind.NOT_ON_PIZZA, f"{ingredient.name} is not on {pizza.name}")
        return Outcome.success(pizza)

    @locked
    def check_consistency(self, pizza_name: str) -> Optional[Set[str]]:
        """Names of the pizza's ingredients that are now forbidden for its type (None for an unknown pizza)."""
        pizza = self.menu.find_pizza(pizza_name)
        if pizza is None:
            return None
        return pizza.conflicting_ingredients()

    @locked
    def set_photo(self, pizza_name: str, photo_ref: str) -> bool:
        pizza = self.menu.find_pizza(pizza_name)
        if pizza is None or _blank(photo_ref):
            return False
        pizza.photo_ref = photo_ref.strip()
        return True

    # ----------------------------
    # Pricing
    # ----------------------------
    @locked
    def pizza_price(self, pizza_name: str) -> Optional[float]:
        pizza = self.menu.find_pizza(pizza_name)
        return pizza.price if pizza is not None else None

    @locked
    def minimum_price(self, pizza_name: str) -> Optional[float]:
        pizza = self.menu.find_pizza(pizza_name)
        return pizza.minimum_price() if pizza is not None else None

    @locked
    def set_pizza_price(self, pizza_name: str, price: float) -> bool:
        pizza = self.menu.find_pizza(pizza_name)
        if pizza is None:
            return False
        return pizza.set_manual_price(price)

    @locked
    def pizzas(self) -> List[Pizza]:
        return list(self.menu.pizzas)

    # ----------------------------
    # Orders
    # ----------------------------
    @locked
    def collect_validated_orders(self) -> List[Order]:
        """Fulfillment sweep: every VALIDATED ledger order becomes FULFILLED and is returned."""
        batch = [o for o in self.menu.orders if o.state == OrderState.VALIDATED]
        for order in batch:
            order.fulfill()
        log.info("fulfillment sweep processed %d orders", len(batch))
        return batch

    @locked
    def pending_orders(self) -> List[Order]:
        return [o for o in self.menu.orders if o.state == OrderState.VALIDATED]

    @locked
    def fulfilled_orders(self) -> List[Order]:
        return [o for o in self.menu.orders if o.state == OrderState.FULFILLED]

    @locked
    def fulfilled_orders_for(self, email: str) -> List[Order]:
        key = (email or "").strip().lower()
        return [o for o in self.fulfilled_orders() if o.owner.email.lower() == key]

    @locked
    def clients(self) -> List[PersonalInfo]:
        return [c.info for c in self.menu.clients()]

    # ----------------------------
    # Reporting
    # ----------------------------
    @locked
    def benefit_per_pizza(self) -> Dict[str, float]:
        return {p.name: _unit_benefit(p) for p in self.menu.pizzas}

    def order_benefit(self, order: Order) -> float:
        return sum(_unit_benefit(p) * qty for p, qty in order.lines.items())

    @locked
    def total_benefit(self) -> float:
        return sum(self.order_benefit(o) for o in self.fulfilled_orders())

    @locked
    def pizza_count_per_client(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for order in self.fulfilled_orders():
            email = order.owner.email
            counts[email] = counts.get(email, 0) + order.pizza_count()
        return counts

    @locked
    def benefit_per_client(self) -> Dict[str, float]:
        benefits: Dict[str, float] = {}
        for order in self.fulfilled_orders():
            email = order.owner.email
            benefits[email] = benefits.get(email, 0.0) + self.order_benefit(order)
        return benefits

    def _fulfilled_quantities(self) -> Dict[Pizza, int]:
        sold: Dict[Pizza, int] = {}
        for order in self.fulfilled_orders():
            for pizza, qty in order.lines.items():
                sold[pizza] = sold.get(pizza, 0) + qty
        return sold

    @locked
    def quantity_ordered(self, pizza_name: str) -> Optional[int]:
        pizza = self.menu.find_pizza(pizza_name)
        if pizza is None:
            return None
        return self._fulfilled_quantities().get(pizza, 0)

    @locked
    def popularity_ranking(self) -> List[Pizza]:
        sold = self._fulfilled_quantities()
        ranked = [p for p in self.menu.pizzas if sold.get(p, 0) > 0]
        # sort is stable: ties keep catalog order
        ranked.sort(key=lambda p: sold[p], reverse=True)
        return ranked
