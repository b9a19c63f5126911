# pizzeria/domain/menu.py
from __future__ import annotations

import copy
import threading
from dataclasses import dataclass
from typing import List, Optional, Tuple

from pizzeria.core.config import (
    DEFAULT_OPERATOR_EMAIL,
    DEFAULT_OPERATOR_FIRST_NAME,
    DEFAULT_OPERATOR_LAST_NAME,
    DEFAULT_OPERATOR_PASSWORD,
)
from pizzeria.domain.entities import (
    Account,
    ClientAccount,
    Ingredient,
    OperatorAccount,
    PersonalInfo,
    Pizza,
)
from pizzeria.domain.orders import Order


@dataclass(frozen=True)
class MenuSnapshot:
    pizzas: Tuple[Pizza, ...] = ()
    ingredients: Tuple[Ingredient, ...] = ()
    accounts: Tuple[Account, ...] = ()
    orders: Tuple[Order, ...] = ()


def _same_name(a: str, b: str) -> bool:
    return (a or "").strip().lower() == (b or "").strip().lower()


class Menu:
    """
    The catalog store: pizzas, ingredients, accounts and the global order ledger.

    One instance per process; services hold a reference to it and mutate it in place.
    `lock` is the single coarse lock every service call runs under.
    """

    def __init__(self, seed_operator: bool = True) -> None:
        self.lock = threading.RLock()
        self.pizzas: List[Pizza] = []
        self.ingredients: List[Ingredient] = []
        self.accounts: List[Account] = []
        self.orders: List[Order] = []
        if seed_operator:
            self.accounts.append(
                OperatorAccount(
                    email=DEFAULT_OPERATOR_EMAIL,
                    password=DEFAULT_OPERATOR_PASSWORD,
                    info=PersonalInfo(last_name=DEFAULT_OPERATOR_LAST_NAME, first_name=DEFAULT_OPERATOR_FIRST_NAME),
                )
            )

    # accounts
    def authenticate(self, email: str, password: str) -> Optional[Account]:
        for account in self.accounts:
            if _same_name(account.email, email) and account.password == password:
                return account
        return None

    def find_account(self, email: str) -> Optional[Account]:
        for account in self.accounts:
            if _same_name(account.email, email):
                return account
        return None

    def add_account(self, account: Account) -> None:
        self.accounts.append(account)

    def clients(self) -> List[ClientAccount]:
        return [a for a in self.accounts if isinstance(a, ClientAccount)]

    # catalog
    def find_pizza(self, name: str) -> Optional[Pizza]:
        for pizza in self.pizzas:
            if _same_name(pizza.name, name):
                return pizza
        return None

    def find_ingredient(self, name: str) -> Optional[Ingredient]:
        for ingredient in self.ingredients:
            if _same_name(ingredient.name, name):
                return ingredient
        return None

    # ledger
    def record_order(self, order: Order) -> None:
        self.orders.append(order)

    # persistence collaborator
    def export_snapshot(self) -> MenuSnapshot:
        """Point-in-time copy of the whole object graph, detached from the live store."""
        with self.lock:
            # one deepcopy call so shared references stay shared in the copy
            pizzas, ingredients, accounts, orders = copy.deepcopy(
                (self.pizzas, self.ingredients, self.accounts, self.orders)
            )
        return MenuSnapshot(
            pizzas=tuple(pizzas),
            ingredients=tuple(ingredients),
            accounts=tuple(accounts),
            orders=tuple(orders),
        )

    def replace_contents(self, snapshot: MenuSnapshot) -> None:
        """Swap every collection in place; the Menu object itself is kept."""
        with self.lock:
            self.pizzas[:] = snapshot.pizzas
            self.ingredients[:] = snapshot.ingredients
            self.accounts[:] = snapshot.accounts
            self.orders[:] = snapshot.orders
