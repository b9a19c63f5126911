# pizzeria/application/client_service.py
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from pizzeria.application.results import Outcome, locked, service_call
from pizzeria.domain.entities import ClientAccount, Evaluation, PersonalInfo, Pizza, PizzaType
from pizzeria.domain.errors import ErrorKind, InvalidStateError, NotAuthenticatedError
from pizzeria.domain.menu import Menu
from pizzeria.domain.orders import Order, OrderState
from pizzeria.infrastructure.session_store import SessionState

log = logging.getLogger("app.client")


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


class ClientService:
    """
    Client-facing operations against the shared Menu.

    All per-user state (logged-in account, active order, filters) lives in the
    SessionState, so one service object per session token is enough.
    """

    def __init__(self, menu: Menu, session: Optional[SessionState] = None) -> None:
        self.menu = menu
        self.session = session or SessionState()

    # ----------------------------
    # Registration & session
    # ----------------------------
    @property
    def current_client(self) -> Optional[ClientAccount]:
        account = self.session.account
        return account if isinstance(account, ClientAccount) else None

    @property
    def active_order(self) -> Optional[Order]:
        return self.session.active_order

    def _require_client(self) -> ClientAccount:
        client = self.current_client
        if client is None:
            raise NotAuthenticatedError()
        return client

    @service_call
    def register(self, email: str, password: str, info: Optional[PersonalInfo]) -> Outcome[ClientAccount]:
        if _blank(email) or _blank(password) or info is None:
            return Outcome.failure(ErrorKind.MISSING_ARGUMENT, "email, password and personal info are required")
        if self.menu.find_account(email) is not None:
            return Outcome.failure(ErrorKind.DUPLICATE_EMAIL, f"an account already exists for {email}")
        account = ClientAccount(email=email.strip(), password=password, info=info)
        self.menu.add_account(account)
        log.info("registered client %s", account.email)
        return Outcome.success(account)

    @locked
    def login(self, email: str, password: str) -> bool:
        account = self.menu.authenticate(email, password)
        if not isinstance(account, ClientAccount):
            return False
        self.session.account = account
        self.session.active_order = None
        log.info("client %s logged in (session=%s)", account.email, self.session.session_id)
        return True

    @service_call
    def logout(self) -> Outcome[None]:
        client = self._require_client()
        self.session.account = None
        self.session.active_order = None
        log.info("client %s logged out", client.email)
        return Outcome.success()

    # ----------------------------
    # Order lifecycle
    # ----------------------------
    @service_call
    def begin_order(self) -> Outcome[Order]:
        client = self._require_client()
        order = Order(owner=client)
        self.session.active_order = order
        return Outcome.success(order)

    @service_call
    def add_to_order(self, pizza_name: str, quantity: int) -> Outcome[bool]:
        self._require_client()
        order = self.session.active_order
        if order is None:
            raise InvalidStateError("no order in progress, begin an order first")
        return Outcome.success(order.add_line(self.menu.find_pizza(pizza_name), quantity))

    @service_call
    def validate_order(self) -> Outcome[bool]:
        """Validate the active order; an empty cart is a soft `False`, not an error."""
        client = self._require_client()
        order = self.session.active_order
        if order is None:
            raise InvalidStateError("no order in progress")
        if not order.validate():
            return Outcome.success(False)
        self.menu.record_order(order)
        client.record_order(order)
        self.session.active_order = None
        log.info("order %s validated for %s total=%.2f", order.order_id, client.email, order.total_price())
        return Outcome.success(True)

    @service_call
    def cancel_order(self, order_id: Optional[str] = None) -> Outcome[Order]:
        client = self._require_client()
        if order_id is None:
            order = self.session.active_order
            if order is None:
                raise InvalidStateError("no order in progress")
        else:
            order = next((o for o in client.history if o.order_id == order_id), None)
            active = self.session.active_order
            if order is None and active is not None and active.order_id == order_id:
                order = active
            if order is None:
                return Outcome.failure(ErrorKind.UNKNOWN_ORDER, f"no order {order_id} for {client.email}")
        order.cancel()
        if order is self.session.active_order:
            self.session.active_order = None
        log.info("order %s cancelled by %s", order.order_id, client.email)
        return Outcome.success(order)

    @locked
    def pending_orders(self) -> List[Order]:
        client = self.current_client
        if client is None:
            return []
        return [o for o in client.history if o.state == OrderState.VALIDATED]

    @locked
    def past_orders(self) -> List[Order]:
        client = self.current_client
        return list(client.history) if client is not None else []

    # ----------------------------
    # Catalog & filters
    # ----------------------------
    @locked
    def pizzas(self) -> List[Pizza]:
        return list(self.menu.pizzas)

    @locked
    def find_pizza(self, name: str) -> Optional[Pizza]:
        return self.menu.find_pizza(name)

    def filter_by_type(self, pizza_type: Optional[PizzaType]) -> None:
        self.session.filters.pizza_type = pizza_type

    def filter_by_ingredients(self, *names: str) -> None:
        self.session.filters.set_ingredients(names)

    def filter_by_max_price(self, max_price: float) -> None:
        self.session.filters.max_price = max_price

    def apply_filters(
        self,
        pizza_type: Optional[PizzaType] = None,
        ingredient_names: Optional[Iterable[str]] = None,
        max_price: Optional[float] = None,
    ) -> None:
        if pizza_type is not None:
            self.filter_by_type(pizza_type)
        if ingredient_names is not None:
            self.filter_by_ingredients(*ingredient_names)
        if max_price is not None:
            self.filter_by_max_price(max_price)

    @locked
    def select_filtered(self) -> List[Pizza]:
        return self.session.filters.select(self.menu.pizzas)

    def clear_filters(self) -> None:
        self.session.filters.clear()

    # ----------------------------
    # Evaluations
    # ----------------------------
    @locked
    def evaluations(self, pizza_name: str) -> List[Evaluation]:
        pizza = self.menu.find_pizza(pizza_name)
        return list(pizza.evaluations) if pizza is not None else []

    @locked
    def average_rating(self, pizza_name: str) -> float:
        pizza = self.menu.find_pizza(pizza_name)
        return pizza.average_rating() if pizza is not None else 0.0

    @service_call
    def add_evaluation(self, pizza_name: str, rating: int, comment: Optional[str] = None) -> Outcome[Evaluation]:
        client = self._require_client()
        pizza = self.menu.find_pizza(pizza_name)
        if pizza is None:
            return Outcome.failure(ErrorKind.UNKNOWN_PIZZA, f"unknown pizza: {pizza_name}")
        evaluation = Evaluation(rating=rating, comment=comment, author_id=client.email)
        pizza.add_evaluation(evaluation)
        return Outcome.success(evaluation)
