from __future__ import annotations

import pytest

from pizzeria.application.client_service import ClientService
from pizzeria.application.operator_service import OperatorService
from pizzeria.domain.entities import PersonalInfo, PizzaType
from pizzeria.domain.menu import Menu
from pizzeria.domain.orders import OrderState
from pizzeria.infrastructure.session_store import SessionState


def _place(service: ClientService, *lines):
    order = service.begin_order().value
    for name, qty in lines:
        service.add_to_order(name, qty)
    service.validate_order()
    return order


@pytest.fixture
def bob(catalog) -> ClientService:
    service = ClientService(catalog)
    service.register("b@x.com", "pw", PersonalInfo("Martin", "Bob"))
    service.login("b@x.com", "pw")
    return service


def test_end_to_end_scenario_without_manual_price():
    menu = Menu()
    ops = OperatorService(menu)
    client = ClientService(menu)
    assert client.register("a@x.com", "pw", PersonalInfo("Doe", "Alice")).ok
    assert client.login("a@x.com", "pw")

    ops.create_ingredient("cheese", 10.0)
    ops.create_pizza("Margherita", PizzaType.VEGETARIAN)
    ops.add_ingredient_to_pizza("Margherita", "cheese")
    assert ops.minimum_price("Margherita") == pytest.approx(14.0)

    order = client.begin_order().value
    client.add_to_order("Margherita", 2)
    assert client.validate_order().value is True
    assert order.state == OrderState.VALIDATED
    assert order.total_price() == pytest.approx(28.0)

    assert ops.collect_validated_orders() == [order]
    assert order.state == OrderState.FULFILLED
    assert ops.benefit_per_client() == {"a@x.com": pytest.approx(0.0)}


def test_end_to_end_scenario_with_manual_price():
    menu = Menu()
    ops = OperatorService(menu)
    client = ClientService(menu)
    client.register("a@x.com", "pw", PersonalInfo("Doe", "Alice"))
    client.login("a@x.com", "pw")
    ops.create_ingredient("cheese", 10.0)
    ops.create_pizza("Margherita", PizzaType.VEGETARIAN)
    ops.add_ingredient_to_pizza("Margherita", "cheese")
    assert ops.set_pizza_price("Margherita", 16.0)

    _place(client, ("Margherita", 2))
    ops.collect_validated_orders()
    assert ops.benefit_per_client() == {"a@x.com": pytest.approx(4.0)}
    assert ops.total_benefit() == pytest.approx(4.0)


def test_sweep_only_takes_validated_orders(client, ops):
    validated = _place(client, ("Margherita", 1))
    cancelled = _place(client, ("Regina", 1))
    client.cancel_order(cancelled.order_id)
    in_progress = client.begin_order().value
    client.add_to_order("Regina", 3)

    assert ops.pending_orders() == [validated]
    assert ops.collect_validated_orders() == [validated]
    assert ops.collect_validated_orders() == []
    assert validated.state == OrderState.FULFILLED
    assert cancelled.state == OrderState.CANCELLED
    assert in_progress.state == OrderState.CREATED
    assert ops.fulfilled_orders() == [validated]


def test_fulfilled_orders_cannot_be_cancelled_by_client(client, ops):
    order = _place(client, ("Margherita", 1))
    ops.collect_validated_orders()
    assert client.cancel_order(order.order_id).ok is False
    assert order.state == OrderState.FULFILLED


def test_benefit_per_pizza(catalog, ops):
    ops.set_pizza_price("Regina", 10.0)
    benefits = ops.benefit_per_pizza()
    assert benefits["Margherita"] == pytest.approx(0.0)
    assert benefits["Regina"] == pytest.approx(1.6)


def test_order_benefit(client, ops):
    ops.set_pizza_price("Regina", 10.0)
    order = _place(client, ("Regina", 2), ("Margherita", 1))
    assert ops.order_benefit(order) == pytest.approx(3.2)


def test_reports_only_count_fulfilled_orders(client, bob, ops):
    ops.set_pizza_price("Margherita", 5.2)
    ops.set_pizza_price("Regina", 10.4)

    _place(client, ("Margherita", 2), ("Regina", 1))
    _place(bob, ("Regina", 3))
    ops.collect_validated_orders()
    _place(bob, ("Margherita", 10))  # validated, never swept

    assert ops.pizza_count_per_client() == {"a@x.com": 3, "b@x.com": 3}
    benefits = ops.benefit_per_client()
    assert benefits["a@x.com"] == pytest.approx(2 * 1.0 + 2.0)
    assert benefits["b@x.com"] == pytest.approx(3 * 2.0)
    assert ops.total_benefit() == pytest.approx(10.0)

    assert ops.quantity_ordered("Regina") == 4
    assert ops.quantity_ordered("Margherita") == 2
    assert ops.quantity_ordered("Nope") is None


def test_popularity_ranking(client, bob, ops):
    ops.create_pizza("Calzone", PizzaType.REGIONAL)
    _place(client, ("Margherita", 1), ("Regina", 2))
    _place(bob, ("Margherita", 3))
    ops.collect_validated_orders()

    assert [p.name for p in ops.popularity_ranking()] == ["Margherita", "Regina"]


def test_popularity_ties_keep_catalog_order(client, ops):
    _place(client, ("Regina", 2), ("Margherita", 2))
    ops.collect_validated_orders()
    assert [p.name for p in ops.popularity_ranking()] == ["Margherita", "Regina"]


def test_client_listings(client, bob, ops):
    first = _place(client, ("Margherita", 1))
    _place(bob, ("Regina", 1))
    ops.collect_validated_orders()

    assert {info.first_name for info in ops.clients()} == {"Alice", "Bob"}
    assert ops.fulfilled_orders_for("A@X.COM") == [first]
    assert ops.fulfilled_orders_for("nobody@x.com") == []


def test_operator_login_attaches_account_to_session(client, ops):
    session = SessionState()
    assert ops.login("CHEF@pizza.fr", "admin", session)
    assert session.account.email == "chef@pizza.fr"

    other = SessionState()
    assert ops.login("chef@pizza.fr", "ADMIN", other) is False
    assert ops.login("a@x.com", "pw", other) is False
    assert other.account is None
