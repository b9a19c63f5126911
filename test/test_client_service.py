from __future__ import annotations

import pytest

from pizzeria.application.client_service import ClientService
from pizzeria.domain.entities import PersonalInfo, PizzaType
from pizzeria.domain.errors import ErrorKind
from pizzeria.domain.orders import OrderState


# ----------------------------
# Registration & session
# ----------------------------
def test_register_rejects_missing_arguments(catalog, info):
    service = ClientService(catalog)
    assert service.register(None, "pw", info).error == ErrorKind.MISSING_ARGUMENT
    assert service.register("b@x.com", None, info).error == ErrorKind.MISSING_ARGUMENT
    assert service.register("b@x.com", "pw", None).error == ErrorKind.MISSING_ARGUMENT


def test_register_rejects_duplicate_email_case_insensitively(client, info):
    outcome = ClientService(client.menu).register("A@X.COM", "other", info)
    assert outcome.error == ErrorKind.DUPLICATE_EMAIL
    assert len(client.menu.clients()) == 1


def test_login_email_case_insensitive_password_case_sensitive(catalog, info):
    service = ClientService(catalog)
    service.register("a@x.com", "Secret", info)
    assert service.login("A@X.com", "secret") is False
    assert service.current_client is None
    assert service.login("A@X.com", "Secret") is True
    assert service.current_client.email == "a@x.com"


def test_operator_cannot_log_in_as_client(catalog):
    service = ClientService(catalog)
    assert service.login("chef@pizza.fr", "admin") is False


def test_logout(client):
    assert client.logout().ok
    assert client.current_client is None
    assert client.logout().error == ErrorKind.NOT_AUTHENTICATED


def test_actions_require_session(catalog):
    service = ClientService(catalog)
    assert service.begin_order().error == ErrorKind.NOT_AUTHENTICATED
    assert service.add_to_order("Margherita", 1).error == ErrorKind.NOT_AUTHENTICATED
    assert service.validate_order().error == ErrorKind.NOT_AUTHENTICATED
    assert service.cancel_order().error == ErrorKind.NOT_AUTHENTICATED
    assert service.add_evaluation("Margherita", 5).error == ErrorKind.NOT_AUTHENTICATED
    assert service.pending_orders() == []
    assert service.past_orders() == []


def test_sessions_are_independent(catalog, info):
    first = ClientService(catalog)
    first.register("a@x.com", "pw", info)
    first.login("a@x.com", "pw")
    second = ClientService(catalog)
    assert second.current_client is None
    assert first.session is not second.session


# ----------------------------
# Orders
# ----------------------------
def test_order_flow_records_validated_order(client):
    order = client.begin_order().value
    assert client.active_order is order
    assert client.add_to_order("margherita", 2).value is True
    assert client.add_to_order("Unknown", 1).value is False
    assert client.add_to_order("Margherita", 0).value is False

    assert client.validate_order().value is True
    assert order.state == OrderState.VALIDATED
    assert client.active_order is None
    assert client.menu.orders == [order]
    assert client.current_client.history == [order]
    assert client.pending_orders() == [order]
    assert client.past_orders() == [order]


def test_validate_empty_order_is_soft_false(client):
    order = client.begin_order().value
    outcome = client.validate_order()
    assert outcome.ok and outcome.value is False
    assert order.state == OrderState.CREATED
    assert client.menu.orders == []


def test_order_operations_without_active_order(client):
    assert client.add_to_order("Margherita", 1).error == ErrorKind.INVALID_STATE
    assert client.validate_order().error == ErrorKind.INVALID_STATE
    assert client.cancel_order().error == ErrorKind.INVALID_STATE


def test_cancel_active_order(client):
    order = client.begin_order().value
    client.add_to_order("Regina", 1)
    outcome = client.cancel_order()
    assert outcome.value is order
    assert order.state == OrderState.CANCELLED
    assert order.lines == {}
    assert client.active_order is None
    assert client.menu.orders == []


def test_cancel_validated_order_by_id(client):
    order = client.begin_order().value
    client.add_to_order("Regina", 1)
    client.validate_order()

    assert client.cancel_order(order.order_id).ok
    assert order.state == OrderState.CANCELLED
    assert client.pending_orders() == []
    # already cancelled: terminal
    assert client.cancel_order(order.order_id).error == ErrorKind.INVALID_STATE
    assert client.cancel_order("missing").error == ErrorKind.UNKNOWN_ORDER


# ----------------------------
# Filters
# ----------------------------
def _names(pizzas):
    return sorted(p.name for p in pizzas)


def test_no_filter_selects_everything(client):
    assert _names(client.select_filtered()) == ["Margherita", "Regina"]


def test_filter_by_type(client):
    client.filter_by_type(PizzaType.MEAT)
    assert _names(client.select_filtered()) == ["Regina"]


def test_filter_by_max_price(client):
    client.filter_by_max_price(5.0)
    assert _names(client.select_filtered()) == ["Margherita"]
    client.filter_by_max_price(8.4)
    assert _names(client.select_filtered()) == ["Margherita", "Regina"]


def test_ingredient_filter_is_inclusive(client):
    client.filter_by_ingredients("HAM")
    assert _names(client.select_filtered()) == ["Regina"]
    client.filter_by_ingredients("ham", "tomato")
    assert _names(client.select_filtered()) == ["Margherita", "Regina"]
    client.filter_by_ingredients("truffle")
    assert client.select_filtered() == []


def test_filters_combine_and_clear(client):
    client.apply_filters(pizza_type=PizzaType.VEGETARIAN, ingredient_names=["ham"])
    assert client.select_filtered() == []
    client.clear_filters()
    assert _names(client.select_filtered()) == ["Margherita", "Regina"]


def test_filtered_selection_is_recomputed(client, ops):
    client.filter_by_max_price(5.0)
    assert _names(client.select_filtered()) == ["Margherita"]
    ops.set_pizza_price("Margherita", 9.0)
    assert client.select_filtered() == []


# ----------------------------
# Evaluations
# ----------------------------
def test_add_evaluation_and_average(client):
    assert client.average_rating("Margherita") == 0
    for rating in (5, 3, 4):
        assert client.add_evaluation("Margherita", rating, "ok").ok
    assert client.average_rating("Margherita") == pytest.approx(4.0)
    assert {e.author_id for e in client.evaluations("Margherita")} == {"a@x.com"}


def test_add_evaluation_clamps_and_checks_pizza(client):
    assert client.add_evaluation("Regina", 12).value.rating == 5
    assert client.add_evaluation("Nope", 3).error == ErrorKind.UNKNOWN_PIZZA
    assert client.evaluations("Nope") == []
    assert client.average_rating("Nope") == 0


def test_find_pizza_and_listing(client):
    assert client.find_pizza("REGINA").name == "Regina"
    assert client.find_pizza("nope") is None
    assert _names(client.pizzas()) == ["Margherita", "Regina"]


def test_register_stores_personal_info(catalog):
    service = ClientService(catalog)
    outcome = service.register("b@x.com", "pw", PersonalInfo("Martin", "Bob", "2 rue", 41))
    assert outcome.ok
    assert catalog.find_account("B@X.COM").info.age == 41
