# test/conftest.py
from __future__ import annotations

import pytest

from pizzeria.application.client_service import ClientService
from pizzeria.application.operator_service import OperatorService
from pizzeria.domain.entities import PersonalInfo, PizzaType
from pizzeria.domain.menu import Menu


@pytest.fixture
def menu() -> Menu:
    return Menu()


@pytest.fixture
def ops(menu: Menu) -> OperatorService:
    return OperatorService(menu)


@pytest.fixture
def catalog(menu: Menu, ops: OperatorService) -> Menu:
    """
    tomato 1.0, mozzarella 2.0, ham 3.0 (forbidden on vegetarian)
    Margherita (VEGETARIAN): tomato + mozzarella -> minimum 4.2
    Regina (MEAT): tomato + mozzarella + ham     -> minimum 8.4
    """
    ops.create_ingredient("tomato", 1.0)
    ops.create_ingredient("mozzarella", 2.0)
    ops.create_ingredient("ham", 3.0)
    ops.forbid("ham", PizzaType.VEGETARIAN)

    ops.create_pizza("Margherita", PizzaType.VEGETARIAN)
    ops.add_ingredient_to_pizza("Margherita", "tomato")
    ops.add_ingredient_to_pizza("Margherita", "mozzarella")

    ops.create_pizza("Regina", PizzaType.MEAT)
    for name in ("tomato", "mozzarella", "ham"):
        ops.add_ingredient_to_pizza("Regina", name)
    return menu


@pytest.fixture
def info() -> PersonalInfo:
    return PersonalInfo(last_name="Doe", first_name="Alice", address="1 rue des Pins", age=30)


@pytest.fixture
def client(catalog: Menu, info: PersonalInfo) -> ClientService:
    """A ClientService with a@x.com registered and logged in."""
    service = ClientService(catalog)
    assert service.register("a@x.com", "pw", info).ok
    assert service.login("a@x.com", "pw")
    return service
