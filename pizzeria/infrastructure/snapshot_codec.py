# pizzeria/infrastructure/snapshot_codec.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List

from pizzeria.domain.entities import (
    Account,
    ClientAccount,
    Evaluation,
    Ingredient,
    OperatorAccount,
    PersonalInfo,
    Pizza,
    PizzaType,
)
from pizzeria.domain.menu import MenuSnapshot
from pizzeria.domain.orders import Order, OrderState

log = logging.getLogger("infra.snapshot_codec")

KIND_CLIENT = "client"
KIND_OPERATOR = "operator"


# ----------------------------
# Encoding
# ----------------------------
def _info_to_doc(info: PersonalInfo) -> Dict[str, Any]:
    return {"last_name": info.last_name, "first_name": info.first_name, "address": info.address, "age": info.age}


def _account_to_doc(account: Account) -> Dict[str, Any]:
    doc: Dict[str, Any] = {
        "email": account.email,
        "password": account.password,
        "info": _info_to_doc(account.info),
    }
    if isinstance(account, ClientAccount):
        doc["kind"] = KIND_CLIENT
        doc["history"] = [o.order_id for o in account.history]
    else:
        doc["kind"] = KIND_OPERATOR
    return doc


def snapshot_to_document(snapshot: MenuSnapshot) -> Dict[str, Any]:
    """Plain dict form of a snapshot; shared objects are referenced by name, email or order id."""
    return {
        "ingredients": [
            {
                "name": i.name,
                "unit_cost": i.unit_cost,
                "forbidden_for": sorted(t.value for t in i.forbidden_for),
            }
            for i in snapshot.ingredients
        ],
        "pizzas": [
            {
                "name": p.name,
                "type": p.type.value,
                "ingredients": p.ingredient_names(),
                "evaluations": [
                    {"rating": e.rating, "comment": e.comment, "author_id": e.author_id} for e in p.evaluations
                ],
                "manual_price": p.manual_price,
                "photo_ref": p.photo_ref,
            }
            for p in snapshot.pizzas
        ],
        "accounts": [_account_to_doc(a) for a in snapshot.accounts],
        "orders": [
            {
                "order_id": o.order_id,
                "owner": o.owner.email,
                "state": o.state.value,
                "created_at": o.created_at.isoformat(),
                "lines": [{"pizza": p.name, "quantity": q} for p, q in o.lines.items()],
            }
            for o in snapshot.orders
        ],
    }


# ----------------------------
# Decoding
# ----------------------------
def _info_from_doc(doc: Dict[str, Any]) -> PersonalInfo:
    return PersonalInfo(
        last_name=str(doc.get("last_name") or ""),
        first_name=str(doc.get("first_name") or ""),
        address=str(doc.get("address") or ""),
        age=int(doc.get("age") or 0),
    )


def snapshot_from_document(doc: Dict[str, Any]) -> MenuSnapshot:
    try:
        ingredients: List[Ingredient] = [
            Ingredient(
                name=str(d["name"]),
                unit_cost=float(d["unit_cost"]),
                forbidden_for={PizzaType(t) for t in d.get("forbidden_for") or []},
            )
            for d in doc.get("ingredients") or []
        ]
        ingredients_by_name = {i.name.lower(): i for i in ingredients}

        pizzas: List[Pizza] = []
        for d in doc.get("pizzas") or []:
            pizza = Pizza(
                name=str(d["name"]),
                type=PizzaType(d["type"]),
                ingredients=[ingredients_by_name[str(n).lower()] for n in d.get("ingredients") or []],
                evaluations=[
                    Evaluation(rating=int(e["rating"]), comment=e.get("comment"), author_id=str(e["author_id"]))
                    for e in d.get("evaluations") or []
                ],
                manual_price=d.get("manual_price"),
                photo_ref=str(d.get("photo_ref") or ""),
            )
            pizzas.append(pizza)
        pizzas_by_name = {p.name.lower(): p for p in pizzas}

        accounts: List[Account] = []
        clients_by_email: Dict[str, ClientAccount] = {}
        for d in doc.get("accounts") or []:
            info = _info_from_doc(d.get("info") or {})
            if d.get("kind") == KIND_OPERATOR:
                accounts.append(OperatorAccount(email=str(d["email"]), password=str(d["password"]), info=info))
            else:
                client = ClientAccount(email=str(d["email"]), password=str(d["password"]), info=info)
                clients_by_email[client.email.lower()] = client
                accounts.append(client)

        orders: List[Order] = []
        orders_by_id: Dict[str, Order] = {}
        for d in doc.get("orders") or []:
            order = Order(
                owner=clients_by_email[str(d["owner"]).lower()],
                lines={pizzas_by_name[str(ln["pizza"]).lower()]: int(ln["quantity"]) for ln in d.get("lines") or []},
                state=OrderState(d["state"]),
                created_at=datetime.fromisoformat(d["created_at"]),
                order_id=str(d["order_id"]),
            )
            orders.append(order)
            orders_by_id[order.order_id] = order

        for d in doc.get("accounts") or []:
            if d.get("kind") == KIND_OPERATOR:
                continue
            client = clients_by_email[str(d["email"]).lower()]
            client.history = [orders_by_id[oid] for oid in d.get("history") or []]
    except (KeyError, TypeError, ValueError) as e:
        log.exception("Invalid snapshot document")
        raise ValueError(f"Invalid snapshot document: {e}") from e

    return MenuSnapshot(
        pizzas=tuple(pizzas),
        ingredients=tuple(ingredients),
        accounts=tuple(accounts),
        orders=tuple(orders),
    )
