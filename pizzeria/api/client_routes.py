# pizzeria/api/client_routes.py
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from pizzeria.api.dependencies import (
    get_client_service,
    get_menu,
    get_sessions,
    raise_for_outcome,
)
from pizzeria.api.schemas import (
    AddLineRequest,
    CancelOrderRequest,
    ClientOut,
    EvaluationOut,
    EvaluationRequest,
    FilterRequest,
    FlagOut,
    LoginRequest,
    OrderOut,
    PizzaOut,
    RegisterRequest,
    SessionOut,
)
from pizzeria.application.client_service import ClientService
from pizzeria.domain.menu import Menu
from pizzeria.infrastructure.session_store import InMemorySessionStore

log = logging.getLogger("api.client_routes")
router = APIRouter(tags=["client"])


# -------------------------
# Registration & session
# -------------------------
@router.post("/clients", response_model=ClientOut, status_code=201)
def register(req: RegisterRequest, menu: Menu = Depends(get_menu)) -> ClientOut:
    outcome = ClientService(menu).register(req.email, req.password, req.info.to_domain())
    raise_for_outcome(outcome)
    return ClientOut.from_domain(outcome.value.info)


@router.post("/sessions", response_model=SessionOut)
def login(
    req: LoginRequest,
    menu: Menu = Depends(get_menu),
    sessions: InMemorySessionStore = Depends(get_sessions),
) -> SessionOut:
    st = sessions.create()
    service = ClientService(menu, st)
    if not service.login(req.email, req.password):
        sessions.drop(st.session_id)
        log.info("rejected login for %s", req.email)
        raise HTTPException(status_code=401, detail="invalid credentials")
    return SessionOut(session_token=st.session_id, email=service.current_client.email)


@router.delete("/sessions", response_model=FlagOut)
def logout(
    service: ClientService = Depends(get_client_service),
    sessions: InMemorySessionStore = Depends(get_sessions),
) -> FlagOut:
    raise_for_outcome(service.logout())
    sessions.drop(service.session.session_id)
    return FlagOut(ok=True)


# -------------------------
# Catalog, filters, evaluations
# -------------------------
@router.get("/pizzas", response_model=List[PizzaOut])
def list_pizzas(menu: Menu = Depends(get_menu)) -> List[PizzaOut]:
    with menu.lock:
        return [PizzaOut.from_domain(p) for p in ClientService(menu).pizzas()]


@router.get("/pizzas/filtered", response_model=List[PizzaOut])
def filtered_pizzas(service: ClientService = Depends(get_client_service)) -> List[PizzaOut]:
    with service.menu.lock:
        return [PizzaOut.from_domain(p) for p in service.select_filtered()]


@router.put("/filters", response_model=FlagOut)
def set_filters(req: FilterRequest, service: ClientService = Depends(get_client_service)) -> FlagOut:
    service.apply_filters(pizza_type=req.pizza_type, ingredient_names=req.ingredients, max_price=req.max_price)
    return FlagOut(ok=True)


@router.delete("/filters", response_model=FlagOut)
def clear_filters(service: ClientService = Depends(get_client_service)) -> FlagOut:
    service.clear_filters()
    return FlagOut(ok=True)


@router.get("/pizzas/{name}", response_model=PizzaOut)
def get_pizza(name: str, menu: Menu = Depends(get_menu)) -> PizzaOut:
    with menu.lock:
        pizza = ClientService(menu).find_pizza(name)
        if pizza is None:
            raise HTTPException(status_code=404, detail=f"unknown pizza: {name}")
        return PizzaOut.from_domain(pizza)


@router.get("/pizzas/{name}/evaluations", response_model=List[EvaluationOut])
def list_evaluations(name: str, menu: Menu = Depends(get_menu)) -> List[EvaluationOut]:
    return [EvaluationOut.from_domain(e) for e in ClientService(menu).evaluations(name)]


@router.post("/pizzas/{name}/evaluations", response_model=EvaluationOut, status_code=201)
def add_evaluation(
    name: str,
    req: EvaluationRequest,
    service: ClientService = Depends(get_client_service),
) -> EvaluationOut:
    outcome = service.add_evaluation(name, req.rating, req.comment)
    raise_for_outcome(outcome)
    return EvaluationOut.from_domain(outcome.value)


# -------------------------
# Orders
# -------------------------
@router.post("/orders", response_model=OrderOut, status_code=201)
def begin_order(service: ClientService = Depends(get_client_service)) -> OrderOut:
    with service.menu.lock:
        outcome = service.begin_order()
        raise_for_outcome(outcome)
        return OrderOut.from_domain(outcome.value)


@router.get("/orders/current", response_model=OrderOut)
def current_order(service: ClientService = Depends(get_client_service)) -> OrderOut:
    with service.menu.lock:
        if service.active_order is None:
            raise HTTPException(status_code=404, detail="no order in progress")
        return OrderOut.from_domain(service.active_order)


@router.post("/orders/current/lines", response_model=FlagOut)
def add_line(req: AddLineRequest, service: ClientService = Depends(get_client_service)) -> FlagOut:
    outcome = service.add_to_order(req.pizza, req.quantity)
    raise_for_outcome(outcome)
    return FlagOut(ok=bool(outcome.value))


@router.post("/orders/current/validate", response_model=FlagOut)
def validate_order(service: ClientService = Depends(get_client_service)) -> FlagOut:
    outcome = service.validate_order()
    raise_for_outcome(outcome)
    return FlagOut(ok=bool(outcome.value))


@router.post("/orders/cancel", response_model=OrderOut)
def cancel_order(req: CancelOrderRequest, service: ClientService = Depends(get_client_service)) -> OrderOut:
    with service.menu.lock:
        outcome = service.cancel_order(req.order_id)
        raise_for_outcome(outcome)
        return OrderOut.from_domain(outcome.value)


@router.get("/orders", response_model=List[OrderOut])
def past_orders(service: ClientService = Depends(get_client_service)) -> List[OrderOut]:
    with service.menu.lock:
        return [OrderOut.from_domain(o) for o in service.past_orders()]


@router.get("/orders/pending", response_model=List[OrderOut])
def pending_orders(service: ClientService = Depends(get_client_service)) -> List[OrderOut]:
    with service.menu.lock:
        return [OrderOut.from_domain(o) for o in service.pending_orders()]
