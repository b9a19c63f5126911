# pizzeria/api/operator_routes.py
from __future__ import annotations

import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Request

from pizzeria.api.dependencies import (
    get_menu,
    get_operator_service,
    get_sessions,
    raise_for_outcome,
)
from pizzeria.api.schemas import (
    ClientOut,
    ConsistencyOut,
    CreatePizzaRequest,
    FlagOut,
    IngredientOut,
    IngredientRequest,
    LoginRequest,
    OrderOut,
    PhotoRequest,
    PizzaOut,
    PriceRequest,
    RestrictionRequest,
    SalesReportOut,
    SessionOut,
)
from pizzeria.application.operator_service import OperatorService
from pizzeria.domain.menu import Menu
from pizzeria.infrastructure.session_store import InMemorySessionStore

log = logging.getLogger("api.operator_routes")
router = APIRouter(prefix="/operator", tags=["operator"])


@router.post("/sessions", response_model=SessionOut)
def operator_login(
    req: LoginRequest,
    menu: Menu = Depends(get_menu),
    sessions: InMemorySessionStore = Depends(get_sessions),
) -> SessionOut:
    st = sessions.create()
    if not OperatorService(menu).login(req.email, req.password, st):
        sessions.drop(st.session_id)
        raise HTTPException(status_code=401, detail="invalid operator credentials")
    return SessionOut(session_token=st.session_id, email=st.account.email, operator=True)


# -------------------------
# Catalog curation
# -------------------------
@router.post("/pizzas", response_model=PizzaOut, status_code=201)
def create_pizza(req: CreatePizzaRequest, ops: OperatorService = Depends(get_operator_service)) -> PizzaOut:
    with ops.menu.lock:
        outcome = ops.create_pizza(req.name, req.pizza_type)
        raise_for_outcome(outcome)
        return PizzaOut.from_domain(outcome.value)


@router.post("/ingredients", response_model=IngredientOut, status_code=201)
def create_ingredient(req: IngredientRequest, ops: OperatorService = Depends(get_operator_service)) -> IngredientOut:
    with ops.menu.lock:
        outcome = ops.create_ingredient(req.name, req.unit_cost)
        raise_for_outcome(outcome)
        return IngredientOut.from_domain(outcome.value)


@router.put("/ingredients/{name}/price", response_model=IngredientOut)
def change_ingredient_price(
    name: str,
    req: PriceRequest,
    ops: OperatorService = Depends(get_operator_service),
) -> IngredientOut:
    with ops.menu.lock:
        outcome = ops.change_ingredient_price(name, req.price)
        raise_for_outcome(outcome)
        return IngredientOut.from_domain(outcome.value)


@router.post("/ingredients/{name}/forbid", response_model=FlagOut)
def forbid(name: str, req: RestrictionRequest, ops: OperatorService = Depends(get_operator_service)) -> FlagOut:
    return FlagOut(ok=ops.forbid(name, req.pizza_type))


@router.post("/ingredients/{name}/permit", response_model=FlagOut)
def permit(name: str, req: RestrictionRequest, ops: OperatorService = Depends(get_operator_service)) -> FlagOut:
    return FlagOut(ok=ops.permit(name, req.pizza_type))


@router.delete("/ingredients/{name}/restrictions", response_model=FlagOut)
def reset_restrictions(name: str, ops: OperatorService = Depends(get_operator_service)) -> FlagOut:
    return FlagOut(ok=ops.reset_restrictions(name))


@router.post("/pizzas/{name}/ingredients/{ingredient}", response_model=PizzaOut)
def add_ingredient(name: str, ingredient: str, ops: OperatorService = Depends(get_operator_service)) -> PizzaOut:
    with ops.menu.lock:
        outcome = ops.add_ingredient_to_pizza(name, ingredient)
        raise_for_outcome(outcome)
        return PizzaOut.from_domain(outcome.value)


@router.delete("/pizzas/{name}/ingredients/{ingredient}", response_model=PizzaOut)
def remove_ingredient(name: str, ingredient: str, ops: OperatorService = Depends(get_operator_service)) -> PizzaOut:
    with ops.menu.lock:
        outcome = ops.remove_ingredient_from_pizza(name, ingredient)
        raise_for_outcome(outcome)
        return PizzaOut.from_domain(outcome.value)


@router.get("/pizzas/{name}/consistency", response_model=ConsistencyOut)
def check_consistency(name: str, ops: OperatorService = Depends(get_operator_service)) -> ConsistencyOut:
    conflicts = ops.check_consistency(name)
    if conflicts is None:
        raise HTTPException(status_code=404, detail=f"unknown pizza: {name}")
    return ConsistencyOut(pizza=name, conflicts=sorted(conflicts))


@router.put("/pizzas/{name}/price", response_model=FlagOut)
def set_price(name: str, req: PriceRequest, ops: OperatorService = Depends(get_operator_service)) -> FlagOut:
    return FlagOut(ok=ops.set_pizza_price(name, req.price))


@router.put("/pizzas/{name}/photo", response_model=FlagOut)
def set_photo(name: str, req: PhotoRequest, ops: OperatorService = Depends(get_operator_service)) -> FlagOut:
    return FlagOut(ok=ops.set_photo(name, req.photo_ref))


@router.get("/pizzas/{name}/sales", response_model=Dict[str, int])
def pizza_sales(name: str, ops: OperatorService = Depends(get_operator_service)) -> Dict[str, int]:
    quantity = ops.quantity_ordered(name)
    if quantity is None:
        raise HTTPException(status_code=404, detail=f"unknown pizza: {name}")
    return {"quantity": quantity}


# -------------------------
# Orders & reports
# -------------------------
@router.post("/orders/sweep", response_model=List[OrderOut])
def sweep(ops: OperatorService = Depends(get_operator_service)) -> List[OrderOut]:
    try:
        with ops.menu.lock:
            return [OrderOut.from_domain(o) for o in ops.collect_validated_orders()]
    except Exception as e:
        log.exception("Processing /operator/orders/sweep error")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/orders/pending", response_model=List[OrderOut])
def pending(ops: OperatorService = Depends(get_operator_service)) -> List[OrderOut]:
    with ops.menu.lock:
        return [OrderOut.from_domain(o) for o in ops.pending_orders()]


@router.get("/orders/fulfilled", response_model=List[OrderOut])
def fulfilled(ops: OperatorService = Depends(get_operator_service)) -> List[OrderOut]:
    with ops.menu.lock:
        return [OrderOut.from_domain(o) for o in ops.fulfilled_orders()]


@router.get("/clients", response_model=List[ClientOut])
def clients(ops: OperatorService = Depends(get_operator_service)) -> List[ClientOut]:
    return [ClientOut.from_domain(info) for info in ops.clients()]


@router.get("/clients/{email}/orders", response_model=List[OrderOut])
def client_orders(email: str, ops: OperatorService = Depends(get_operator_service)) -> List[OrderOut]:
    with ops.menu.lock:
        return [OrderOut.from_domain(o) for o in ops.fulfilled_orders_for(email)]


@router.get("/reports/sales", response_model=SalesReportOut)
def sales_report(ops: OperatorService = Depends(get_operator_service)) -> SalesReportOut:
    try:
        with ops.menu.lock:
            return SalesReportOut(
                total_benefit=ops.total_benefit(),
                benefit_per_pizza=ops.benefit_per_pizza(),
                benefit_per_client=ops.benefit_per_client(),
                pizza_count_per_client=ops.pizza_count_per_client(),
                ranking=[p.name for p in ops.popularity_ranking()],
            )
    except Exception as e:
        log.exception("Processing /operator/reports/sales error")
        raise HTTPException(status_code=500, detail=str(e))


# -------------------------
# Snapshot (persistence collaborator)
# -------------------------
def _snapshot_service(request: Request):
    service = getattr(request.app.state, "snapshot_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="persistence is disabled")
    return service


@router.post("/snapshot/save", response_model=FlagOut)
def save_snapshot(request: Request, ops: OperatorService = Depends(get_operator_service)) -> FlagOut:
    return FlagOut(ok=_snapshot_service(request).save())


@router.post("/snapshot/restore", response_model=FlagOut)
def restore_snapshot(
    request: Request,
    ops: OperatorService = Depends(get_operator_service),
    sessions: InMemorySessionStore = Depends(get_sessions),
) -> FlagOut:
    ok = _snapshot_service(request).restore()
    if ok:
        # sessions point at accounts that were just replaced
        sessions.clear()
    return FlagOut(ok=ok)
