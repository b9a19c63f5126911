# pizzeria/api/dependencies.py
from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from pizzeria.application.client_service import ClientService
from pizzeria.application.operator_service import OperatorService
from pizzeria.application.results import Outcome
from pizzeria.domain.entities import OperatorAccount
from pizzeria.domain.errors import ErrorKind
from pizzeria.domain.menu import Menu
from pizzeria.infrastructure.session_store import InMemorySessionStore, SessionState

SESSION_HEADER = "X-Session-Token"

_STATUS_BY_KIND = {
    ErrorKind.NOT_AUTHENTICATED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.UNKNOWN_PIZZA: 404,
    ErrorKind.UNKNOWN_INGREDIENT: 404,
    ErrorKind.UNKNOWN_ORDER: 404,
    ErrorKind.INVALID_STATE: 409,
    ErrorKind.DUPLICATE_NAME: 409,
    ErrorKind.DUPLICATE_EMAIL: 409,
    ErrorKind.ALREADY_PRESENT: 409,
}


# -------------------------
# Dependencies via app.state
# -------------------------
def get_menu(request: Request) -> Menu:
    menu = getattr(request.app.state, "menu", None)
    if menu is None:
        raise RuntimeError("menu not initialized. Check app startup wiring.")
    return menu


def get_sessions(request: Request) -> InMemorySessionStore:
    sessions = getattr(request.app.state, "sessions", None)
    if sessions is None:
        raise RuntimeError("session store not initialized. Check app startup wiring.")
    return sessions


def get_session(
    token: Optional[str] = Header(default=None, alias=SESSION_HEADER),
    sessions: InMemorySessionStore = Depends(get_sessions),
) -> SessionState:
    st = sessions.get(token.strip()) if token and token.strip() else None
    if st is None:
        raise HTTPException(status_code=401, detail="unknown or expired session")
    return st


def get_client_service(
    st: SessionState = Depends(get_session),
    menu: Menu = Depends(get_menu),
) -> ClientService:
    return ClientService(menu, st)


def get_operator_service(
    st: SessionState = Depends(get_session),
    menu: Menu = Depends(get_menu),
) -> OperatorService:
    if not isinstance(st.account, OperatorAccount):
        raise HTTPException(status_code=403, detail="operator account required")
    return OperatorService(menu)


def raise_for_outcome(outcome: Outcome) -> None:
    if outcome.ok:
        return
    status = _STATUS_BY_KIND.get(outcome.error, 400)
    raise HTTPException(status_code=status, detail={"error": outcome.error.value, "message": outcome.message})
