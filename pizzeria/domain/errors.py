# pizzeria/domain/errors.py
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure causes reported by the services."""

    INVALID_STATE = "invalid_state"
    NOT_AUTHENTICATED = "not_authenticated"
    FORBIDDEN = "forbidden"
    MISSING_ARGUMENT = "missing_argument"
    BLANK_NAME = "blank_name"
    NON_POSITIVE_COST = "non_positive_cost"
    DUPLICATE_NAME = "duplicate_name"
    DUPLICATE_EMAIL = "duplicate_email"
    UNKNOWN_PIZZA = "unknown_pizza"
    UNKNOWN_INGREDIENT = "unknown_ingredient"
    UNKNOWN_ORDER = "unknown_order"
    FORBIDDEN_INGREDIENT = "forbidden_ingredient"
    ALREADY_PRESENT = "already_present"
    NOT_ON_PIZZA = "not_on_pizza"


class PizzeriaError(Exception):
    kind: ErrorKind = ErrorKind.INVALID_STATE

    def __init__(self, message: str = "", kind: ErrorKind | None = None) -> None:
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class InvalidStateError(PizzeriaError):
    """Raised when an order (or the session's active order) cannot take the requested transition."""

    kind = ErrorKind.INVALID_STATE


class NotAuthenticatedError(PizzeriaError):
    kind = ErrorKind.NOT_AUTHENTICATED

    def __init__(self, message: str = "no client is logged in") -> None:
        super().__init__(message)
