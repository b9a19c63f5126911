# pizzeria/domain/orders.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, FrozenSet, Optional
from uuid import uuid4

from pizzeria.domain.entities import ClientAccount, Pizza
from pizzeria.domain.errors import InvalidStateError


class OrderState(str, Enum):
    CREATED = "CREATED"
    VALIDATED = "VALIDATED"
    FULFILLED = "FULFILLED"
    CANCELLED = "CANCELLED"


# No transition leaves these.
TERMINAL_STATES: FrozenSet[OrderState] = frozenset([
    OrderState.FULFILLED,
    OrderState.CANCELLED,
])


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(eq=False)
class Order:
    """
    A client's cart and its lifecycle:

        CREATED --add_line--> CREATED
        CREATED --validate--> VALIDATED   (non-empty only)
        VALIDATED --fulfill--> FULFILLED
        CREATED|VALIDATED --cancel--> CANCELLED (lines cleared)

    Prices are never cached: total_price uses each pizza's current price.
    """
    owner: ClientAccount
    lines: Dict[Pizza, int] = field(default_factory=dict)
    state: OrderState = OrderState.CREATED
    created_at: datetime = field(default_factory=_utc_now)
    order_id: str = field(default_factory=lambda: uuid4().hex)

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def add_line(self, pizza: Optional[Pizza], quantity: int) -> bool:
        if self.state != OrderState.CREATED:
            raise InvalidStateError(f"order {self.order_id} is {self.state.value}, pizzas can only be added while CREATED")
        if pizza is None or quantity <= 0:
            return False
        self.lines[pizza] = self.lines.get(pizza, 0) + quantity
        return True

    def validate(self) -> bool:
        if self.state != OrderState.CREATED or not self.lines:
            return False
        self.state = OrderState.VALIDATED
        return True

    def fulfill(self) -> None:
        if self.state == OrderState.VALIDATED:
            self.state = OrderState.FULFILLED

    def cancel(self) -> None:
        if self.is_terminal:
            raise InvalidStateError(f"order {self.order_id} is already {self.state.value}")
        self.lines.clear()
        self.state = OrderState.CANCELLED

    def total_price(self) -> float:
        return sum(p.price * qty for p, qty in self.lines.items())

    def pizza_count(self) -> int:
        return sum(self.lines.values())

    @property
    def created_at_display(self) -> str:
        return self.created_at.strftime("%d-%m-%Y %H:%M:%S")
