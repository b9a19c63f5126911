# pizzeria/api/schemas.py
from __future__ import annotations

from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from pizzeria.domain.entities import Evaluation, Ingredient, PersonalInfo, Pizza, PizzaType
from pizzeria.domain.orders import Order, OrderState


# -------------------------
# Requests
# -------------------------
class PersonalInfoIn(BaseModel):
    last_name: str
    first_name: str
    address: str = ""
    age: int = Field(default=0, ge=0)

    def to_domain(self) -> PersonalInfo:
        return PersonalInfo(last_name=self.last_name, first_name=self.first_name, address=self.address, age=self.age)


class RegisterRequest(BaseModel):
    email: str = Field(..., description="Login identifier, unique case-insensitively")
    password: str
    info: PersonalInfoIn


class LoginRequest(BaseModel):
    email: str
    password: str


class AddLineRequest(BaseModel):
    pizza: str
    quantity: int = 1


class CancelOrderRequest(BaseModel):
    order_id: Optional[str] = Field(default=None, description="Defaults to the order in progress")


class FilterRequest(BaseModel):
    pizza_type: Optional[PizzaType] = None
    ingredients: Optional[List[str]] = None
    max_price: Optional[float] = Field(default=None, ge=0)


class EvaluationRequest(BaseModel):
    rating: int
    comment: Optional[str] = None


class CreatePizzaRequest(BaseModel):
    name: str
    pizza_type: PizzaType


class IngredientRequest(BaseModel):
    name: str
    unit_cost: float


class RestrictionRequest(BaseModel):
    pizza_type: PizzaType


class PriceRequest(BaseModel):
    price: float


class PhotoRequest(BaseModel):
    photo_ref: str


# -------------------------
# Responses
# -------------------------
class SessionOut(BaseModel):
    session_token: str
    email: str
    operator: bool = False


class IngredientOut(BaseModel):
    name: str
    unit_cost: float
    forbidden_for: List[PizzaType] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, ingredient: Ingredient) -> "IngredientOut":
        return cls(
            name=ingredient.name,
            unit_cost=ingredient.unit_cost,
            forbidden_for=sorted(ingredient.forbidden_for, key=lambda t: t.value),
        )


class EvaluationOut(BaseModel):
    rating: int
    comment: Optional[str] = None
    author_id: str

    @classmethod
    def from_domain(cls, evaluation: Evaluation) -> "EvaluationOut":
        return cls(rating=evaluation.rating, comment=evaluation.comment, author_id=evaluation.author_id)


class PizzaOut(BaseModel):
    name: str
    pizza_type: PizzaType
    ingredients: List[str]
    price: float
    minimum_price: float
    average_rating: float
    photo_ref: str = ""

    @classmethod
    def from_domain(cls, pizza: Pizza) -> "PizzaOut":
        return cls(
            name=pizza.name,
            pizza_type=pizza.type,
            ingredients=pizza.ingredient_names(),
            price=pizza.price,
            minimum_price=pizza.minimum_price(),
            average_rating=pizza.average_rating(),
            photo_ref=pizza.photo_ref,
        )


class OrderLineOut(BaseModel):
    pizza: str
    quantity: int
    unit_price: float


class OrderOut(BaseModel):
    order_id: str
    owner: str
    state: OrderState
    created_at: str
    lines: List[OrderLineOut]
    total_price: float

    @classmethod
    def from_domain(cls, order: Order) -> "OrderOut":
        return cls(
            order_id=order.order_id,
            owner=order.owner.email,
            state=order.state,
            created_at=order.created_at_display,
            lines=[OrderLineOut(pizza=p.name, quantity=q, unit_price=p.price) for p, q in order.lines.items()],
            total_price=order.total_price(),
        )


class FlagOut(BaseModel):
    ok: bool


class ClientOut(BaseModel):
    last_name: str
    first_name: str
    address: str
    age: int

    @classmethod
    def from_domain(cls, info: PersonalInfo) -> "ClientOut":
        return cls(last_name=info.last_name, first_name=info.first_name, address=info.address, age=info.age)


class ConsistencyOut(BaseModel):
    pizza: str
    conflicts: List[str]


class SalesReportOut(BaseModel):
    total_benefit: float
    benefit_per_pizza: Dict[str, float]
    benefit_per_client: Dict[str, float]
    pizza_count_per_client: Dict[str, int]
    ranking: List[str]
