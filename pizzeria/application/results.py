# pizzeria/application/results.py
from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from pizzeria.domain.errors import ErrorKind, PizzeriaError

T = TypeVar("T")

log = logging.getLogger("app.results")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    value: Optional[T] = None
    error: Optional[ErrorKind] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str = "") -> "Outcome[T]":
        return cls(error=kind, message=message or kind.value)


def locked(fn: Callable[..., Any]) -> Callable[..., Any]:
    @functools.wraps(fn)
    def wrapper(self, *args: Any, **kwargs: Any) -> Any:
        with self.menu.lock:
            return fn(self, *args, **kwargs)
    return wrapper


def service_call(fn: Callable[..., Any]) -> Callable[..., Any]:
    """
    Run a service method under the store lock and turn domain errors into Outcome failures.
    The wrapped object must expose `menu`.
    """
    @functools.wraps(fn)
    def wrapper(self, *args: Any, **kwargs: Any) -> Any:
        with self.menu.lock:
            try:
                return fn(self, *args, **kwargs)
            except PizzeriaError as e:
                log.info("%s rejected: %s (%s)", fn.__name__, e, e.kind.value)
                return Outcome.failure(e.kind, str(e))
    return wrapper
