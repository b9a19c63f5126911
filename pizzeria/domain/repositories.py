# pizzeria/domain/repositories.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from pizzeria.domain.menu import MenuSnapshot


class SnapshotRepo(ABC):
    """Stores and returns full catalog snapshots. The storage format is the repo's business."""

    @abstractmethod
    def save(self, snapshot: MenuSnapshot) -> None: ...

    @abstractmethod
    def load(self) -> Optional[MenuSnapshot]: ...
