# pizzeria/application/snapshot_service.py
from __future__ import annotations

import logging
from dataclasses import dataclass

from pizzeria.domain.menu import Menu
from pizzeria.domain.repositories import SnapshotRepo

log = logging.getLogger("app.snapshot")


@dataclass(frozen=True)
class SnapshotService:
    menu: Menu
    repo: SnapshotRepo

    def save(self) -> bool:
        try:
            self.repo.save(self.menu.export_snapshot())
        except Exception:
            log.exception("Saving snapshot failed")
            return False
        return True

    def restore(self) -> bool:
        """Replace the menu contents with the stored snapshot; False when nothing could be loaded."""
        try:
            snapshot = self.repo.load()
        except Exception:
            log.exception("Loading snapshot failed")
            return False
        if snapshot is None:
            return False
        self.menu.replace_contents(snapshot)
        log.info("menu restored: %d pizzas, %d orders", len(snapshot.pizzas), len(snapshot.orders))
        return True
