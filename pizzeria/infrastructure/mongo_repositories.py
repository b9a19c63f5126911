# pizzeria/infrastructure/mongo_repositories.py
from __future__ import annotations
from typing import Optional
import logging
from pymongo.collection import Collection
from pizzeria.domain.menu import MenuSnapshot
from pizzeria.domain.repositories import SnapshotRepo
from pizzeria.infrastructure.snapshot_codec import snapshot_from_document, snapshot_to_document

log = logging.getLogger("infra.mongo_snapshot")

SNAPSHOT_ID = "menu"


class MongoSnapshotRepository(SnapshotRepo):
    """
    Keeps the whole catalog as a single MongoDB document.
    Each save replaces the previous snapshot.
    """
    def __init__(self, col: Collection, snapshot_id: str = SNAPSHOT_ID) -> None:
        self._col = col
        self._snapshot_id = snapshot_id

    def save(self, snapshot: MenuSnapshot) -> None:
        doc = snapshot_to_document(snapshot)
        doc["_id"] = self._snapshot_id
        self._col.replace_one({"_id": self._snapshot_id}, doc, upsert=True)
        log.info(
            "MongoSnapshotRepository saved %d pizzas, %d ingredients, %d accounts, %d orders",
            len(snapshot.pizzas), len(snapshot.ingredients), len(snapshot.accounts), len(snapshot.orders),
        )

    def load(self) -> Optional[MenuSnapshot]:
        doc = self._col.find_one({"_id": self._snapshot_id})
        if not doc:
            log.warning("MongoSnapshotRepository: no snapshot stored under %s", self._snapshot_id)
            return None
        doc = dict(doc)
        doc.pop("_id", None)
        return snapshot_from_document(doc)
