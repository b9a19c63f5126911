from __future__ import annotations

import uvicorn
from fastapi import FastAPI
from pymongo import MongoClient
from dotenv import load_dotenv
load_dotenv()
from pizzeria.api.client_routes import router as client_router
from pizzeria.api.operator_routes import router as operator_router
from pizzeria.core.config import (
    API_HOST,
    API_PORT,
    LOGGER,
    MONGO_DB,
    MONGO_SNAPSHOT_COL,
    MONGO_URI,
    PERSISTENCE_ENABLED,
    SESSION_TTL_SECONDS,
)

from pizzeria.domain.menu import Menu
from pizzeria.application.snapshot_service import SnapshotService
from pizzeria.infrastructure.mongo_repositories import MongoSnapshotRepository
from pizzeria.infrastructure.session_store import InMemorySessionStore

log = LOGGER.getChild("app")
app = FastAPI(title="Pizzeria Ordering API")

app.include_router(client_router)
app.include_router(operator_router)

_mongo_client: MongoClient | None = None


@app.on_event("startup")
def on_startup() -> None:
    global _mongo_client

    menu = Menu()
    app.state.menu = menu
    app.state.sessions = InMemorySessionStore(ttl_seconds=SESSION_TTL_SECONDS)
    app.state.snapshot_service = None

    if PERSISTENCE_ENABLED:
        _mongo_client = MongoClient(MONGO_URI, serverSelectionTimeoutMS=3000)
        repo = MongoSnapshotRepository(_mongo_client[MONGO_DB][MONGO_SNAPSHOT_COL])
        snapshot_service = SnapshotService(menu=menu, repo=repo)
        if not snapshot_service.restore():
            log.info("Starting with an empty catalog")
        app.state.snapshot_service = snapshot_service

    log.info("Startup complete (persistence=%s)", PERSISTENCE_ENABLED)


@app.on_event("shutdown")
def on_shutdown() -> None:
    global _mongo_client
    snapshot_service = getattr(app.state, "snapshot_service", None)
    if snapshot_service is not None:
        snapshot_service.save()
    if _mongo_client:
        _mongo_client.close()
        _mongo_client = None


if __name__ == "__main__":
    uvicorn.run("main:app", host=API_HOST, port=API_PORT, reload=False)
