from __future__ import annotations
from contextlib import asynccontextmanager
from fastapi import FastAPI

import os
import logging
from typing import Optional

from database import SnippetStore, init_db_with_retry, make_engine
from routes import snippets

# ----------------------------------------------------------------------
# LOGGING
# ----------------------------------------------------------------------
logger = logging.getLogger("uvicorn")
logger.setLevel(logging.INFO)

PORT = 8080


# ----------------------------------------------------------------------
# STARTUP
# ----------------------------------------------------------------------
def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"⚠️ Invalid integer for {name}: {raw}")
        return default


@asynccontextmanager
async def lifespan(app: FastAPI):
    owns_engine = app.state.store is None
    if owns_engine:
        app.state.store = SnippetStore(make_engine())
    init_db_with_retry(
        app.state.store,
        max_attempts=max(1, _int_env("DB_CONNECT_ATTEMPTS", 1)),
        delay_sec=max(0, _int_env("DB_CONNECT_DELAY", 5)),
    )
    yield
    if owns_engine:
        app.state.store.engine.dispose()


# ----------------------------------------------------------------------
# FASTAPI INITIALISATION
# ----------------------------------------------------------------------
def create_app(store: Optional[SnippetStore] = None) -> FastAPI:
    """Construit l'application ; le store est injecté ou créé au démarrage."""
    app = FastAPI(
        title="Markdown Shuffle",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.store = store
    app.include_router(snippets.router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=PORT)
