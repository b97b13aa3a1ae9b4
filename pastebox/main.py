from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from pastebox.config import Settings, get_settings
from pastebox.db.base import init_store
from pastebox.db.store import Clock, KeyValueStore, system_clock
from pastebox.middleware.error_handler import ErrorHandlerMiddleware, setup_exception_handlers
from pastebox.observability.logger import configure_logging
from pastebox.observability.metrics import router as metrics_router
from pastebox.observability.tracing import init_tracing
from pastebox.routers.health import router as health_router
from pastebox.routers.pastes import router as pastes_router
from pastebox.services.paste_service import build_paste_service
from pastebox.utils.logger import log_info


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
    clock: Clock = system_clock,
) -> FastAPI:
    """Build the FastAPI app.

    The store is created once in the lifespan startup (or injected, for
    tests) and handed to every component; a missing or unreachable store
    aborts startup.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_store = store is None
        app.state.store = store if store is not None else await init_store(settings)
        app.state.paste_service = build_paste_service(app.state.store, settings, clock=clock)
        log_info(f"pastebox started (backend={settings.STORE_BACKEND})")
        try:
            yield
        finally:
            if owns_store:
                await app.state.store.close()

    app = FastAPI(
        title="Pastebox API",
        description="Short-lived shareable text clipboard",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Error handler should be outermost to catch all errors
    app.add_middleware(ErrorHandlerMiddleware, debug=settings.DEBUG)
    setup_exception_handlers(app)

    app.include_router(health_router)  # Health checks at root level
    app.include_router(metrics_router)
    app.include_router(pastes_router, prefix="/api")

    if settings.TRACING_ENABLED:
        init_tracing(settings.SERVICE_NAME, app=app)

    return app


def main() -> None:
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
