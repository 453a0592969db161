from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chat_relay.api.v1.routers import chat, health, ws
from chat_relay.application.exceptions import StoreError
from chat_relay.application.uow import UnitOfWorkFactory
from chat_relay.config import settings
from chat_relay.infrastructure.db.session import (
    build_engine,
    build_sessionmaker,
    init_schema,
)
from chat_relay.infrastructure.db.uow import SqlAlchemyUoW
from chat_relay.infrastructure.ws.manager import ConnectionManager
from chat_relay.services.session_directory import SessionDirectory

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle.

    When a unit-of-work factory was injected into create_app the store
    is left alone; otherwise the engine is built and must come up or
    startup fails.
    """
    if app.state.uow_factory is not None:
        yield
        return

    engine = build_engine(settings)
    try:
        await init_schema(engine)
    except Exception:
        logger.critical("Message store unreachable at startup", exc_info=True)
        await engine.dispose()
        raise
    logger.info("Message store connection pool created")

    session_factory = build_sessionmaker(engine)
    app.state.engine = engine
    app.state.uow_factory = lambda: SqlAlchemyUoW(session_factory)

    yield

    await engine.dispose()
    logger.info("Message store connection pool closed")


def create_app(uow_factory: UnitOfWorkFactory | None = None) -> FastAPI:
    app = FastAPI(
        title="Chat Relay",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.directory = SessionDirectory()
    app.state.manager = ConnectionManager()
    app.state.uow_factory = uow_factory
    app.state.engine = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(chat.router)
    app.include_router(ws.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StoreError)
    async def _store(_req: Request, exc: StoreError) -> JSONResponse:
        logger.error("Store error: %s", exc.detail)
        return JSONResponse(status_code=503, content={"detail": exc.detail})
