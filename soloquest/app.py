from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from soloquest.core.config import Settings, get_settings
from soloquest.core.logging import configure_logging
from soloquest.routers import auth as auth_router
from soloquest.routers import projects as projects_router
from soloquest.routers import settings as settings_router
from soloquest.routers import stats as stats_router
from soloquest.routers import users as users_router
from soloquest.services.database_client import DatabaseClient

APP_NAME = "SoloQuest"
APP_DESCRIPTION = "Project planner for solo developers"
APP_VERSION = "1.0.0"

DEV_ORIGINS = {
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:8080",
    "http://127.0.0.1:8080",
}


@asynccontextmanager
async def _lifespan(app: FastAPI):
    yield
    app.state.db.disconnect()


def create_app(settings: Optional[Settings] = None, db: Optional[DatabaseClient] = None) -> FastAPI:
    """Factory compatible with uvicorn (``uvicorn soloquest.app:create_app --factory``)."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=f"{APP_NAME} API",
        description=APP_DESCRIPTION,
        version=APP_VERSION,
        lifespan=_lifespan,
    )
    # One client per application; routers reach it through app.state.
    app.state.db = db or DatabaseClient(settings)
    app.state.settings = settings

    if settings.app_env != "prod":
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(DEV_ORIGINS),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )

    @app.get("/api/health")
    def health():
        return {"ok": True, "name": APP_NAME, "version": APP_VERSION, "mode": app.state.db.mode.value}

    app.include_router(auth_router.router)
    app.include_router(projects_router.router)
    app.include_router(users_router.router)
    app.include_router(stats_router.router)
    app.include_router(settings_router.router)

    return app
