import logging
from typing import Optional

from fastapi import FastAPI

from app.core.clock import Clock, utc_now
from app.core.config import Settings, get_settings
from app.core.logging_config import configure_logging
from app.api.v1 import estatisticas as estatisticas_router
from app.api.v1 import treinos as treinos_router
from app.services.workout_store import create_store

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, clock: Clock = utc_now) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.APP_NAME)

    @app.on_event("startup")
    def on_startup():
        app.state.store = create_store(settings, clock=clock)
        app.state.store.load()
        logger.info("%s iniciado (backend=%s)", settings.APP_NAME, settings.backend)

    @app.on_event("shutdown")
    def on_shutdown():
        app.state.store.close()

    @app.get("/health")
    def health_check():
        return {
            "status": "ok",
            "environment": settings.ENVIRONMENT,
            "app": settings.APP_NAME,
            "backend": settings.backend,
        }

    app.include_router(treinos_router.router)
    app.include_router(estatisticas_router.router)

    return app


app = create_app()
