from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional

from api.routers import lyrics, music, shares, system
from config import Settings, settings
from infra.database.connection import Database
from infra.storage.local_store import LocalFileStore
from utils.logger import get_logger

logger = get_logger(__name__)

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory. Each app owns its Database and file store,
    so tests can build one per case against a throwaway directory.
    """
    app_settings = app_settings or settings

    # Lifespan event to handle startup/shutdown
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database = Database(app_settings.DB_PATH)
        database.init()  # Raw SQL で Sequence/Table 作成 → Alembic stamp/upgrade
        app.state.db = database
        app.state.file_store = LocalFileStore(app_settings.STORAGE_DIR)
        logger.info(f"Database ready at {app_settings.DB_PATH}, storage at {app_settings.STORAGE_DIR}")
        try:
            yield
        finally:
            database.dispose()

    app = FastAPI(title=f"{app_settings.APP_NAME} Backend API", lifespan=lifespan)
    app.state.settings = app_settings

    # CORS Configuration
    # the share page is opened from arbitrary origins, so the origin list is configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials="*" not in app_settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Range", "Accept-Ranges", "Content-Length"],
    )

    # Root endpoint for health check
    @app.get("/")
    async def root():
        return {"message": f"{app_settings.APP_NAME} Backend API is running"}

    # Include Routers
    app.include_router(lyrics.router)
    app.include_router(music.router)
    app.include_router(shares.router)
    app.include_router(system.router)

    return app

app = create_app()
