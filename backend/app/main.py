"""FastAPI entrypoint for the StreamAtlas backend."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.dependencies import get_app_context
from .api.routers import entries, health, view
from .config import Settings, load_settings
from .infra.logging import configure_logging


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    provider = application.dependency_overrides.get(get_app_context, get_app_context)
    provider().bootstrap()
    yield


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Instantiate the FastAPI app and register routers."""

    settings = settings or load_settings()
    configure_logging(settings.logging)
    application = FastAPI(title="StreamAtlas API", version="0.1.0", lifespan=lifespan)
    allowed_origins = {
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:8080",
        "http://127.0.0.1:8080",
    }
    application.add_middleware(
        CORSMiddleware,
        allow_origins=list(allowed_origins),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    for router in (health.router, entries.router, view.router):
        application.include_router(router)
    return application


app = create_app()
