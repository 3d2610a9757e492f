"""FleetPet API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map FleetPetError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan when the SQL store is selected

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fleetpet.api.error_handlers import register_error_handlers
from fleetpet.api.routes import equipment, health, maintenance
from fleetpet.config import get_settings
from fleetpet.core.domain_types import StoreBackend
from fleetpet.infrastructure import database
from fleetpet.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    if settings.store_backend == StoreBackend.SQL:
        database.init_db(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
    logger.info(
        f"FleetPet API started (store={settings.store_backend.value}, "
        f"scheme={settings.progression_scheme.value})",
    )
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("FleetPet API shutting down")


app = FastAPI(
    title="FleetPet API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(equipment.router)
app.include_router(maintenance.router)

register_error_handlers(app)
