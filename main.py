from typing import Optional

import structlog
from fastapi import APIRouter, FastAPI

from shared.config import settings
from shared.errors import register_exception_handlers
from shared.observability import setup_observability
from shared.storage import DatabaseStorage, Storage

from services.catalog_service.router import router as catalog_router
from services.catalog_service.seed import seed_catalog
from services.cart_service.router import router as cart_router
from services.order_service.router import router as order_router
from services.review_service.router import router as review_router

logger = structlog.get_logger(__name__)

public_router = APIRouter()

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": settings.SERVICE_NAME, "status": "running"}


def create_app(
    storage: Optional[Storage] = None,
    tracing: bool = settings.ENABLE_TRACING,
    metrics: bool = settings.ENABLE_METRICS,
    seed: bool = settings.SEED_DATABASE,
) -> FastAPI:
    """Builds the storefront API around an explicit storage handle."""
    if storage is None:
        storage = DatabaseStorage.from_url(settings.DATABASE_URL)

    app = FastAPI(title="Storefront API", version="1.0.0")
    app.state.storage = storage

    # --- OBSERVABILITY BOOTSTRAP ---
    setup_observability(app, settings.SERVICE_NAME, tracing=tracing, metrics=metrics)
    register_exception_handlers(app)

    app.include_router(public_router)
    for router in (catalog_router, review_router, cart_router, order_router):
        app.include_router(router, prefix="/api")

    @app.on_event("startup")
    async def startup_event():
        await storage.init()
        if seed:
            await seed_catalog(storage)
        logger.info("storefront_started", storage=type(storage).__name__)

    @app.on_event("shutdown")
    async def shutdown_event():
        await storage.close()

    return app


app = create_app()
