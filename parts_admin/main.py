"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from parts_admin.api.routes import router
from parts_admin.config import get_settings
from parts_admin.store import create_order_store
from parts_admin.utils.logging import get_logger, setup_logging

# Setup logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings = get_settings()
    logger.info("application_starting", environment=settings.environment)

    # Tests may install their own store before startup
    if getattr(app.state, "order_store", None) is None:
        app.state.order_store = create_order_store(settings)
    logger.info(
        "order_store_initialized",
        backend=settings.order_store_backend,
        base_url=settings.order_api_base_url,
    )

    yield

    logger.info("application_shutting_down")
    await app.state.order_store.close()


# Create FastAPI app
app = FastAPI(
    title="Zorraga Car Parts Back-Office",
    description="Order analytics and status lifecycle for the auto-parts storefront",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "parts-admin"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "message": "Zorraga Car Parts Back-Office API",
        "docs": "/docs",
        "health": "/health",
    }


app.include_router(router, prefix="/api/v1", tags=["admin"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "parts_admin.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.environment == "development",
    )
