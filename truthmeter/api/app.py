"""FastAPI application for the TruthMeter service."""

import asyncio
import contextlib
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..infrastructure.dependencies import ServiceContainer, get_service_container
from .endpoints import analyze, health, share

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def sweep_expired(container: ServiceContainer, interval: float) -> None:
    """Delete expired analyses every ``interval`` seconds until cancelled."""
    while True:
        await asyncio.sleep(interval)
        try:
            await asyncio.to_thread(container.store.delete_expired)
        except Exception as e:
            logger.warning(f"⚠️ Expired analysis sweep failed: {e}")


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare the store on startup and close providers on shutdown."""
    container = get_service_container()
    logging.getLogger().setLevel(container.config.log_level.upper())
    await asyncio.to_thread(container.startup)

    sweeper = None
    interval = container.config.cache_sweep_interval_seconds
    if interval > 0:
        sweeper = asyncio.create_task(sweep_expired(container, interval))

    yield  # Application runs here

    if sweeper is not None:
        sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweeper
    await container.shutdown()


# Create FastAPI application
app = FastAPI(
    title="TruthMeter API",
    description="Claim fact-checking against web sources with AI stance analysis",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(analyze.router)
app.include_router(share.router)
