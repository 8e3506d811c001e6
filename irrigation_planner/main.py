"""
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from irrigation_planner.api.rate_limit import limiter
from irrigation_planner.api.v1.routers import catalog, pipes, projects, sprinkler
from irrigation_planner.config import settings
from irrigation_planner.middleware.error_handler import ErrorHandlerMiddleware

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events using the modern FastAPI pattern.
    """
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Log level: {settings.log_level}")
    logger.info(f"Curving config: collinear_tolerance={settings.curve_collinear_tolerance}, "
                f"min_arc_segments={settings.curve_min_arc_segments}")
    logger.info(f"Plant catalog: {settings.catalog_api_base_url}")
    logger.info(f"Rate limit: {settings.rate_limit_requests} requests/minute")

    yield

    # Shutdown
    from irrigation_planner.infrastructure.catalog_client import get_catalog_client
    logger.info("Shutting down application...")
    client = get_catalog_client()
    await client.close()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Irrigation Planning API for Horticulture Projects

    This API computes the statistics shown on the results page of an orchard
    irrigation layout and smooths the pipes drawn on the map.

    ## Features

    - **Zone Statistics**: Plant counts, water needs and pipe lengths per zone,
      with plants assigned to zones by position
    - **Project Summary**: Area, water and pipe totals, efficiency heuristics,
      cost estimate and maintenance complexity
    - **Pipe Curving**: Rounds the corners of drawn pipes with circular arcs
    - **Sprinkler Config**: Stored sprinkler settings and total flow rates
    - **Plant Catalog**: Plant types proxied from the catalog back end, with
      automatic retries and exponential backoff
    - **Rate Limiting**: Protects the API from abuse

    ## Conventions

    JSON bodies use camelCase keys (`useZones`, `plantData`, `subMainPipes`).
    Lengths are in meters, areas in square meters (1 rai = 1600 m²), water in
    liters per irrigation session.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Add CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add global error handling middleware
app.add_middleware(ErrorHandlerMiddleware)

# Include routers
app.include_router(projects.router, prefix="/api/v1")
app.include_router(pipes.router, prefix="/api/v1")
app.include_router(sprinkler.router, prefix="/api/v1")
app.include_router(catalog.router, prefix="/api/v1")


@app.get("/", tags=["health"])
async def root():
    """
    Root endpoint for health check.

    Returns:
        Status message
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/health", tags=["health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
    }
