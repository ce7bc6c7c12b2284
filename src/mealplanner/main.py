"""FastAPI application entry point."""

import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from time import perf_counter

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from mealplanner.config import get_settings
from mealplanner.database import Base, async_engine
from mealplanner.errors import register_error_handlers
from mealplanner.logging_config import LoggingContext, configure_logging, get_logger
from mealplanner.routers import (
    cookbooks_router,
    grocery_lists_router,
    meal_plans_router,
    menu_router,
    nutrition_router,
    recipes_router,
)

# Configure logging on module load
configure_logging()
logger = get_logger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Starting Meal Planner API")

    # Create database tables if they don't exist
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialized")

    yield

    logger.info("Shutting down Meal Planner API")
    await async_engine.dispose()


app = FastAPI(
    title="Meal Planner API",
    description="Recipes, daily meal plans and generated grocery lists",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.middleware("http")
async def request_context(request: Request, call_next) -> Response:
    """Tag every request with an id, log it, and echo the id back."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    request.state.request_id = request_id
    start = perf_counter()

    with LoggingContext(request_id=request_id):
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (perf_counter() - start) * 1000
            logger.exception(
                f"{request.method} {request.url.path} status=500 duration_ms={duration_ms:.2f}"
            )
            raise

        duration_ms = (perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} status={response.status_code} "
            f"duration_ms={duration_ms:.2f}"
        )

    response.headers["X-Request-ID"] = request_id
    return response


app.include_router(grocery_lists_router)
app.include_router(menu_router)
app.include_router(meal_plans_router)
app.include_router(recipes_router)
app.include_router(cookbooks_router)
app.include_router(nutrition_router)


@app.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "ok", "service": "mealplanner-api"}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": "Meal Planner API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
