"""
FastAPI application for DayScore.

Exposes habit events, content submissions and score queries to the app
frontends and to other backend services.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from tortoise.contrib.fastapi import RegisterTortoise

from dayscore.config import config
from dayscore.core.errors import ConflictError, PersistenceError, ValidationError
from dayscore.database.config import TORTOISE_ORM
from dayscore.interfaces.api.routers import content, habits, points

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    async with RegisterTortoise(
        app,
        config=TORTOISE_ORM,
        generate_schemas=config.DB_GENERATE_SCHEMAS,
    ):
        logger.info("Database initialized")
        yield
    logger.info("Database connections closed")


app = FastAPI(
    title="DayScore API",
    description="Daily habit aggregation and scoring",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS configuration
# AICODE-NOTE: localhost for dev, API_CORS_ORIGINS for deployed frontends
cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    *config.API_CORS_ORIGINS,
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content=exc.to_dict())


@app.exception_handler(ConflictError)
async def conflict_error_handler(request: Request, exc: ConflictError) -> JSONResponse:
    logger.warning(f"Write conflict not resolved for {request.url.path}: {exc}")
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=exc.to_dict())


@app.exception_handler(PersistenceError)
async def persistence_error_handler(
    request: Request, exc: PersistenceError
) -> JSONResponse:
    logger.error(f"Storage failure for {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=exc.to_dict()
    )


# Include routers
app.include_router(content.router)
app.include_router(habits.router)
app.include_router(points.router)


@app.get("/api/health")
async def api_health():
    """API health check endpoint."""
    return {"status": "ok", "service": "dayscore-api"}
