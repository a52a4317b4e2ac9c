"""
PriceLens Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pricelens.core.config import settings
from pricelens.api.v1 import router as api_v1_router
from pricelens.api.v1.endpoints.analysis import status_for
from pricelens.services.analysis import close_analysis_service, get_analysis_service
from pricelens.services.base import ConfigurationError, ServiceError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Price provider: {settings.price_provider}")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await close_analysis_service()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    PriceLens Technical Analysis API

    ## Architecture
    - **Market Data**: Symbol normalization + Yahoo Finance / Alpha Vantage adapters
    - **Indicator Engine**: SMA, EMA, RSI, Bollinger Bands, MACD (pure NumPy)
    - **Analysis**: One report per ticker, with fundamentals for equities

    ## Conventions
    - Indicator values are 2-decimal strings
    - Indicators without enough history are null
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Errors are returned as {"error": message}."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    """Service errors raised outside an endpoint body, e.g. while resolving dependencies."""
    return JSONResponse(status_code=status_for(exc), content={"error": exc.message})


# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    try:
        provider_healthy = await get_analysis_service().health_check()
    except ConfigurationError:
        provider_healthy = False

    return {
        "status": "healthy" if provider_healthy else "degraded",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "provider": settings.price_provider,
        "provider_healthy": provider_healthy,
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "PriceLens Backend API",
        "docs": "/docs",
        "health": "/health",
        "analysis": "/api/v1/analysis?ticker=RELIANCE&assetClass=stock",
    }
