"""
Funding Rate Service - FastAPI Application

Thin HTTP shell around the funding comparison pipeline.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from funding_rate_service.api.routes import funding_rates, health
from funding_rate_service.config import settings
from funding_rate_service.core.comparison_service import FundingComparisonService
from funding_rate_service.core.dependencies import services
from funding_rate_service.utils.logger import logger


# API version
API_VERSION = "v1"
API_PREFIX = f"/api/{API_VERSION}"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Wire the comparison service on startup."""
    logger.info("Starting Funding Rate Service...")
    if services.comparison_service is None:
        services.set_comparison_service(FundingComparisonService())
    logger.info(f"Sources: {', '.join(settings.enabled_sources)}")

    yield

    logger.info("Funding Rate Service stopped")


app = FastAPI(
    title="Funding Rate Service",
    description="Perpetual funding rates compared across exchanges",
    version="1.0.0",
    lifespan=lifespan,
    docs_url=f"{API_PREFIX}/docs",
    redoc_url=f"{API_PREFIX}/redoc",
    openapi_url=f"{API_PREFIX}/openapi.json"
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "message": str(exc),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    )


app.include_router(
    funding_rates.router,
    prefix=API_PREFIX,
    tags=["Funding Rates"]
)

app.include_router(
    health.router,
    prefix=API_PREFIX,
    tags=["Health"]
)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "Funding Rate Service",
        "version": "1.0.0",
        "status": "running",
        "docs": f"{API_PREFIX}/docs"
    }


@app.get("/ping")
async def ping():
    """Simple ping endpoint"""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    # Run with: python -m funding_rate_service.main
    uvicorn.run(
        "funding_rate_service.main:app",
        host=settings.service_host,
        port=settings.service_port,
        log_level="info"
    )
