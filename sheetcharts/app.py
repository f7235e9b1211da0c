# app.py - Main Application

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

# Configuration
from sheetcharts.config.settings import settings

# Services
from sheetcharts.services.chart_service import ChartService, InMemoryChartStore

# API Routes
from sheetcharts.api.routes.charts import router as charts_router

# Middleware
from sheetcharts.api.middleware.error_handling import ErrorHandlingMiddleware, setup_error_handlers

# Utilities
from sheetcharts.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

# Global service instances
_services = {}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager - handles startup and shutdown
    """
    logger.info("🚀 Starting Sheet Charts API")

    try:
        initialize_services()
        logger.info(f"📊 Environment: {settings.ENVIRONMENT}")
        logger.info("✅ Application startup completed successfully")

        yield

    finally:
        logger.info("🛑 Shutting down Sheet Charts API")
        _services.clear()
        logger.info("✅ Application shutdown completed")


def initialize_services():
    """
    Initialize all application services
    """
    logger.info("🔧 Initializing services...")

    # Durable chart storage is an external collaborator; development keeps charts in memory
    _services['chart_service'] = ChartService(store=InMemoryChartStore())

    logger.info("✅ All services initialized successfully")


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application
    """
    setup_logging()

    app = FastAPI(
        title="Sheet Charts API",
        description="Infers charts, insights and statistics from spreadsheet data",
        version=API_VERSION,
        docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan
    )

    # Add middleware (order matters!)

    # 1. Error handling
    app.add_middleware(
        ErrorHandlingMiddleware,
        debug=settings.DEBUG
    )

    # 2. CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"]
    )

    # 3. GZip compression
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    setup_error_handlers(app)

    app.include_router(charts_router)

    @app.get("/")
    async def root():
        """Root endpoint with API information"""
        return {
            "message": "Sheet Charts API",
            "version": API_VERSION,
            "status": "operational",
            "timestamp": datetime.now().isoformat(),
            "docs": "/docs" if settings.ENVIRONMENT != "production" else "Documentation disabled in production",
            "endpoints": {
                "charts": "/api/charts",
                "health": "/health"
            }
        }

    @app.get("/health")
    async def simple_health_check():
        """Simple health check endpoint for load balancers"""
        return {
            "status": "healthy" if _services.get('chart_service') else "starting",
            "timestamp": datetime.now().isoformat()
        }

    logger.info("🎯 FastAPI application configured successfully")

    return app


# Dependency injection functions
async def get_chart_service() -> ChartService:
    """Get chart service instance"""
    service = _services.get('chart_service')
    if not service:
        raise HTTPException(
            status_code=503,
            detail="Chart service not available"
        )
    return service


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "sheetcharts.app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info" if not settings.DEBUG else "debug",
        access_log=True
    )
