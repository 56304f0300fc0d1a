"""
FastAPI application entry point.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from onlyfunds.config import settings
from onlyfunds.database import init_db
from onlyfunds.logging_config import setup_logging
from onlyfunds.api.router import api_router
from onlyfunds.services.budget_service import get_progress_store, log_budget_alerts


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    init_db()
    unsubscribe = get_progress_store().subscribe(log_budget_alerts)
    yield
    unsubscribe()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version="1.0.0",
    description="Personal finance tracker with monthly budgets and optional cloud sync",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def read_root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": "1.0.0",
        "status": "running"
    }


@app.get("/api/v1/health")
def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "app_name": settings.app_name,
        "cloud_configured": settings.cloud_configured
    }
