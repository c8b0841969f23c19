"""
Studio Manager - FastAPI application
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1 import api_router
from app.core.config import settings
from app.database.session import get_database_info

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Create the FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Front desk management for a yoga studio: members, memberships, slots, billing and inventory",
    version=settings.APP_VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API v1 routes
app.include_router(api_router)

logger.info(f"🚀 {settings.APP_NAME} {settings.APP_VERSION} started ({settings.ENVIRONMENT}, storage={settings.STORAGE_BACKEND})")


@app.get("/")
async def root():
    """Home page - health check"""
    return {
        "app": settings.APP_NAME,
        "status": "running",
        "environment": settings.ENVIRONMENT,
    }


@app.get("/health")
def health_check():
    """Health check, including the database when the SQL backend is used"""
    if settings.uses_local_store:
        return {"status": "healthy", "storage": "local"}
    info = get_database_info()
    return {
        "status": "healthy" if info["connected"] else "degraded",
        "storage": "sql",
        "backend": info["backend"],
        "database": "connected" if info["connected"] else "unreachable",
    }
