"""
Main v1 API router.

Aggregates the routers of every studio module.

Usage in main.py:
    from app.api.v1.router import api_router

    app = FastAPI(title="Studio Manager API")
    app.include_router(api_router)
"""
from fastapi import APIRouter

from app.core.config import settings

from .members import router as members_router
from .leads import router as leads_router
from .slots import router as slots_router
from .plans import router as plans_router
from .subscriptions import router as subscriptions_router
from .billing import invoices_router, payments_router
from .trials import router as trials_router
from .products import router as products_router
from .inventory import router as inventory_router
from .session_plans import allocations_router, session_plans_router
from .settings import router as settings_router
from .messaging import router as messaging_router
from .backup import router as backup_router


# =============================================================================
# MAIN ROUTER
# =============================================================================

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(members_router)
api_router.include_router(leads_router)
api_router.include_router(slots_router)
api_router.include_router(plans_router)
api_router.include_router(subscriptions_router)
api_router.include_router(invoices_router)
api_router.include_router(payments_router)
api_router.include_router(trials_router)
api_router.include_router(products_router)
api_router.include_router(inventory_router)
api_router.include_router(session_plans_router)
api_router.include_router(allocations_router)
api_router.include_router(settings_router)
api_router.include_router(messaging_router)
api_router.include_router(backup_router)


# =============================================================================
# HEALTH CHECK
# =============================================================================

@api_router.get(
    "/health",
    tags=["System"],
    summary="Health check",
    description="Checks that the API is up.",
)
async def health_check():
    """
    Health endpoint for load balancers and monitoring.

    Returns:
        API status
    """
    return {
        "status": "healthy",
        "service": "studio-manager-api",
        "version": settings.APP_VERSION,
        "api_version": "v1",
        "storage": settings.STORAGE_BACKEND,
    }
