"""Top level API router registration."""
from fastapi import APIRouter, FastAPI

from company_store.api.routes import auth, credits, employees, health, kiosk, purchases, reports


def register_routes(application: FastAPI) -> None:
    """Register all API routers with the FastAPI application."""
    api_router = APIRouter(prefix="/api")

    api_router.include_router(health.router, tags=["health"])
    api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
    api_router.include_router(employees.router, tags=["employees"])
    api_router.include_router(purchases.router, tags=["purchases"])
    api_router.include_router(credits.router, tags=["credits"])
    api_router.include_router(kiosk.router, tags=["kiosk"])
    api_router.include_router(reports.router, tags=["reports"])

    application.include_router(api_router)


__all__ = ["register_routes"]
