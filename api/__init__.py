"""
API Module
FastAPI routers for the MedAlert application
"""

from api.alerts import router as alerts_router

from api.deps import (
    get_missed_dose_service,
    services,
)


__all__ = [
    # Routers
    "alerts_router",
    # Dependencies
    "get_missed_dose_service",
    "services",
]


def include_routers(app, prefix: str = "/api/v1"):
    """
    Include all API routers in the FastAPI app

    Usage:
        from api import include_routers
        include_routers(app)
    """
    app.include_router(alerts_router, prefix=prefix)
