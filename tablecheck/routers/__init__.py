"""API routers."""

from .health import router as health_router
from .observability import router as observability_router
from .tables import router as tables_router

ROUTERS = (health_router, tables_router, observability_router)

__all__ = ["ROUTERS", "health_router", "observability_router", "tables_router"]
