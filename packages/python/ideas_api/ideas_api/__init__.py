"""Expose the Ideas FastAPI routers."""

from .router import router
from .dashboard_router import router as dashboard_router
from .search_router import router as search_router
from .errors import install_exception_handlers

__all__ = ["router", "dashboard_router", "search_router", "install_exception_handlers"]
