"""
Convenience exports for endpoint routers.
"""

from .health import router as health_router
from .qrcode import router as qrcode_router
from .reports import router as reports_router
from .uploads import router as uploads_router

__all__ = ["health_router", "qrcode_router", "reports_router", "uploads_router"]
