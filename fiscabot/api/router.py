"""
API router - aggregates all endpoint routers.
"""

from fastapi import APIRouter

from fiscabot.api.routes import health_router, qrcode_router, reports_router, uploads_router

api_router = APIRouter()

api_router.include_router(health_router)
api_router.include_router(reports_router, tags=["reports"])
api_router.include_router(qrcode_router, tags=["qrcode"])
api_router.include_router(uploads_router)
