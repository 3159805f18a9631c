"""
Shared request dependencies.
"""

from starlette.requests import Request

from fiscabot.core.config import settings
from fiscabot.services.uploads import PhotoStorage, get_photo_storage
from fiscabot.storage import ReportStore, get_store


def public_base_url(request: Request) -> str:
    """Base for links handed out to users: PUBLIC_BASE_URL or the request host."""
    if settings.PUBLIC_BASE_URL:
        return settings.PUBLIC_BASE_URL.rstrip("/")
    return str(request.base_url).rstrip("/")


__all__ = [
    "PhotoStorage",
    "ReportStore",
    "get_photo_storage",
    "get_store",
    "public_base_url",
]
