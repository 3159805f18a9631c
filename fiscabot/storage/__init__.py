"""
Complaint persistence strategies.

``build_store`` picks the strategy named by ``STORAGE_BACKEND``; routes get
the process-wide instance through the ``get_store`` dependency.
"""

from typing import Optional

from fiscabot.core.config import Settings, settings
from fiscabot.storage.base import ReportStore
from fiscabot.storage.local import JsonFileStore

store: Optional[ReportStore] = None


def build_store(config: Settings) -> ReportStore:
    if config.STORAGE_BACKEND == "supabase":
        from fiscabot.storage.remote import SupabaseStore

        return SupabaseStore.from_settings(config)
    local_store = JsonFileStore(config.REPORTS_FILE)
    local_store.ensure()
    return local_store


def get_store() -> ReportStore:
    """Get the configured store instance."""
    global store
    if store is None:
        store = build_store(settings)
    return store


__all__ = ["ReportStore", "JsonFileStore", "build_store", "get_store"]
