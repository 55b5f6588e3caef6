"""
Builds the store, scheduler and service from settings.
"""

from typing import Optional

from .config import Settings
from .database.store import PostgresCatalogStore
from .query.engine import QueryEngine
from .refresh.scheduler import RefreshScheduler
from .service import TimetableService
from .upstream.client import UpstreamClient


def build_store(settings: Settings) -> PostgresCatalogStore:
    """Postgres store with its tables in place."""
    store = PostgresCatalogStore(settings.database_url)
    store.ensure_schema()
    return store


def build_scheduler(settings: Settings, store: Optional[PostgresCatalogStore] = None) -> RefreshScheduler:
    client = UpstreamClient(
        settings.upstream_url,
        settings.club_codes,
        timeout=settings.upstream_timeout,
    )
    return RefreshScheduler(
        client,
        store or build_store(settings),
        settings.reference_timezone,
        interval=settings.refresh_interval,
    )


def build_service(settings: Settings, store: Optional[PostgresCatalogStore] = None) -> TimetableService:
    """Read-side service; the schema is left to the refresh side."""
    return TimetableService(
        store or PostgresCatalogStore(settings.database_url),
        QueryEngine(settings.reference_timezone),
    )
