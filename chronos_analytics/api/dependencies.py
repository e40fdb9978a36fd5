"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from chronos_analytics.config import settings
from chronos_analytics.domain.store import DocumentStore
from chronos_analytics.infrastructure.clients.firestore import FirestoreClient
from chronos_analytics.infrastructure.clients.memory import SnapshotStore


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_store() -> DocumentStore:
    """Provide the configured document store"""
    if settings.store_backend == "snapshot":
        return SnapshotStore(settings.snapshot_dir)
    return FirestoreClient()
