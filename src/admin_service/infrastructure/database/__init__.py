"""Database connection, storage adapter and soft-delete layer."""
from .connection import DatabaseManager, db, get_session
from .base_model import BaseModel, utcnow
from .store import Action, Operation, RecordNotFound, StorageAdapter, transactional
from .soft_delete import SoftDeleteStore, rewrite
from .pagination import Page, PaginatedQueryOptions, get_pagination_window, paginated_query

__all__ = [
    "DatabaseManager",
    "db",
    "get_session",
    "BaseModel",
    "utcnow",
    "Action",
    "Operation",
    "RecordNotFound",
    "StorageAdapter",
    "transactional",
    "SoftDeleteStore",
    "rewrite",
    "Page",
    "PaginatedQueryOptions",
    "get_pagination_window",
    "paginated_query",
]
