"""
Database Package

Catalog models, schema management and stores.
"""

from .models import ClassSession, ClassType, Club, QueryCriteria
from .utils import ensure_schema, check_connection

__all__ = ["ClassSession", "ClassType", "Club", "QueryCriteria", "ensure_schema", "check_connection"]
