"""
Upstream Package

Timetable provider client and record normalization.
"""

from .client import UpstreamClient
from .normalizer import normalize_class_type, normalize_class_types, normalize_session, normalize_sessions

__all__ = [
    "UpstreamClient",
    "normalize_class_type",
    "normalize_class_types",
    "normalize_session",
    "normalize_sessions",
]
