"""
Refresh Package

Periodic fetch, normalize and replace of the catalog.
"""

from .scheduler import CycleResult, RefreshScheduler, RefreshState

__all__ = ["CycleResult", "RefreshScheduler", "RefreshState"]
