"""
Timetable Service

Read surface used by the CLI and the dashboard.
"""

import logging
import time
from typing import List, Mapping, Optional

from .database.models import ClassSession, ClassType, QueryCriteria
from .database.store import CatalogStore
from .errors import StoreError
from .query.engine import QueryEngine
from .query.params import parse_criteria

logger = logging.getLogger(__name__)


class TimetableService:
    """Lists classes and class types from the catalog store."""

    def __init__(self, store: CatalogStore, engine: QueryEngine):
        self.store = store
        self.engine = engine

    def list_classes(self, criteria: QueryCriteria) -> List[ClassSession]:
        """
        Return the sessions matching the criteria, ascending by start time.

        Raises:
            StoreError: if the store cannot be read
        """
        t1 = time.monotonic()
        compiled = self.engine.compile(criteria)
        classes = self.store.query(compiled.predicate, compiled.order_by)
        logger.info("Returning %d classes in %.3fs", len(classes), time.monotonic() - t1)
        return classes

    def list_classes_from_params(self, params: Mapping[str, Optional[str]]) -> List[ClassSession]:
        """
        Parse string filter parameters and list the matching sessions.

        Raises:
            InvalidQueryError: if a parameter cannot be parsed
            StoreError: if the store cannot be read
        """
        return self.list_classes(parse_criteria(params))

    def list_class_types(self) -> List[ClassType]:
        class_types = self.store.all_types()
        logger.info("Returning all class types - %d", len(class_types))
        return class_types

    def is_healthy(self) -> bool:
        """True iff the catalog holds at least one session."""
        try:
            populated = self.store.is_populated()
        except StoreError as e:
            logger.error("Health check could not read the catalog: %s", e)
            return False
        if not populated:
            logger.error("Health check found no classes in the catalog")
        return populated
