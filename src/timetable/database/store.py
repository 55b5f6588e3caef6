"""
Catalog Store

Durable storage for the current generation of class sessions and class types.
A replace installs a whole new generation at once: readers see either the old
generation or the new one, never a mix.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple

import psycopg
from psycopg.rows import dict_row

from ..errors import StoreError
from ..query.predicates import COLUMNS, Predicate
from .models import ClassSession, ClassType
from .utils import SESSION_COLUMNS, ensure_schema

logger = logging.getLogger(__name__)


class CatalogStore(ABC):
    """Contract shared by all catalog stores."""

    @abstractmethod
    def replace_sessions(self, sessions: Sequence[ClassSession]) -> None:
        """Discard the current sessions and install the given ones atomically."""

    @abstractmethod
    def replace_types(self, class_types: Sequence[ClassType]) -> None:
        """Discard the current class types and install the given ones atomically."""

    def replace_catalog(self, sessions: Sequence[ClassSession], class_types: Sequence[ClassType]) -> None:
        """Replace sessions and class types as one generation."""
        self.replace_sessions(sessions)
        self.replace_types(class_types)

    @abstractmethod
    def query(self, predicate: Predicate, order_by: Sequence[str]) -> List[ClassSession]:
        """Return all sessions matching the predicate, ascending by order_by."""

    @abstractmethod
    def all_types(self) -> List[ClassType]:
        """Return every class type, ordered by id."""

    @abstractmethod
    def is_populated(self) -> bool:
        """True iff at least one session is stored."""


def _unique(items: Sequence, kind: str) -> Tuple:
    seen = set()
    for item in items:
        if item.id in seen:
            raise StoreError(f"Duplicate {kind} id {item.id!r}")
        seen.add(item.id)
    return tuple(items)


class MemoryCatalogStore(CatalogStore):
    """
    Process-local store. Each generation is an immutable tuple; a replace
    builds the new tuple first and then swaps the reference.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._sessions: Tuple[ClassSession, ...] = ()
        self._types: Tuple[ClassType, ...] = ()

    def replace_sessions(self, sessions: Sequence[ClassSession]) -> None:
        generation = _unique(sessions, "session")
        with self._lock:
            self._sessions = generation

    def replace_types(self, class_types: Sequence[ClassType]) -> None:
        generation = _unique(class_types, "class type")
        with self._lock:
            self._types = generation

    def replace_catalog(self, sessions: Sequence[ClassSession], class_types: Sequence[ClassType]) -> None:
        session_generation = _unique(sessions, "session")
        type_generation = _unique(class_types, "class type")
        with self._lock:
            self._sessions = session_generation
            self._types = type_generation

    def query(self, predicate: Predicate, order_by: Sequence[str]) -> List[ClassSession]:
        sessions = self._sessions
        matched = [s for s in sessions if predicate.matches(s)]
        return sorted(matched, key=lambda s: tuple(getattr(s, f) for f in order_by))

    def all_types(self) -> List[ClassType]:
        return sorted(self._types, key=lambda t: t.id)

    def is_populated(self) -> bool:
        return len(self._sessions) > 0


def _session_row(session: ClassSession) -> tuple:
    return (
        session.id,
        session.name,
        session.code,
        session.club,
        session.description,
        session.duration_minutes,
        session.start_at,
        session.end_at,
        session.is_virtual,
    )


def _session_from_row(row: dict) -> ClassSession:
    return ClassSession(
        id=row["id"],
        name=row["name"],
        code=row["code"],
        club=row["club_code"],
        description=row["description"],
        duration_minutes=row["duration_minutes"],
        start_at=row["start_at"],
        end_at=row["end_at"],
        is_virtual=row["is_virtual"],
    )


INSERT_SESSION = (
    f"INSERT INTO classes ({', '.join(SESSION_COLUMNS)}) "
    f"VALUES ({', '.join(['%s'] * len(SESSION_COLUMNS))})"
)
INSERT_TYPE = "INSERT INTO class_types (id, name) VALUES (%s, %s)"


class PostgresCatalogStore(CatalogStore):
    """Catalog stored in the classes and class_types tables."""

    def __init__(self, database_url: str):
        if not database_url:
            raise RuntimeError("DATABASE_URL not set. Please set it in your .env file.")
        self.database_url = database_url

    def ensure_schema(self) -> None:
        try:
            with psycopg.connect(self.database_url, autocommit=True) as conn:
                ensure_schema(conn)
        except psycopg.Error as e:
            raise StoreError(f"Failed to create catalog tables: {e}") from e

    def _replace(self, sessions: Sequence[ClassSession], class_types: Sequence[ClassType],
                 replace_sessions: bool, replace_types: bool) -> None:
        t1 = time.monotonic()
        try:
            with psycopg.connect(self.database_url) as conn:
                with conn.transaction():
                    with conn.cursor() as cur:
                        if replace_sessions:
                            cur.execute("DELETE FROM classes")
                            if sessions:
                                cur.executemany(INSERT_SESSION, [_session_row(s) for s in sessions])
                        if replace_types:
                            cur.execute("DELETE FROM class_types")
                            if class_types:
                                cur.executemany(INSERT_TYPE, [(t.id, t.name) for t in class_types])
        except psycopg.Error as e:
            raise StoreError(f"Failed to replace catalog: {e}") from e
        logger.info(
            "Saved %d classes and %d class types in %.2fs",
            len(sessions), len(class_types), time.monotonic() - t1,
        )

    def replace_sessions(self, sessions: Sequence[ClassSession]) -> None:
        self._replace(sessions, (), replace_sessions=True, replace_types=False)

    def replace_types(self, class_types: Sequence[ClassType]) -> None:
        self._replace((), class_types, replace_sessions=False, replace_types=True)

    def replace_catalog(self, sessions: Sequence[ClassSession], class_types: Sequence[ClassType]) -> None:
        self._replace(sessions, class_types, replace_sessions=True, replace_types=True)

    def query(self, predicate: Predicate, order_by: Sequence[str]) -> List[ClassSession]:
        where_clause, params = predicate.to_sql()
        order_clause = ", ".join(f"{COLUMNS[f]} ASC" for f in order_by)
        statement = f"""
            SELECT {', '.join(SESSION_COLUMNS)}
            FROM classes
            WHERE {where_clause}
            ORDER BY {order_clause}
        """
        t1 = time.monotonic()
        try:
            with psycopg.connect(self.database_url) as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(statement, params)
                    rows = cur.fetchall()
        except psycopg.Error as e:
            raise StoreError(f"Failed to query classes: {e}") from e
        logger.debug("Finished getting classes from DB in %.3fs", time.monotonic() - t1)
        return [_session_from_row(row) for row in rows]

    def all_types(self) -> List[ClassType]:
        try:
            with psycopg.connect(self.database_url) as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute("SELECT id, name FROM class_types ORDER BY id")
                    rows = cur.fetchall()
        except psycopg.Error as e:
            raise StoreError(f"Failed to query class types: {e}") from e
        return [ClassType(id=row["id"], name=row["name"]) for row in rows]

    def is_populated(self) -> bool:
        try:
            with psycopg.connect(self.database_url) as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT EXISTS (SELECT 1 FROM classes)")
                    result = cur.fetchone()
        except psycopg.Error as e:
            raise StoreError(f"Failed to check classes: {e}") from e
        return bool(result and result[0])
