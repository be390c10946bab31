import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence

import psycopg2
import psycopg2.extras
from psycopg2.pool import ThreadedConnectionPool

from user_service.errors import DatabaseError

logger = logging.getLogger(__name__)


class Database:
    """
    Shared PostgreSQL handle.

    Built once by the application factory and handed to request handlers
    through dependency injection. Thread safe: FastAPI runs sync handlers in
    a worker pool and each call borrows its own pooled connection.
    """

    def __init__(self, dsn: str, minconn: int = 1, maxconn: int = 10):
        self._dsn = dsn
        self._minconn = minconn
        self._maxconn = maxconn
        self._pool: Optional[ThreadedConnectionPool] = None

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    # PUBLIC_INTERFACE
    def connect(self) -> None:
        """Open the connection pool. No-op when already connected."""
        if self._pool is not None:
            return
        try:
            self._pool = ThreadedConnectionPool(minconn=self._minconn, maxconn=self._maxconn, dsn=self._dsn)
        except psycopg2.Error as exc:
            logger.error("Failed to connect to database: %s", exc)
            raise DatabaseError(f"Could not connect to database: {exc}", pgcode=exc.pgcode) from exc
        logger.info("Database connection pool opened (min=%d, max=%d)", self._minconn, self._maxconn)

    # PUBLIC_INTERFACE
    def close(self) -> None:
        """Close every pooled connection. Later queries fail with DatabaseError."""
        if self._pool is None:
            return
        pool, self._pool = self._pool, None
        pool.closeall()
        logger.info("Database connection pool closed")

    @contextmanager
    def _get_conn(self) -> Iterator[Any]:
        pool = self._pool
        if pool is None:
            raise DatabaseError("Database is not connected")
        try:
            conn = pool.getconn()
        except psycopg2.Error as exc:
            raise DatabaseError(f"Could not acquire a database connection: {exc}", pgcode=exc.pgcode) from exc
        try:
            yield conn
        finally:
            pool.putconn(conn)

    # PUBLIC_INTERFACE
    def execute(self, query: str, params: Optional[Sequence[Any]] = None) -> List[Dict[str, Any]]:
        """Run one statement and commit. Returns result rows as dicts, or [] when there are none."""
        with self._get_conn() as conn:
            try:
                with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                    cur.execute(query, params or [])
                    rows = [dict(r) for r in cur.fetchall()] if cur.description else []
                conn.commit()
            except psycopg2.Error as exc:
                try:
                    conn.rollback()
                except psycopg2.Error as rollback_exc:
                    # Connection is already gone; the pool discards closed connections.
                    logger.warning("Rollback failed: %s", rollback_exc)
                logger.error("Query failed (%s): %s", exc.pgcode, exc)
                raise DatabaseError(f"Query failed: {exc}", pgcode=exc.pgcode) from exc
            return rows

    # PUBLIC_INTERFACE
    def fetch_one(self, query: str, params: Optional[Sequence[Any]] = None) -> Optional[Dict[str, Any]]:
        """Fetch a single row as a dict, or None."""
        rows = self.execute(query, params)
        return rows[0] if rows else None

    # PUBLIC_INTERFACE
    def current_database(self) -> str:
        """Name of the database the pool is connected to."""
        row = self.fetch_one("SELECT current_database()")
        if not row:
            raise DatabaseError("current_database() returned no rows")
        return row["current_database"]
