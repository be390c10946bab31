"""
Data access layer for user records.
"""

import logging
from typing import Any, Dict, List

from psycopg2 import errorcodes

from user_service.db import Database
from user_service.errors import DatabaseError, UserConflictError, UserNotFoundError
from user_service.schemas import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

_COLUMNS = "id, name, email, created_at"


class UserRepository:
    """CRUD operations on the users table."""

    def __init__(self, db: Database):
        self._db = db

    def list_users(self, limit: int = 50, offset: int = 0) -> List[Dict[str, Any]]:
        return self._db.execute(
            f"SELECT {_COLUMNS} FROM users ORDER BY id ASC LIMIT %s OFFSET %s",
            [limit, offset],
        )

    def get_user(self, user_id: int) -> Dict[str, Any]:
        user = self._db.fetch_one(f"SELECT {_COLUMNS} FROM users WHERE id=%s", [user_id])
        if not user:
            raise UserNotFoundError(user_id)
        return user

    def create_user(self, payload: UserCreate) -> Dict[str, Any]:
        email = payload.email.lower()
        try:
            user = self._db.fetch_one(
                f"INSERT INTO users (name, email) VALUES (%s, %s) RETURNING {_COLUMNS}",
                [payload.name, email],
            )
        except DatabaseError as exc:
            if exc.pgcode == errorcodes.UNIQUE_VIOLATION:
                raise UserConflictError(email) from exc
            raise
        if not user:
            raise DatabaseError("Expected one row returned, got none.")
        logger.info("Created user %s", user["id"])
        return user

    def update_user(self, user_id: int, payload: UserUpdate) -> Dict[str, Any]:
        """Apply the fields set in ``payload``. An empty update returns the row unchanged."""
        fields = []
        params: List[Any] = []
        for col, val in [
            ("name", payload.name),
            ("email", payload.email.lower() if payload.email else None),
        ]:
            if val is not None:
                fields.append(f"{col}=%s")
                params.append(val)

        if not fields:
            return self.get_user(user_id)

        params.append(user_id)
        try:
            user = self._db.fetch_one(
                f"UPDATE users SET {', '.join(fields)} WHERE id=%s RETURNING {_COLUMNS}",
                params,
            )
        except DatabaseError as exc:
            if exc.pgcode == errorcodes.UNIQUE_VIOLATION:
                raise UserConflictError(payload.email.lower()) from exc
            raise
        if not user:
            raise UserNotFoundError(user_id)
        return user

    def delete_user(self, user_id: int) -> None:
        deleted = self._db.execute("DELETE FROM users WHERE id=%s RETURNING id", [user_id])
        if not deleted:
            raise UserNotFoundError(user_id)
        logger.info("Deleted user %s", user_id)
