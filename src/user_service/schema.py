"""
Startup table initialization.

Runs once before the server accepts requests. The statement uses
IF NOT EXISTS, so it is safe on every boot.
"""

import logging

from user_service.db import Database

logger = logging.getLogger(__name__)

USERS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS users (
    id          SERIAL PRIMARY KEY,
    name        VARCHAR(100) NOT NULL,
    email       VARCHAR(255) UNIQUE NOT NULL,
    created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""


# PUBLIC_INTERFACE
def ensure_user_table(db: Database) -> None:
    """Create the users table if absent. DatabaseError propagates and aborts startup."""
    db.execute(USERS_TABLE_SQL)
    logger.info("Users table is ready")
