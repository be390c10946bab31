"""
FastAPI dependencies for shared resources.

The database handle lives on ``app.state`` and is injected into route
handlers with Depends(); there is no module-level connection state.
"""

from fastapi import Depends, Request

from user_service.db import Database
from user_service.repository import UserRepository


def get_db(request: Request) -> Database:
    return request.app.state.db


def get_user_repository(db: Database = Depends(get_db)) -> UserRepository:
    return UserRepository(db)
