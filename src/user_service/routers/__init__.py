"""
API routers, mounted by main.create_app:
- health: GET / database health check
- users: user resource routes under /api
"""

from . import health, users

__all__ = ["health", "users"]
