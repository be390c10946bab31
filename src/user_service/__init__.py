"""
User service package.

Modules:
- config: environment-driven settings
- db: PostgreSQL connection pooling + query helpers
- schema: startup table initialization
- errors: error taxonomy and the terminal error handlers
- repository: data access for user records
- schemas: Pydantic models for the REST API
- routers: health check and /api user routes
- main: application factory and process entry point
"""
