from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from user_service.db import Database
from user_service.dependencies import get_db
from user_service.schemas import ErrorResponse

router = APIRouter()


@router.get(
    "/",
    response_class=PlainTextResponse,
    tags=["Health"],
    summary="Database health check",
    responses={500: {"model": ErrorResponse}},
)
def health_check(db: Database = Depends(get_db)) -> str:
    """Report the name of the connected database as plain text."""
    return f"Database: {db.current_database()}"
