from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query, status

from user_service.dependencies import get_user_repository
from user_service.repository import UserRepository
from user_service.schemas import APIMessage, ErrorResponse, User, UserCreate, UserUpdate

router = APIRouter(prefix="/users", tags=["Users"], responses={404: {"model": ErrorResponse}})


@router.get("", response_model=List[User], summary="List users")
def list_users(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    repo: UserRepository = Depends(get_user_repository),
) -> List[Dict[str, Any]]:
    """List users ordered by id."""
    return repo.list_users(limit=limit, offset=offset)


@router.get("/{user_id}", response_model=User, summary="Get user")
def get_user(user_id: int, repo: UserRepository = Depends(get_user_repository)) -> Dict[str, Any]:
    return repo.get_user(user_id)


@router.post(
    "",
    response_model=User,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
    responses={409: {"model": ErrorResponse}},
)
def create_user(payload: UserCreate, repo: UserRepository = Depends(get_user_repository)) -> Dict[str, Any]:
    """Create a user. Emails are unique and stored lower-cased."""
    return repo.create_user(payload)


@router.patch("/{user_id}", response_model=User, summary="Update user", responses={409: {"model": ErrorResponse}})
def update_user(
    user_id: int,
    payload: UserUpdate,
    repo: UserRepository = Depends(get_user_repository),
) -> Dict[str, Any]:
    """Update the fields present in the body."""
    return repo.update_user(user_id, payload)


@router.delete("/{user_id}", response_model=APIMessage, summary="Delete user")
def delete_user(user_id: int, repo: UserRepository = Depends(get_user_repository)) -> APIMessage:
    repo.delete_user(user_id)
    return APIMessage(message="Deleted")
