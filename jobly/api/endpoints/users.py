"""
User management endpoints.

Admins can create and list users; a user can read, change and delete
their own account.
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import CurrentUser, get_admin_or_current_user, get_admin_user
from jobly.core.security import create_access_token
from jobly.crud import user as user_crud
from jobly.schemas.user import UserCreateRequest, UserCreateResponse, UserResponse, UserUpdateRequest

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=201, response_model=UserCreateResponse)
def create_user(
    request: UserCreateRequest,
    db: Session = Depends(get_db),
    admin_user: CurrentUser = Depends(get_admin_user)
):
    """
    Add a new user, possibly an admin, and return a token for them.

    Authorization required: admin
    """
    user = user_crud.register(db, request, is_admin=request.is_admin)
    logger.info(f"Admin {admin_user.username} created user {user['username']}")

    return {
        "user": user,
        "access_token": create_access_token(user["username"], user["isAdmin"]),
    }


@router.get("/", response_model=List[UserResponse])
def list_users(
    db: Session = Depends(get_db),
    admin_user: CurrentUser = Depends(get_admin_user)
):
    """
    List all users.

    Authorization required: admin
    """
    return user_crud.find_all(db)


@router.get("/{username}", response_model=UserResponse)
def get_user(
    username: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_admin_or_current_user)
):
    """
    Authorization required: admin or same user
    """
    return user_crud.get(db, username)


@router.patch("/{username}", response_model=UserResponse)
def update_user(
    username: str,
    request: UserUpdateRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_admin_or_current_user)
):
    """
    Partially update a user.

    Fields can be: { firstName, lastName, password, email, isAdmin }
    Only admins may change isAdmin.

    Authorization required: admin or same user
    """
    if "is_admin" in request.model_fields_set and not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins can change admin status"
        )

    return user_crud.update(db, username, request)


@router.delete("/{username}")
def delete_user(
    username: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_admin_or_current_user)
):
    """
    Authorization required: admin or same user
    """
    user_crud.remove(db, username)
    return {"deleted": username}
