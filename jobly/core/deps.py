"""
FastAPI dependencies for authentication and authorization.

A missing or invalid bearer token is treated as an anonymous request;
the guards below turn that into 401 and a missing role into 403.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError

from jobly.core.security import decode_token

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme (Authorization: Bearer <token>)
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    """Identity carried by a valid token."""
    username: str
    is_admin: bool = False


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[CurrentUser]:
    """
    Extract the user from the JWT if one was provided and is valid.

    Returns None for anonymous requests and for tokens that fail verification.
    """
    if credentials is None:
        return None

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        logger.info("Rejected invalid bearer token")
        return None

    return CurrentUser(username=payload["sub"], is_admin=bool(payload.get("is_admin", False)))


def get_current_user(
    user: Optional[CurrentUser] = Depends(get_optional_user),
) -> CurrentUser:
    """
    Require a logged-in user.

    Raises:
        HTTPException 401: If no valid token was supplied
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_admin_user(
    user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """
    Require a logged-in admin.

    Raises:
        HTTPException 401: Not logged in
        HTTPException 403: Logged in but not an admin
    """
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return user


def get_admin_or_current_user(
    username: str,
    user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """
    Require an admin, or the user named by the `username` path parameter.

    Raises:
        HTTPException 401: Not logged in
        HTTPException 403: Neither admin nor the same user
    """
    if not (user.is_admin or user.username == username):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed to access this user"
        )
    return user
