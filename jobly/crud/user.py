"""
CRUD operations for users.

Passwords are stored as bcrypt hashes and never returned.
"""

import logging
from typing import Any, Dict, List

from sqlalchemy import Boolean
from sqlalchemy.orm import Session

from jobly.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from jobly.core.security import get_password_hash, verify_password
from jobly.crud.sql import FieldMap, execute, sql_for_partial_update
from jobly.schemas.user import UserRegisterRequest, UserUpdateRequest

logger = logging.getLogger(__name__)

FIELD_MAP = FieldMap({
    "firstName": "first_name",
    "lastName": "last_name",
    "isAdmin": "is_admin",
})

_COLUMNS = 'username, first_name AS "firstName", last_name AS "lastName", email, is_admin AS "isAdmin"'

_TYPES = {"isAdmin": Boolean}


def authenticate(db: Session, username: str, password: str) -> Dict[str, Any]:
    """
    Check a username/password pair.

    Returns:
        { username, firstName, lastName, email, isAdmin }

    Raises:
        UnauthorizedError: If the user does not exist or the password is wrong
    """
    row = execute(
        db,
        f"""SELECT {_COLUMNS}, password
            FROM users
            WHERE username = $1""",
        [username],
        columns=_TYPES,
    ).first()

    if row is not None:
        user = dict(row._mapping)
        if verify_password(password, user.pop("password")):
            return user

    logger.info(f"Failed login for {username}")
    raise UnauthorizedError("Invalid username/password")


def register(db: Session, user_data: UserRegisterRequest, is_admin: bool = False) -> Dict[str, Any]:
    """
    Create a user with a hashed password.

    Returns:
        { username, firstName, lastName, email, isAdmin }

    Raises:
        ConflictError: If the username is taken
    """
    duplicate = execute(
        db,
        """SELECT username
           FROM users
           WHERE username = $1""",
        [user_data.username],
    ).first()

    if duplicate is not None:
        raise ConflictError(f"Duplicate username: {user_data.username}")

    result = execute(
        db,
        f"""INSERT INTO users (username, password, first_name, last_name, email, is_admin)
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING {_COLUMNS}""",
        [
            user_data.username,
            get_password_hash(user_data.password),
            user_data.first_name,
            user_data.last_name,
            user_data.email,
            is_admin,
        ],
        columns=_TYPES,
    )
    user = dict(result.one()._mapping)
    db.commit()

    logger.info(f"New user registered: {user['username']} (admin: {user['isAdmin']})")
    return user


def find_all(db: Session) -> List[Dict[str, Any]]:
    """List all users ordered by username."""
    result = execute(
        db,
        f"""SELECT {_COLUMNS}
            FROM users
            ORDER BY username""",
        columns=_TYPES,
    )
    return [dict(row._mapping) for row in result]


def get(db: Session, username: str) -> Dict[str, Any]:
    """
    Raises:
        NotFoundError: If there is no such user
    """
    row = execute(
        db,
        f"""SELECT {_COLUMNS}
            FROM users
            WHERE username = $1""",
        [username],
        columns=_TYPES,
    ).first()

    if row is None:
        raise NotFoundError(f"No user: {username}")

    return dict(row._mapping)


def update(db: Session, username: str, user_data: UserUpdateRequest) -> Dict[str, Any]:
    """
    Partially update a user. A new password is hashed before it is stored.

    Raises:
        ValidationError: If no fields were set
        NotFoundError: If there is no such user
    """
    data = user_data.model_dump(exclude_unset=True, by_alias=True, mode="json")
    if "password" in data:
        data["password"] = get_password_hash(data["password"])

    set_cols, values = sql_for_partial_update(data, FIELD_MAP)
    username_idx = len(values) + 1

    row = execute(
        db,
        f"""UPDATE users
            SET {set_cols}
            WHERE username = ${username_idx}
            RETURNING {_COLUMNS}""",
        [*values, username],
        columns=_TYPES,
    ).first()

    if row is None:
        db.rollback()
        raise NotFoundError(f"No user: {username}")

    db.commit()
    logger.info(f"Updated user {username}: {set_cols}")
    return dict(row._mapping)


def remove(db: Session, username: str) -> None:
    """
    Raises:
        NotFoundError: If there is no such user
    """
    row = execute(
        db,
        """DELETE
           FROM users
           WHERE username = $1
           RETURNING username""",
        [username],
    ).first()

    if row is None:
        db.rollback()
        raise NotFoundError(f"No user: {username}")

    db.commit()
    logger.info(f"Deleted user {username}")
